"""Map one vulnerability occurrence to a Coverity issue and write its evidence files.

Occurrence + first affected package → Issue (checker metadata, impact, description,
one event per related URL), Source, and two evidence files holding the raw occurrence.
"""

import logging
import os
import posixpath
import re
from typing import NamedTuple

from vulnreport.schemas.coverity import (
    Event,
    ImpactLevel,
    Issue,
    Property,
    SOURCE_ENCODING,
    Source,
)
from vulnreport.schemas.occurrence import PackageIssue, RawOccurrence
from vulnreport.services.evidence import write_evidence

logger = logging.getLogger(__name__)

CHECKER = "VULNERABLE_CONTAINER_COMPONENT"
CWE_VULNERABLE_COMPONENT = 937
ISSUE_KIND = "SECURITY"
ISSUE_TYPE = "Use of vulnerable container component"
EVENT_TAG = "vulnerable_component"
EVIDENCE_SUFFIX = ".json"

# Characters not allowed in Windows file names; '/' separates the CPE from the package.
_FILENAME_SUBSTITUTIONS = str.maketrans(
    {"/": "_", **{c: "." for c in '+,;=[]\\?|<>:*"'}}
)

_WORD_START = re.compile(r"(?<!\w)\w")


class MappedIssue(NamedTuple):
    """Result of mapping one occurrence: the issue, its source, both evidence paths and the files it created."""

    issue: Issue
    source: Source
    evidence_path: str
    event_path: str
    created_paths: tuple[str, ...] = ()


def sanitize_filename(name: str) -> str:
    """Replace '/' with '_' and Windows-reserved punctuation with '.'; other characters are kept."""
    return name.translate(_FILENAME_SUBSTITUTIONS)


def title_case(text: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched (libXML -> LibXML)."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)


def coverity_impact(severity: str | None) -> ImpactLevel:
    """Map a scanner severity label to Coverity impact; anything but low/high is Medium."""
    normalized = (severity or "").lower()
    if normalized == "low":
        return "Low"
    if normalized == "high":
        return "High"
    return "Medium"


def _absolute(path: str) -> str:
    """Absolute path with forward slashes regardless of platform."""
    return os.path.abspath(path).replace("\\", "/")


def evidence_filename(package: PackageIssue) -> str:
    """Deterministic evidence file name from the package coordinates."""
    raw = f"{package.cpe_uri}/{package.package_name}:{package.version_name}_{EVIDENCE_SUFFIX}"
    return sanitize_filename(raw)


def evidence_path(package: PackageIssue, base_dir: str) -> str:
    return _absolute(os.path.join(base_dir, evidence_filename(package)))


def event_path(record: RawOccurrence, base_dir: str) -> str:
    """Path of the per-occurrence evidence file, named after the occurrence id."""
    basename = posixpath.basename(record.name.rstrip("/")) or "."
    return _absolute(os.path.join(base_dir, basename + EVIDENCE_SUFFIX))


def _build_events(record: RawOccurrence, package: PackageIssue, file_path: str) -> list[Event]:
    description = f"{title_case(package.package_name)} has known vulnerabilities"
    return [
        Event(
            tag=EVENT_TAG,
            description=description,
            file=file_path,
            link_url=related.url,
            link_text=related.label,
            line=1,
            main=True,
        )
        for related in record.vulnerability.related_urls
    ]


def map_occurrence(record: RawOccurrence, package: PackageIssue, base_dir: str) -> MappedIssue:
    """
    Build the Coverity issue for a classified occurrence and write its evidence.

    The canonical JSON of the occurrence is written to both the package-derived evidence
    path (referenced by the issue and its source) and the occurrence-id path (referenced
    by every event). Raises EvidenceWriteError if either file cannot be written.
    """
    vuln = record.vulnerability
    issue_file = evidence_path(package, base_dir)
    events_file = event_path(record, base_dir)

    logger.info(
        "writing file",
        extra={"module_path": issue_file, "event_path": events_file},
    )
    created = write_evidence(record.to_canonical_json(), [issue_file, events_file])

    severity = package.severity_name
    issue = Issue(
        checker=CHECKER,
        extra=package.package_name,
        file=issue_file,
        function="",
        subcategory=record.kind,
        properties=Property(
            type=ISSUE_TYPE,
            category=f"{title_case(severity.lower())} impact component in container",
            impact=coverity_impact(severity),
            cwe=CWE_VULNERABLE_COMPONENT,
            long_description=f"{vuln.short_description}: {vuln.long_description}",
            local_effect=f"{package.package_name} has known vulnerabilities",
            issue_kind=ISSUE_KIND,
        ),
        events=_build_events(record, package, events_file),
    )
    source = Source(file=issue.file, encoding=SOURCE_ENCODING)
    return MappedIssue(
        issue=issue,
        source=source,
        evidence_path=issue_file,
        event_path=events_file,
        created_paths=tuple(created),
    )
