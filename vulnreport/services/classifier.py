"""Decide whether an occurrence can be reported and pick the package it is reported against."""

from vulnreport.schemas.occurrence import PackageIssue, RawOccurrence
from vulnreport.services.errors import NoAffectedPackagesError, NotAVulnerabilityError


def classify(record: RawOccurrence) -> PackageIssue:
    """
    Return the first affected package of a vulnerability occurrence.

    Later package issues are ignored: a multi-package occurrence becomes one issue keyed on
    the first package. Raises NotAVulnerabilityError when there is no vulnerability payload
    and NoAffectedPackagesError when it lists no packages.
    """
    vuln = record.vulnerability
    if vuln is None:
        raise NotAVulnerabilityError(
            f"only vulnerabilities can be converted (occurrence {record.name!r} is {record.kind})"
        )
    if not vuln.package_issue:
        raise NoAffectedPackagesError(
            f"only vulnerable packages can be converted (occurrence {record.name!r} lists none)"
        )
    return vuln.package_issue[0]
