"""Pydantic schemas for Container Analysis (Grafeas v1beta1) occurrences as returned by the REST API.

Field names follow the camelCase wire format via aliases. Unknown fields are kept so that
the evidence file written for an occurrence carries the full record.
"""

from pydantic import BaseModel, ConfigDict, Field

VULNERABILITY_KIND = "VULNERABILITY"

_WIRE_CONFIG = ConfigDict(extra="allow", populate_by_name=True)


class PackageVersion(BaseModel):
    """Version of an affected or fixed package."""

    model_config = _WIRE_CONFIG

    epoch: int = Field(default=0, description="Package epoch.")
    name: str = Field(default="", description="Upstream version name (e.g. 1.1.1).")
    revision: str = Field(default="", description="Package revision.")
    kind: str = Field(default="VERSION_KIND_UNSPECIFIED", description="NORMAL, MINIMUM or MAXIMUM.")


class VulnerabilityLocation(BaseModel):
    """Location (CPE + package + version) of a vulnerable or fixed package."""

    model_config = _WIRE_CONFIG

    cpe_uri: str = Field(default="", alias="cpeUri", description="CPE URI of the distribution.")
    package: str = Field(default="", description="Package name.")
    version: PackageVersion | None = Field(default=None, description="Package version.")


class PackageIssue(BaseModel):
    """One affected package within a vulnerability occurrence."""

    model_config = _WIRE_CONFIG

    affected_location: VulnerabilityLocation | None = Field(
        default=None,
        alias="affectedLocation",
        description="Where the vulnerable package lives.",
    )
    fixed_location: VulnerabilityLocation | None = Field(
        default=None,
        alias="fixedLocation",
        description="Where a fixed version is available, if any.",
    )
    severity_name: str = Field(
        default="",
        alias="severityName",
        description="Distro-assigned severity label (e.g. LOW, MEDIUM, HIGH).",
    )

    @property
    def cpe_uri(self) -> str:
        return self.affected_location.cpe_uri if self.affected_location else ""

    @property
    def package_name(self) -> str:
        return self.affected_location.package if self.affected_location else ""

    @property
    def version_name(self) -> str:
        if self.affected_location is None or self.affected_location.version is None:
            return ""
        return self.affected_location.version.name


class RelatedUrl(BaseModel):
    """Reference URL attached to a vulnerability note."""

    model_config = _WIRE_CONFIG

    url: str = Field(default="", description="Link target.")
    label: str = Field(default="", description="Link label.")


class VulnerabilityDetails(BaseModel):
    """Vulnerability payload of an occurrence."""

    model_config = _WIRE_CONFIG

    type: str = Field(default="", description="Package type (e.g. os).")
    severity: str = Field(default="SEVERITY_UNSPECIFIED", description="Note-level severity.")
    cvss_score: float | None = Field(default=None, alias="cvssScore", description="CVSS score.")
    package_issue: list[PackageIssue] = Field(
        default_factory=list,
        alias="packageIssue",
        description="Affected packages; only the first is reported.",
    )
    short_description: str = Field(default="", alias="shortDescription", description="Usually the CVE id.")
    long_description: str = Field(default="", alias="longDescription", description="Full description.")
    related_urls: list[RelatedUrl] = Field(
        default_factory=list,
        alias="relatedUrls",
        description="Reference URLs; one event per URL.",
    )
    effective_severity: str = Field(
        default="SEVERITY_UNSPECIFIED",
        alias="effectiveSeverity",
        description="Severity after distro adjustment.",
    )


class Resource(BaseModel):
    """Resource the occurrence is attached to."""

    model_config = _WIRE_CONFIG

    uri: str = Field(default="", description="Resource URL (https://<image>@<digest>).")


class RawOccurrence(BaseModel):
    """One occurrence record as listed by Container Analysis."""

    model_config = _WIRE_CONFIG

    name: str = Field(default="", description="Resource name: projects/<p>/occurrences/<id>.")
    resource: Resource | None = Field(default=None, description="Image the occurrence refers to.")
    note_name: str = Field(default="", alias="noteName", description="Note this occurrence instantiates.")
    kind: str = Field(default="NOTE_KIND_UNSPECIFIED", description="Occurrence kind (e.g. VULNERABILITY).")
    remediation: str = Field(default="", description="Remediation hint, if any.")
    create_time: str = Field(default="", alias="createTime", description="RFC 3339 creation time.")
    update_time: str = Field(default="", alias="updateTime", description="RFC 3339 update time.")
    vulnerability: VulnerabilityDetails | None = Field(
        default=None,
        description="Vulnerability payload; absent for other kinds.",
    )

    def to_canonical_json(self) -> str:
        """Serialize with wire field names, omitting unset/default values, two-space indent."""
        return self.model_dump_json(by_alias=True, exclude_defaults=True, indent=2)
