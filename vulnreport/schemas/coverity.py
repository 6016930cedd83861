"""Pydantic schemas for the Coverity cov-import-results input bundle.

Field names and constants are consumed by cov-import-results and must not change.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RESULTS_FORMAT = "cov-import-results input"
RESULTS_VERSION = 1
SOURCE_ENCODING = "UTF-8"

ImpactLevel = Literal["Low", "Medium", "High"]

_WIRE_CONFIG = ConfigDict(populate_by_name=True)


class Header(BaseModel):
    """Bundle header identifying the import format."""

    version: int = Field(default=RESULTS_VERSION, description="Format version.")
    format: str = Field(default=RESULTS_FORMAT, description="Format name.")


class Source(BaseModel):
    """Declares the encoding of one evidence file."""

    file: str = Field(..., min_length=1, description="Absolute evidence file path (forward slashes).")
    encoding: str = Field(default=SOURCE_ENCODING, description="Evidence file encoding.")


class Property(BaseModel):
    """Severity/impact metadata of an issue."""

    model_config = _WIRE_CONFIG

    type: str = Field(..., description="Issue type shown in Coverity.")
    category: str = Field(..., description="e.g. 'High impact component in container'.")
    impact: ImpactLevel = Field(..., description="Coverity impact: Low, Medium or High.")
    cwe: int = Field(..., description="CWE identifier.")
    long_description: str = Field(..., alias="longDescription", description="'<short>: <long>' description.")
    local_effect: str = Field(..., alias="localEffect", description="Short effect statement.")
    issue_kind: str = Field(..., alias="issueKind", description="Coverity issue kind.")


class Event(BaseModel):
    """One piece of evidence linking an issue to a reference URL."""

    model_config = _WIRE_CONFIG

    tag: str = Field(..., description="Event tag.")
    description: str = Field(..., description="Event description.")
    file: str = Field(..., description="Absolute path of the per-occurrence evidence file.")
    link_url: str = Field(..., alias="linkUrl", description="Reference URL.")
    link_text: str = Field(..., alias="linkText", description="Reference label.")
    line: int = Field(default=1, description="Line number; scanners report none, so always 1.")
    main: bool = Field(default=True, description="Main event flag.")


class Issue(BaseModel):
    """One normalized finding in the bundle."""

    checker: str = Field(..., description="Checker name.")
    extra: str = Field(..., description="Package name; distinguishes issues with the same checker.")
    file: str = Field(..., min_length=1, description="Absolute evidence file path (forward slashes).")
    function: str = Field(default="", description="Always empty; container findings have no function.")
    subcategory: str = Field(..., description="Occurrence kind (e.g. VULNERABILITY).")
    properties: Property
    events: list[Event] = Field(default_factory=list, description="One event per related URL.")


class Results(BaseModel):
    """Complete cov-import-results bundle."""

    header: Header = Field(default_factory=Header)
    sources: list[Source] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize with the importer's field names."""
        return self.model_dump_json(by_alias=True, indent=2)
