"""Pydantic schemas: Grafeas occurrences in, Coverity results bundle out."""

from vulnreport.schemas.coverity import (
    Event,
    Header,
    ImpactLevel,
    Issue,
    Property,
    Results,
    Source,
)
from vulnreport.schemas.health import HealthResponse
from vulnreport.schemas.occurrence import (
    PackageIssue,
    PackageVersion,
    RawOccurrence,
    RelatedUrl,
    VulnerabilityDetails,
    VulnerabilityLocation,
)
from vulnreport.schemas.report import ReportRequest

__all__ = [
    "Event",
    "Header",
    "HealthResponse",
    "ImpactLevel",
    "Issue",
    "PackageIssue",
    "PackageVersion",
    "Property",
    "RawOccurrence",
    "RelatedUrl",
    "ReportRequest",
    "Results",
    "Source",
    "VulnerabilityDetails",
    "VulnerabilityLocation",
]
