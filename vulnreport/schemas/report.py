"""Pydantic schemas for the report generation API."""

from pydantic import BaseModel, Field, field_validator


class ReportRequest(BaseModel):
    """Request body for POST /api/v1/reports. Omitted fields fall back to settings."""

    service: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description='Service (repository) to report on, e.g. "ssn-pdfservice".',
    )
    project: str | None = Field(default=None, max_length=255, description="Google project ID.")
    root: str | None = Field(default=None, max_length=255, description="Registry root (e.g. eu.gcr.io).")
    tag: str | None = Field(default=None, max_length=128, description="Docker tag to report on.")

    @field_validator("service")
    @classmethod
    def validate_service(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("service must be set")
        return v.strip()
