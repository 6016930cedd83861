"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Registry lookup defaults (CLI flags and API body override these)
    GCP_PROJECT: str = "dev-vml-cm"
    GCR_ROOT: str = "eu.gcr.io"
    DEFAULT_TAG: str = "master"

    # Container Analysis (Grafeas v1beta1 REST)
    CONTAINER_ANALYSIS_BASE_URL: str = "https://containeranalysis.googleapis.com"
    OCCURRENCE_PAGE_SIZE: int = 100
    REQUEST_TIMEOUT_SEC: float = 30.0

    # Directory that receives one evidence file per issue
    EVIDENCE_DIR: str = "."

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {list(VALID_LOG_LEVELS)}, got {v!r}")
        return level

    @field_validator("GCP_PROJECT", "GCR_ROOT", "DEFAULT_TAG")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("GCP_PROJECT, GCR_ROOT and DEFAULT_TAG must be non-empty")
        return v.strip()

    @field_validator("CONTAINER_ANALYSIS_BASE_URL")
    @classmethod
    def validate_container_analysis_base_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("CONTAINER_ANALYSIS_BASE_URL must be set and non-empty")
        s = v.strip().lower()
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError(
                "CONTAINER_ANALYSIS_BASE_URL must use http or https (e.g. https://containeranalysis.googleapis.com)"
            )
        return v.strip().rstrip("/")

    @field_validator("OCCURRENCE_PAGE_SIZE")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1 or v > 1000:
            raise ValueError("OCCURRENCE_PAGE_SIZE must be between 1 and 1000")
        return v

    @field_validator("REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0 or v > 300:
            raise ValueError(
                "REQUEST_TIMEOUT_SEC must be greater than 0 and at most 300"
            )
        return v

    @field_validator("EVIDENCE_DIR")
    @classmethod
    def validate_evidence_dir(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("EVIDENCE_DIR must be set and non-empty")
        return v.strip()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
