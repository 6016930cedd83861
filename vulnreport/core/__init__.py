"""Core app configuration."""

from vulnreport.core.config import get_settings, settings

__all__ = ["get_settings", "settings"]
