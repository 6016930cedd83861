"""Errors raised while building a Coverity report. Every stage fails fast with one of these."""


class ReportError(Exception):
    """Base class for all report failures; carries a human-readable message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CredentialsError(ReportError):
    """Raised when Google application default credentials cannot be obtained."""


class TagNotFoundError(ReportError):
    """Raised when no manifest in the repository carries the requested tag."""


class ImageResolutionError(ReportError):
    """Raised when the registry cannot be queried (transport, auth, bad response)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class OccurrenceStreamError(ReportError):
    """Raised when listing occurrences fails (transport, auth, bad response)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RecordRejectedError(ReportError):
    """Raised when an occurrence cannot be converted into an issue."""


class NotAVulnerabilityError(RecordRejectedError):
    """Raised when an occurrence carries no vulnerability payload."""


class NoAffectedPackagesError(RecordRejectedError):
    """Raised when a vulnerability lists no affected packages."""


class EvidenceWriteError(ReportError):
    """Raised when an evidence file cannot be created or written."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


class ResultsEncodeError(ReportError):
    """Raised when the results bundle cannot be serialized or written."""
