"""Error types raised by the audit pipeline."""


class AuditError(Exception):
    """Base class for repo-outdated errors."""


class ConfigurationError(AuditError):
    """Required configuration is missing or inconsistent."""


class TransportError(AuditError):
    """The GitHub API could not be reached or rejected the request."""


class VersionControlError(AuditError):
    """A git clone, checkout or pull failed for one repository."""

    def __init__(self, message: str, repository: str | None = None):
        super().__init__(message)
        self.repository = repository


class OutputRecoveryFailure(AuditError):
    """Package manager output could not be parsed as JSON, even after repair."""

    def __init__(self, raw_text: str):
        super().__init__("Output is not valid JSON")
        self.raw_text = raw_text
