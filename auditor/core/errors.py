"""
Error taxonomy for the auditor.

Fatal errors propagate unmodified to the CLI command or HTTP handler, which
are the only places that turn them into exit codes or HTTP statuses.
"""


class AuditorError(Exception):
    """Base class for all auditor errors."""


class ConfigurationError(AuditorError):
    """Configuration is missing or invalid; raised before any audit starts."""

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(
            "Configuration validation failed:\n" + "\n".join(self.errors)
        )


class ScanError(AuditorError):
    """The accessibility engine could not scan the page."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Scan failed for {url}: {message}")


class RenderError(AuditorError):
    """A report could not be written to disk."""


class NotificationError(AuditorError):
    """The notification webhook could not be reached. Never fatal."""


class ReportNotFoundError(AuditorError):
    """Requested report file does not exist."""


class InvalidReportPathError(AuditorError):
    """Requested report name resolves outside the report directory."""
