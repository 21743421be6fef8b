"""SiteScope exceptions."""


class SiteScopeError(Exception):
    """Base exception for all SiteScope errors."""
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", details: dict | None = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(SiteScopeError):
    """Raised when the analysis cannot start (e.g. unreadable project root)."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="CONFIG_INVALID", details=details)


class ParseError(SiteScopeError):
    """Raised by the syntax front-end when a single file cannot be parsed."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="PARSE_FAILED", details=details)


class AnalyzeError(SiteScopeError):
    """Raised when an analysis stage fails."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="ANALYZE_FAILED", details=details)


class ReportError(SiteScopeError):
    """Raised when a saved analysis document cannot be read back."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="REPORT_INVALID", details=details)
