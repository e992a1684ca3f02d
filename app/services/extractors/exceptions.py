"""Exception hierarchy for post-text extraction."""

from __future__ import annotations


class ExtractionError(Exception):
    """Base exception for all extraction errors."""

    pass


class InvalidUrlError(ExtractionError):
    """Raised when a URL is not absolute or its scheme is not http/https."""

    pass


class RenderError(ExtractionError):
    """Raised for browser failures (launch, navigation, timeout)."""

    def __init__(self, message: str, url: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.cause = cause
