"""Custom exceptions for the pulsetag service.

Extraction errors live in :mod:`app.services.extractors.exceptions`; this
module holds the errors of the hashtag (AI provider) collaborator.
"""

from __future__ import annotations


class HashtagEngineError(Exception):
    """Base exception for hashtag generation errors."""

    pass


class ProviderUnavailableError(HashtagEngineError):
    """Raised when the AI provider cannot be reached or rejects the call.

    Covers a missing API key, transport failures and non-2xx responses.

    Error Code: PROVIDER_UNAVAILABLE
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ProviderResponseError(HashtagEngineError):
    """Raised when the provider answers but the completion cannot be parsed.

    Error Code: PROVIDER_BAD_RESPONSE
    """

    def __init__(self, message: str, content: str = "") -> None:
        self.content = content
        super().__init__(message)
