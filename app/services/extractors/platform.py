"""URL validation and platform classification."""

from __future__ import annotations

from urllib.parse import urlparse

from app.services.extractors.base import ExtractionRequest, Platform
from app.services.extractors.exceptions import InvalidUrlError

ALLOWED_SCHEMES = frozenset({"http", "https"})
MAX_URL_LENGTH = 2048

# Registered domains; subdomains (www., mobile.) match too.
LINKEDIN_DOMAINS = ("linkedin.com",)
TWITTER_DOMAINS = ("twitter.com", "x.com")


def validate_url(url: str) -> str:
    """Return ``url`` stripped of surrounding whitespace if it is usable.

    Raises:
        InvalidUrlError: If the URL is not absolute or uses a scheme other
            than http/https, or is longer than MAX_URL_LENGTH.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("Invalid URL format")

    candidate = url.strip()
    if len(candidate) > MAX_URL_LENGTH:
        raise InvalidUrlError(f"URL exceeds {MAX_URL_LENGTH} characters")
    try:
        parsed = urlparse(candidate)
    except ValueError as e:
        raise InvalidUrlError("Invalid URL format") from e

    if not parsed.scheme or not parsed.netloc:
        raise InvalidUrlError("Invalid URL format")
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError("Only HTTP and HTTPS URLs are supported.")

    return candidate


def _host_matches(host: str, domains: tuple[str, ...]) -> bool:
    return any(host == domain or host.endswith("." + domain) for domain in domains)


def classify_platform(url: str) -> Platform:
    """Classify ``url`` by case-insensitive host match on known domains."""
    host = (urlparse(url).hostname or "").lower()
    if _host_matches(host, LINKEDIN_DOMAINS):
        return Platform.LINKEDIN
    if _host_matches(host, TWITTER_DOMAINS):
        return Platform.TWITTER_X
    return Platform.GENERIC


def build_request(url: str) -> ExtractionRequest:
    """Validate ``url`` and pair it with its platform."""
    valid_url = validate_url(url)
    return ExtractionRequest(url=valid_url, platform_hint=classify_platform(valid_url))


def is_single_post_url(url: str, platform: Platform) -> bool:
    """Return whether a Twitter/X URL points at a single status.

    Other platforms have no page-type check and always return True.
    """
    if platform is not Platform.TWITTER_X:
        return True
    return "/status/" in url.lower()
