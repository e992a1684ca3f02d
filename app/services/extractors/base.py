"""Core types for the post-text extraction pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.core.config import Settings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class ExtractionConfig:
    """Policy parameters for the extraction pipeline.

    Delays are expressed in milliseconds, timeouts in seconds unless the
    name says otherwise. Tests build this directly with zero delays.
    """

    user_agent: str = DEFAULT_USER_AGENT
    linkedin_cookies: str | None = None
    playwright_headless: bool = True
    navigation_timeout_seconds: int = 30
    twitter_navigation_timeout_seconds: int = 60
    settle_delay_ms: int = 2000
    twitter_settle_delay_ms: int = 5000
    tweet_selector_timeout_ms: int = 10000
    pre_navigation_delay_min_ms: int = 1000
    pre_navigation_delay_max_ms: int = 3000
    fast_path_timeout_seconds: float = 15.0
    twitter_oembed_endpoint: str = "https://publish.twitter.com/oembed"
    extraction_timeout_seconds: float | None = 120.0

    @classmethod
    def from_settings(cls, settings: Settings) -> ExtractionConfig:
        """Build the pipeline policy from service settings."""
        return cls(
            user_agent=settings.user_agent,
            linkedin_cookies=settings.linkedin_cookies or None,
            playwright_headless=settings.playwright_headless,
            navigation_timeout_seconds=settings.navigation_timeout_seconds,
            twitter_navigation_timeout_seconds=settings.twitter_navigation_timeout_seconds,
            settle_delay_ms=settings.settle_delay_ms,
            twitter_settle_delay_ms=settings.twitter_settle_delay_ms,
            tweet_selector_timeout_ms=settings.tweet_selector_timeout_ms,
            pre_navigation_delay_min_ms=settings.pre_navigation_delay_min_ms,
            pre_navigation_delay_max_ms=settings.pre_navigation_delay_max_ms,
            fast_path_timeout_seconds=settings.fast_path_timeout_seconds,
            twitter_oembed_endpoint=settings.twitter_oembed_endpoint,
            extraction_timeout_seconds=settings.extraction_timeout_seconds,
        )


class Platform(str, enum.Enum):
    """Source platform of a post, derived from the URL."""

    LINKEDIN = "linkedin"
    TWITTER_X = "twitter_x"
    GENERIC = "generic"


@dataclass(frozen=True)
class ExtractionRequest:
    """A single validated extraction request."""

    url: str
    platform_hint: Platform


class MatchMode(str, enum.Enum):
    """How a selector rule treats the nodes its pattern matches.

    FIRST: only the first matched node is considered.
    ANY: the first matched node whose text qualifies wins.
    ALL: every qualifying node is kept and the texts are space-joined.
    """

    FIRST = "first"
    ANY = "any"
    ALL = "all"


@dataclass(frozen=True)
class SelectorRule:
    """A CSS pattern plus the text length a match must exceed.

    ``inner`` narrows each matched node to its first descendant matching one
    of the given selectors, tried in order.
    """

    pattern: str
    min_length: int
    mode: MatchMode = MatchMode.FIRST
    inner: tuple[str, ...] = ()


@dataclass(frozen=True)
class RenderedDocument:
    """Serialized DOM snapshot for one request."""

    url: str
    html: str
    platform: Platform
    status: int | None = None


class OutcomeKind(str, enum.Enum):
    """Tag of an :class:`ExtractionOutcome`."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    AMBIGUOUS_PROFILE_PAGE = "ambiguous_profile_page"
    INVALID_URL = "invalid_url"
    RENDER_ERROR = "render_error"


@dataclass(frozen=True)
class ExtractionOutcome:
    """Typed result of an extraction attempt."""

    kind: OutcomeKind
    platform: Platform | None = None
    text: str | None = None
    detail: str = ""
    method: str = ""

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.FOUND and not (self.text and self.text.strip()):
            raise ValueError("FOUND outcome requires non-empty text")

    @property
    def is_found(self) -> bool:
        return self.kind is OutcomeKind.FOUND

    @classmethod
    def found(
        cls, text: str, platform: Platform, method: str = ""
    ) -> ExtractionOutcome:
        return cls(OutcomeKind.FOUND, platform=platform, text=text, method=method)

    @classmethod
    def not_found(cls, platform: Platform, detail: str = "") -> ExtractionOutcome:
        return cls(OutcomeKind.NOT_FOUND, platform=platform, detail=detail)

    @classmethod
    def ambiguous_profile(cls, platform: Platform) -> ExtractionOutcome:
        return cls(
            OutcomeKind.AMBIGUOUS_PROFILE_PAGE,
            platform=platform,
            detail="Profile page detected instead of a single post",
        )

    @classmethod
    def invalid_url(cls, detail: str) -> ExtractionOutcome:
        return cls(OutcomeKind.INVALID_URL, detail=detail)

    @classmethod
    def render_error(cls, platform: Platform, detail: str) -> ExtractionOutcome:
        return cls(OutcomeKind.RENDER_ERROR, platform=platform, detail=detail)


class RenderingBackend(Protocol):
    """Protocol for anything that can turn a URL into a rendered DOM."""

    async def render(self, url: str, platform: Platform) -> RenderedDocument:
        """Render ``url`` and return its DOM snapshot.

        Raises:
            RenderError: If the browser fails to launch or navigate.
        """
        ...


class FastPathFetcher(Protocol):
    """Protocol for lightweight, network-only text retrieval."""

    async def fetch(self, url: str) -> str | None:
        """Return post text for ``url`` or None. Never raises."""
        ...

