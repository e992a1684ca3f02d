"""Post-text extraction pipeline for social-media and generic URLs.

This module provides a cascading extraction pipeline:
1. oEmbed fast path (Twitter/X only) - no browser, fast and rarely blocked
2. Playwright rendering - full client-side rendering in an isolated browser
3. Per-platform selector strategies - ordered rules, first qualifying match wins

Usage:
    from app.services.extractors import ExtractionPipeline

    pipeline = ExtractionPipeline(config)
    outcome = await pipeline.extract("https://x.com/user/status/123")
    if outcome.is_found:
        print(outcome.text)

Note: Playwright browsers must be installed separately:
    playwright install chromium
"""

from app.services.extractors.base import (
    ExtractionConfig,
    ExtractionOutcome,
    ExtractionRequest,
    FastPathFetcher,
    MatchMode,
    OutcomeKind,
    Platform,
    RenderedDocument,
    RenderingBackend,
    SelectorRule,
)
from app.services.extractors.exceptions import (
    ExtractionError,
    InvalidUrlError,
    RenderError,
)
from app.services.extractors.fast_path import OEmbedFetcher
from app.services.extractors.pipeline import ExtractionPipeline
from app.services.extractors.platform import classify_platform, validate_url
from app.services.extractors.renderer import PlaywrightRenderer

__all__ = [
    # Types
    "ExtractionConfig",
    "ExtractionOutcome",
    "ExtractionRequest",
    "MatchMode",
    "OutcomeKind",
    "Platform",
    "RenderedDocument",
    "SelectorRule",
    # Protocols
    "FastPathFetcher",
    "RenderingBackend",
    # Components
    "ExtractionPipeline",
    "OEmbedFetcher",
    "PlaywrightRenderer",
    "classify_platform",
    "validate_url",
    # Exceptions
    "ExtractionError",
    "InvalidUrlError",
    "RenderError",
]
