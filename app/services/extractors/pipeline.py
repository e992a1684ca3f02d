"""Extraction pipeline orchestrating the fast path and browser rendering."""

from __future__ import annotations

import asyncio
import dataclasses
import logging

from app.services.extractors.base import (
    ExtractionConfig,
    ExtractionOutcome,
    FastPathFetcher,
    Platform,
    RenderingBackend,
)
from app.services.extractors.exceptions import InvalidUrlError, RenderError
from app.services.extractors.platform import build_request
from app.services.extractors.strategies import extract_from_document

logger = logging.getLogger(__name__)


class ExtractionPipeline:
    """Turn a post URL into an :class:`ExtractionOutcome`.

    Cascade per request:
    1. Validate the URL (no network activity on failure).
    2. Twitter/X only: try the oEmbed fast path; any failure falls through.
    3. Render the page once with the rendering backend.
    4. Hand the DOM to the platform's extraction strategy.

    There are no internal retries. The backends default to
    :class:`OEmbedFetcher` and :class:`PlaywrightRenderer` and are lazy-loaded
    so that Playwright is only imported when rendering is actually needed.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        renderer: RenderingBackend | None = None,
        fast_path: FastPathFetcher | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self._renderer = renderer
        self._fast_path = fast_path

    @property
    def renderer(self) -> RenderingBackend:
        if self._renderer is None:
            from app.services.extractors.renderer import PlaywrightRenderer

            self._renderer = PlaywrightRenderer(self.config)
        return self._renderer

    @property
    def fast_path(self) -> FastPathFetcher:
        if self._fast_path is None:
            from app.services.extractors.fast_path import OEmbedFetcher

            self._fast_path = OEmbedFetcher(self.config)
        return self._fast_path

    async def extract(self, url: str) -> ExtractionOutcome:
        """Extract post text from ``url``.

        Never raises for extraction failures; every failure is a typed
        outcome. Task cancellation still propagates to the caller.
        """
        try:
            request = build_request(url)
        except InvalidUrlError as e:
            logger.warning("Rejected URL %r: %s", url, e)
            return ExtractionOutcome.invalid_url(str(e))

        platform = request.platform_hint
        timeout = self.config.extraction_timeout_seconds
        try:
            if timeout:
                return await asyncio.wait_for(
                    self._run(request.url, platform), timeout=timeout
                )
            return await self._run(request.url, platform)
        except asyncio.TimeoutError:
            logger.warning("Extraction timed out after %ss for %s", timeout, request.url)
            return ExtractionOutcome.render_error(
                platform, f"Timed out after {timeout} seconds"
            )

    async def _run(self, url: str, platform: Platform) -> ExtractionOutcome:
        if platform is Platform.TWITTER_X:
            text = await self._try_fast_path(url)
            if text:
                return ExtractionOutcome.found(text, platform, method="oembed")
            logger.warning("oEmbed fast path failed, falling back to rendering for %s", url)

        try:
            document = await self.renderer.render(url, platform)
        except RenderError as e:
            logger.warning("Rendering failed for %s: %s", url, e)
            return ExtractionOutcome.render_error(platform, str(e))
        except Exception as e:
            logger.exception("Unexpected rendering error for %s", url)
            return ExtractionOutcome.render_error(platform, f"Unexpected error: {e}")

        try:
            outcome = extract_from_document(document)
        except Exception:
            logger.exception("Unexpected error extracting text from %s", url)
            return ExtractionOutcome.not_found(platform, "Extraction failed")

        if outcome.is_found:
            return dataclasses.replace(outcome, method="playwright")
        return outcome

    async def _try_fast_path(self, url: str) -> str | None:
        try:
            text = await self.fast_path.fetch(url)
        except Exception as e:
            logger.warning("Fast path raised for %s: %s", url, e)
            return None
        if text is None or not text.strip():
            return None
        return text.strip()
