"""Tests for the extraction pipeline orchestrator."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from app.services.extractors.base import ExtractionConfig, OutcomeKind, Platform
from app.services.extractors.exceptions import RenderError
from app.services.extractors.fast_path import OEmbedFetcher
from app.services.extractors.pipeline import ExtractionPipeline
from app.services.extractors.renderer import PlaywrightRenderer
from fakes import FakeFastPath, FakeRenderer

TWEET_URL = "https://x.com/user/status/123"
LINKEDIN_URL = "https://linkedin.com/feed/update/urn:li:activity:1"

TWEET_HTML = """
<html><body>
<article data-testid="tweet">
<div data-testid="tweetText" lang="en" dir="auto">Rendered tweet about #python</div>
</article>
</body></html>
"""

PROFILE_HTML = """
<html><body>
<div data-testid="profileHeader">Jane Doe</div>
<div data-testid="tweetText">A pinned tweet that is plenty long</div>
</body></html>
"""

ARTICLE_80 = "Our quarterly results are in and the numbers look better than ever before".ljust(80, "!")


class TestInvalidUrls:
    """URLs failing validation never reach the network."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not-a-url",
            "/relative/path",
            "ftp://x.com/user/status/1",
            "javascript:alert(1)",
            "mailto:someone@linkedin.com",
        ],
    )
    async def test_returns_invalid_url_without_network(self, make_pipeline, url: str) -> None:
        renderer = FakeRenderer(html=TWEET_HTML)
        fast_path = FakeFastPath(text="should not be used")
        pipeline = make_pipeline(renderer, fast_path)

        outcome = await pipeline.extract(url)

        assert outcome.kind is OutcomeKind.INVALID_URL
        assert outcome.detail
        assert renderer.calls == []
        assert fast_path.calls == []


class TestTwitterCascade:
    """Fast path first, rendering only when it fails."""

    @pytest.mark.asyncio
    async def test_fast_path_success_skips_rendering(self, make_pipeline) -> None:
        renderer = FakeRenderer(html=TWEET_HTML)
        fast_path = FakeFastPath(text="Hello #world")
        pipeline = make_pipeline(renderer, fast_path)

        outcome = await pipeline.extract(TWEET_URL)

        assert outcome.kind is OutcomeKind.FOUND
        assert outcome.text == "Hello #world"
        assert outcome.method == "oembed"
        assert outcome.platform is Platform.TWITTER_X
        assert fast_path.calls == [TWEET_URL]
        assert renderer.calls == []

    @pytest.mark.asyncio
    async def test_fast_path_none_renders_once(self, make_pipeline) -> None:
        renderer = FakeRenderer(html=TWEET_HTML)
        fast_path = FakeFastPath(text=None)
        pipeline = make_pipeline(renderer, fast_path)

        outcome = await pipeline.extract(TWEET_URL)

        assert outcome.kind is OutcomeKind.FOUND
        assert outcome.text == "Rendered tweet about #python"
        assert outcome.method == "playwright"
        assert renderer.calls == [(TWEET_URL, Platform.TWITTER_X)]

    @pytest.mark.asyncio
    async def test_fast_path_exception_is_absorbed(self, make_pipeline) -> None:
        renderer = FakeRenderer(html=TWEET_HTML)
        fast_path = FakeFastPath(error=RuntimeError("unexpected"))
        pipeline = make_pipeline(renderer, fast_path)

        outcome = await pipeline.extract(TWEET_URL)

        assert outcome.kind is OutcomeKind.FOUND
        assert len(renderer.calls) == 1

    @pytest.mark.asyncio
    async def test_blank_fast_path_text_falls_through(self, make_pipeline) -> None:
        renderer = FakeRenderer(html=TWEET_HTML)
        fast_path = FakeFastPath(text="   ")
        pipeline = make_pipeline(renderer, fast_path)

        outcome = await pipeline.extract(TWEET_URL)

        assert outcome.method == "playwright"
        assert len(renderer.calls) == 1

    @pytest.mark.asyncio
    async def test_profile_page_is_ambiguous(self, make_pipeline) -> None:
        renderer = FakeRenderer(html=PROFILE_HTML)
        pipeline = make_pipeline(renderer, FakeFastPath(text=None))

        outcome = await pipeline.extract("https://x.com/jane")

        assert outcome.kind is OutcomeKind.AMBIGUOUS_PROFILE_PAGE
        assert outcome.text is None


class TestOtherPlatforms:
    """LinkedIn and generic URLs go straight to rendering."""

    @pytest.mark.asyncio
    async def test_linkedin_article_fallback(self, make_pipeline) -> None:
        assert len(ARTICLE_80) == 80
        renderer = FakeRenderer(html=f"<html><body><article>{ARTICLE_80}</article></body></html>")
        fast_path = FakeFastPath(text="unused")
        pipeline = make_pipeline(renderer, fast_path)

        outcome = await pipeline.extract(LINKEDIN_URL)

        assert outcome.kind is OutcomeKind.FOUND
        assert outcome.text == ARTICLE_80
        assert outcome.platform is Platform.LINKEDIN
        assert fast_path.calls == []
        assert renderer.calls == [(LINKEDIN_URL, Platform.LINKEDIN)]

    @pytest.mark.asyncio
    async def test_generic_not_found(self, make_pipeline) -> None:
        renderer = FakeRenderer(html="<html><body><div>x</div></body></html>")
        pipeline = make_pipeline(renderer)

        outcome = await pipeline.extract("https://example.com/empty")

        assert outcome.kind is OutcomeKind.NOT_FOUND
        assert outcome.platform is Platform.GENERIC


class TestFailureNormalization:
    """Rendering and strategy failures become typed outcomes."""

    @pytest.mark.asyncio
    async def test_render_error(self, make_pipeline, render_error: RenderError) -> None:
        renderer = FakeRenderer(error=render_error)
        pipeline = make_pipeline(renderer)

        outcome = await pipeline.extract("https://example.com")

        assert outcome.kind is OutcomeKind.RENDER_ERROR
        assert "Failed to launch browser" in outcome.detail
        assert renderer.opened == renderer.closed == 1

    @pytest.mark.asyncio
    async def test_unexpected_render_exception(self, make_pipeline) -> None:
        renderer = FakeRenderer(error=RuntimeError("kaboom"))
        pipeline = make_pipeline(renderer)

        outcome = await pipeline.extract(LINKEDIN_URL)

        assert outcome.kind is OutcomeKind.RENDER_ERROR
        assert outcome.platform is Platform.LINKEDIN

    @pytest.mark.asyncio
    async def test_failed_render_is_not_retried(self, make_pipeline, render_error) -> None:
        renderer = FakeRenderer(error=render_error)
        pipeline = make_pipeline(renderer, FakeFastPath(text=None))

        await pipeline.extract(TWEET_URL)

        assert len(renderer.calls) == 1

    @pytest.mark.asyncio
    async def test_strategy_exception_becomes_not_found(self, make_pipeline) -> None:
        pipeline = make_pipeline(FakeRenderer(html="<p>anything at all</p>"))

        with patch(
            "app.services.extractors.pipeline.extract_from_document",
            side_effect=ValueError("parser blew up"),
        ):
            outcome = await pipeline.extract("https://example.com")

        assert outcome.kind is OutcomeKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_overall_timeout(self) -> None:
        config = ExtractionConfig(
            settle_delay_ms=0,
            pre_navigation_delay_min_ms=0,
            pre_navigation_delay_max_ms=0,
            extraction_timeout_seconds=0.05,
        )
        renderer = FakeRenderer(html="<p>too late to matter</p>", delay=5)
        pipeline = ExtractionPipeline(config, renderer=renderer, fast_path=FakeFastPath())

        outcome = await pipeline.extract("https://example.com")

        assert outcome.kind is OutcomeKind.RENDER_ERROR
        assert "Timed out" in outcome.detail
        assert renderer.opened == renderer.closed == 1

    @pytest.mark.asyncio
    async def test_cancellation_propagates_and_releases(self, make_pipeline) -> None:
        renderer = FakeRenderer(html="<p>never returned</p>", delay=5)
        pipeline = make_pipeline(renderer)

        task = asyncio.create_task(pipeline.extract("https://example.com"))
        while not renderer.calls:
            await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert renderer.opened == renderer.closed == 1


class TestResourceAccounting:
    """Every render call releases what it acquired."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("url", "renderer_kwargs"),
        [
            ("https://example.com", {"html": "<p>Generic paragraph body</p>"}),
            ("https://example.com", {"html": "<div></div>"}),
            (LINKEDIN_URL, {"error": RuntimeError("crash")}),
            (TWEET_URL, {"error": RenderError("nav failed", TWEET_URL)}),
        ],
    )
    async def test_open_equals_close(self, make_pipeline, url: str, renderer_kwargs) -> None:
        renderer = FakeRenderer(**renderer_kwargs)
        pipeline = make_pipeline(renderer, FakeFastPath(text=None))

        await pipeline.extract(url)

        assert renderer.opened == 1
        assert renderer.closed == 1


class TestDefaultBackends:
    """Default backends are created lazily from the pipeline config."""

    def test_lazy_defaults(self) -> None:
        config = ExtractionConfig(user_agent="Agent/2")
        pipeline = ExtractionPipeline(config)

        assert pipeline._renderer is None
        assert pipeline._fast_path is None
        assert isinstance(pipeline.renderer, PlaywrightRenderer)
        assert isinstance(pipeline.fast_path, OEmbedFetcher)
        assert pipeline.renderer.config is config
        assert pipeline.fast_path.config is config
