"""Shared pytest fixtures.

Fakes from ``fakes.py`` stand in for the browser, the oEmbed endpoint and the
AI provider so no test performs real network or browser activity.
"""

from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routes.analyze import get_hashtag_engine, get_pipeline
from app.services.extractors.base import ExtractionConfig
from app.services.extractors.exceptions import RenderError
from app.services.extractors.pipeline import ExtractionPipeline
from app.services.hashtag_engine import HashtagEngine
from fakes import FakeChatClient, FakeFastPath, FakeRenderer


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture()
def fast_config() -> ExtractionConfig:
    """Extraction config with every delay disabled."""
    return ExtractionConfig(
        settle_delay_ms=0,
        twitter_settle_delay_ms=0,
        pre_navigation_delay_min_ms=0,
        pre_navigation_delay_max_ms=0,
        tweet_selector_timeout_ms=10,
        extraction_timeout_seconds=5.0,
    )


@pytest.fixture()
def make_pipeline(fast_config) -> Callable[..., ExtractionPipeline]:
    """Return a helper building a pipeline around fake backends."""

    def _make(
        renderer: FakeRenderer | None = None,
        fast_path: FakeFastPath | None = None,
        config: ExtractionConfig | None = None,
    ) -> ExtractionPipeline:
        return ExtractionPipeline(
            config or fast_config,
            renderer=renderer or FakeRenderer(),
            fast_path=fast_path or FakeFastPath(),
        )

    return _make


@pytest.fixture()
def api_client(make_pipeline):
    """TestClient with fake pipeline and engine dependencies.

    Yields a ``(client, renderer, fast_path, chat)`` tuple; tests mutate the
    fakes before sending requests.
    """
    renderer = FakeRenderer()
    fast_path = FakeFastPath()
    chat = FakeChatClient(content='{"safe": ["Tech"], "rising": ["GenAI"], "niche": ["RAGOps"]}')

    app.dependency_overrides[get_pipeline] = lambda: make_pipeline(renderer, fast_path)
    app.dependency_overrides[get_hashtag_engine] = lambda: HashtagEngine(chat)
    with TestClient(app) as tc:
        yield tc, renderer, fast_path, chat
    app.dependency_overrides.clear()


@pytest.fixture()
def render_error() -> RenderError:
    return RenderError("Failed to launch browser: boom", "https://example.com")
