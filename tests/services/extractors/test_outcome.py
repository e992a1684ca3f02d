"""Tests for ExtractionOutcome and ExtractionConfig value types."""

from __future__ import annotations

import dataclasses

import pytest

from app.services.extractors.base import (
    ExtractionConfig,
    ExtractionOutcome,
    OutcomeKind,
    Platform,
)


class TestExtractionOutcome:
    def test_found_carries_text(self) -> None:
        outcome = ExtractionOutcome.found("Hello", Platform.GENERIC, method="playwright")

        assert outcome.is_found
        assert outcome.text == "Hello"
        assert outcome.method == "playwright"

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_found_rejects_empty_text(self, text) -> None:
        with pytest.raises(ValueError):
            ExtractionOutcome(OutcomeKind.FOUND, platform=Platform.GENERIC, text=text)

    def test_failures_carry_no_text(self) -> None:
        outcomes = [
            ExtractionOutcome.not_found(Platform.LINKEDIN),
            ExtractionOutcome.ambiguous_profile(Platform.TWITTER_X),
            ExtractionOutcome.invalid_url("Invalid URL format"),
            ExtractionOutcome.render_error(Platform.GENERIC, "No response"),
        ]

        assert all(o.text is None and not o.is_found for o in outcomes)
        assert outcomes[2].platform is None

    def test_outcome_is_immutable(self) -> None:
        outcome = ExtractionOutcome.not_found(Platform.GENERIC)

        with pytest.raises(dataclasses.FrozenInstanceError):
            outcome.text = "changed"  # type: ignore[misc]


def test_config_defaults() -> None:
    config = ExtractionConfig()

    assert config.navigation_timeout_seconds == 30
    assert config.twitter_navigation_timeout_seconds == 60
    assert config.settle_delay_ms == 2000
    assert config.twitter_settle_delay_ms == 5000
    assert config.linkedin_cookies is None
    assert config.playwright_headless is True
