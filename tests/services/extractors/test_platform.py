"""Tests for URL validation and platform classification."""

from __future__ import annotations

import pytest

from app.services.extractors.base import Platform
from app.services.extractors.exceptions import InvalidUrlError
from app.services.extractors.platform import (
    MAX_URL_LENGTH,
    build_request,
    classify_platform,
    is_single_post_url,
    validate_url,
)


class TestValidateUrl:
    """Test suite for validate_url."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/post",
            "http://example.com",
            "HTTPS://WWW.LINKEDIN.COM/feed/update/urn:li:activity:1",
        ],
    )
    def test_accepts_absolute_http_urls(self, url: str) -> None:
        assert validate_url(url) == url

    def test_strips_surrounding_whitespace(self) -> None:
        assert validate_url("  https://x.com/a/status/1 \n") == "https://x.com/a/status/1"

    @pytest.mark.parametrize(
        "url",
        ["", "   ", "not-a-url", "/relative/path", "example.com/post", "https://"],
    )
    def test_rejects_malformed_urls(self, url: str) -> None:
        with pytest.raises(InvalidUrlError) as exc_info:
            validate_url(url)

        assert "Invalid URL format" in str(exc_info.value)

    @pytest.mark.parametrize(
        "url",
        ["ftp://example.com/file", "file://server/etc/passwd", "ws://example.com/socket"],
    )
    def test_rejects_disallowed_schemes(self, url: str) -> None:
        with pytest.raises(InvalidUrlError) as exc_info:
            validate_url(url)

        assert "Only HTTP and HTTPS" in str(exc_info.value)

    def test_length_limit(self) -> None:
        base = "https://example.com/"
        at_limit = base + "a" * (MAX_URL_LENGTH - len(base))

        assert validate_url(at_limit) == at_limit
        with pytest.raises(InvalidUrlError) as exc_info:
            validate_url(at_limit + "a")

        assert "exceeds" in str(exc_info.value)


class TestClassifyPlatform:
    """Test suite for classify_platform."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://linkedin.com/feed/update/urn:li:activity:1",
            "https://www.LinkedIn.com/posts/someone_activity-1",
            "https://uk.linkedin.com/posts/abc",
        ],
    )
    def test_linkedin(self, url: str) -> None:
        assert classify_platform(url) is Platform.LINKEDIN

    @pytest.mark.parametrize(
        "url",
        [
            "https://x.com/user/status/123",
            "https://twitter.com/user/status/123",
            "https://mobile.twitter.com/user",
            "https://WWW.X.COM/user",
        ],
    )
    def test_twitter(self, url: str) -> None:
        assert classify_platform(url) is Platform.TWITTER_X

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/blog/post",
            "https://dropbox.com/s/file",
            "https://notlinkedin.company.io/a",
            "https://example.com/?ref=x.com",
        ],
    )
    def test_everything_else_is_generic(self, url: str) -> None:
        assert classify_platform(url) is Platform.GENERIC


class TestBuildRequest:
    """Test suite for build_request."""

    def test_pairs_url_with_platform(self) -> None:
        request = build_request("https://x.com/user/status/123")

        assert request.url == "https://x.com/user/status/123"
        assert request.platform_hint is Platform.TWITTER_X

    def test_request_is_immutable(self) -> None:
        request = build_request("https://example.com")

        with pytest.raises(AttributeError):
            request.url = "https://other.com"  # type: ignore[misc]


class TestIsSinglePostUrl:
    """Test suite for is_single_post_url."""

    def test_twitter_status_url(self) -> None:
        assert is_single_post_url("https://x.com/user/status/1", Platform.TWITTER_X)

    def test_twitter_profile_url(self) -> None:
        assert not is_single_post_url("https://x.com/user", Platform.TWITTER_X)

    def test_other_platforms_always_single(self) -> None:
        assert is_single_post_url("https://linkedin.com/in/someone", Platform.LINKEDIN)
