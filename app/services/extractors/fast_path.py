"""Twitter/X fast path via the public oEmbed endpoint.

The endpoint returns a JSON document whose ``html`` field holds the embed
markup; the tweet body is the first paragraph of its blockquote. This avoids
launching a browser and sidesteps most anti-bot interstitials.
"""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from app.services.extractors.base import ExtractionConfig
from app.services.extractors.strategies import node_text

logger = logging.getLogger(__name__)


class OEmbedFetcher:
    """Fetch tweet text from the oEmbed endpoint.

    Usage:
        fetcher = OEmbedFetcher(config)
        text = await fetcher.fetch("https://x.com/user/status/123")
        if text is None:
            ...  # fall back to rendering
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    async def fetch(self, url: str) -> str | None:
        """Return the tweet text for ``url``, or None on any failure."""
        logger.info("Attempting to fetch tweet via oEmbed: %s", url)
        try:
            payload = await self._fetch_payload(url)
        except httpx.HTTPError as e:
            logger.warning("oEmbed request failed for %s: %s", url, e)
            return None
        except ValueError as e:
            logger.warning("oEmbed returned malformed JSON for %s: %s", url, e)
            return None

        if payload is None:
            return None

        text = self._parse_embed(payload)
        if text:
            logger.info("Extracted tweet text via oEmbed: %d chars", len(text))
        else:
            logger.warning("oEmbed payload for %s had no tweet text", url)
        return text

    async def _fetch_payload(self, url: str) -> dict | None:
        """GET the oEmbed document.

        Raises:
            httpx.HTTPError: On transport failures.
            ValueError: If the body is not valid JSON.
        """
        async with httpx.AsyncClient(
            timeout=self.config.fast_path_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
        ) as client:
            response = await client.get(
                self.config.twitter_oembed_endpoint,
                params={"url": url, "omit_script": "true"},
            )

            if not response.is_success:
                logger.warning("oEmbed returned status %d", response.status_code)
                return None

            payload = response.json()

        if not isinstance(payload, dict):
            logger.warning("oEmbed payload is not an object")
            return None
        return payload

    def _parse_embed(self, payload: dict) -> str | None:
        html = payload.get("html")
        if not isinstance(html, str) or not html.strip():
            return None

        soup = BeautifulSoup(html, "lxml")
        paragraph = soup.select_one("blockquote > p")
        if paragraph is None:
            return None
        return node_text(paragraph) or None
