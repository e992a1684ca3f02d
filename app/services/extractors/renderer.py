"""Headless-browser rendering backend using Playwright.

Every call to :meth:`PlaywrightRenderer.render` starts its own Playwright
driver, browser and context and tears all three down before returning,
whether rendering succeeded, failed or was cancelled.

Note: Playwright browsers must be installed separately:
    playwright install chromium
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Any

from app.services.extractors.base import (
    ExtractionConfig,
    Platform,
    RenderedDocument,
)
from app.services.extractors.exceptions import RenderError
from app.services.extractors.rules import TWEET_TEXT_SELECTOR

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright

logger = logging.getLogger(__name__)

LINKEDIN_COOKIE_DOMAIN = ".linkedin.com"


def parse_cookie_header(raw: str, domain: str) -> list[dict[str, Any]]:
    """Turn a ``name=value; name2=value2`` string into Playwright cookies.

    Pairs without ``=`` or with an empty name are skipped.
    """
    cookies: list[dict[str, Any]] = []
    for pair in raw.split(";"):
        name, sep, value = pair.strip().partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        cookies.append(
            {"name": name, "value": value.strip(), "domain": domain, "path": "/"}
        )
    return cookies


class PlaywrightRenderer:
    """Render pages in an isolated headless Chromium per call.

    Attributes:
        config: Extraction policy (user agent, cookies, delays, timeouts).
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    async def render(self, url: str, platform: Platform) -> RenderedDocument:
        """Navigate to ``url`` and return the serialized DOM.

        Raises:
            RenderError: If the browser fails to launch, navigation fails or
                times out, or no response is received.
        """
        playwright: Playwright | None = None
        browser: Browser | None = None
        context: BrowserContext | None = None

        try:
            from playwright.async_api import async_playwright

            try:
                playwright = await async_playwright().start()
                browser = await playwright.chromium.launch(
                    headless=self.config.playwright_headless,
                )
            except Exception as e:
                logger.error("Failed to launch Playwright browser: %s", e)
                raise RenderError(f"Failed to launch browser: {e}", url, e) from e

            context = await browser.new_context(user_agent=self.config.user_agent)
            if platform is Platform.LINKEDIN and self.config.linkedin_cookies:
                await self._add_cookies(
                    context, self.config.linkedin_cookies, LINKEDIN_COOKIE_DOMAIN
                )

            page = await context.new_page()
            await self._pre_navigation_delay()
            return await self._navigate(page, url, platform)

        except RenderError:
            raise
        except Exception as e:
            logger.warning("Playwright rendering failed for %s: %s", url, e)
            raise RenderError(f"Rendering failed for {url}: {e}", url, e) from e

        finally:
            await self._close(playwright, browser, context)

    async def _navigate(self, page: Page, url: str, platform: Platform) -> RenderedDocument:
        is_twitter = platform is Platform.TWITTER_X
        # Tweets are client-rendered and only populate once the network settles.
        wait_until = "networkidle" if is_twitter else "domcontentloaded"
        timeout_s = (
            self.config.twitter_navigation_timeout_seconds
            if is_twitter
            else self.config.navigation_timeout_seconds
        )

        logger.debug("Rendering %s (wait_until=%s, timeout=%ds)", url, wait_until, timeout_s)
        response = await page.goto(url, wait_until=wait_until, timeout=timeout_s * 1000)
        if response is None:
            logger.warning("Failed to navigate to URL: %s", url)
            raise RenderError(f"No response received for {url}", url)

        settle_ms = (
            self.config.twitter_settle_delay_ms if is_twitter else self.config.settle_delay_ms
        )
        if settle_ms > 0:
            await asyncio.sleep(settle_ms / 1000)

        if is_twitter:
            await self._wait_for_tweet_text(page)

        html = await page.content()
        logger.debug("Playwright rendered %d chars from %s", len(html), url)
        return RenderedDocument(
            url=url, html=html, platform=platform, status=response.status
        )

    async def _wait_for_tweet_text(self, page: Page) -> None:
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        try:
            await page.wait_for_selector(
                TWEET_TEXT_SELECTOR, timeout=self.config.tweet_selector_timeout_ms
            )
        except PlaywrightTimeoutError:
            logger.warning(
                "Tweet text selector not found, continuing with fallback extraction"
            )

    async def _pre_navigation_delay(self) -> None:
        low = max(self.config.pre_navigation_delay_min_ms, 0)
        high = max(self.config.pre_navigation_delay_max_ms, low)
        if high == 0:
            return
        await asyncio.sleep(random.randint(low, high) / 1000)

    async def _add_cookies(
        self, context: BrowserContext, raw_cookies: str, domain: str
    ) -> None:
        cookies = parse_cookie_header(raw_cookies, domain)
        if not cookies:
            logger.warning("Cookie string configured for %s but no valid pairs", domain)
            return
        try:
            await context.add_cookies(cookies)
        except Exception as e:
            logger.error("Error adding cookies for %s: %s", domain, e)
            return
        logger.info("Added %d cookies for domain %s", len(cookies), domain)

    async def _close(
        self,
        playwright: Playwright | None,
        browser: Browser | None,
        context: BrowserContext | None,
    ) -> None:
        """Release browser resources. Close errors are logged, not raised."""
        if context is not None:
            try:
                await context.close()
            except Exception as e:
                logger.warning("Error closing browser context: %s", e)
        if browser is not None:
            try:
                await browser.close()
                logger.debug("Playwright browser closed")
            except Exception as e:
                logger.warning("Error closing browser: %s", e)
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning("Error stopping Playwright: %s", e)
