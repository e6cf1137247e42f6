"""Playwright lifecycle for a single browser session."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
]


class BrowserSession:
    """One browser, one context, one page."""

    def __init__(self, headless: bool = True, slow_mo: int = 0):
        self.headless = headless
        self.slow_mo = slow_mo
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._closed = False

    async def start(self) -> Page:
        """Launch the browser and open the session page."""
        self._playwright = await async_playwright().start()
        self.browser = await self._playwright.chromium.launch(
            headless=self.headless,
            slow_mo=self.slow_mo,
            args=LAUNCH_ARGS,
        )
        self.context = await self.browser.new_context()
        self.page = await self.context.new_page()
        logger.info("Browser started (headless=%s)", self.headless)
        return self.page

    async def stop(self):
        """Close the browser and stop Playwright. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            if self.browser and self.browser.is_connected():
                await self.browser.close()
        finally:
            if self._playwright:
                await self._playwright.stop()
        logger.info("Browser stopped")
