"""
Browser Session
===============
Owns the Playwright instance, browser, context and the single page that
every navigation shares.

Usage::

    async with BrowserSession(headless=True) as page:
        probe = PlaywrightPageProbe(page)
        ...

Only one page is ever opened: listing probes navigate it in turn.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

logger = logging.getLogger(__name__)


class BrowserSession:
    """Async context manager yielding the shared Playwright ``Page``."""

    def __init__(
        self,
        headless: bool = True,
        viewport_width: int = 1366,
        viewport_height: int = 768,
        user_agent: Optional[str] = None,
        locale: str = 'en-US',
    ):
        self.headless = headless
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.user_agent = user_agent
        self.locale = locale

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> Page:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=[
                    '--disable-gpu',
                    '--disable-dev-shm-usage',
                    '--no-first-run',
                ],
            )
            ctx_kwargs = dict(
                viewport={
                    'width': self.viewport_width,
                    'height': self.viewport_height,
                },
                locale=self.locale,
            )
            if self.user_agent:
                ctx_kwargs['user_agent'] = self.user_agent
            self._context = await self._browser.new_context(**ctx_kwargs)
            self._page = await self._context.new_page()
            await self._page.bring_to_front()
        except PlaywrightError:
            await self.close()
            raise

        logger.info(
            f"Playwright browser initialized (headless={self.headless}, "
            f"viewport={self.viewport_width}x{self.viewport_height})"
        )
        return self._page

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close page, context, browser and Playwright, ignoring teardown errors."""
        for name in ('_page', '_context', '_browser'):
            handle = getattr(self, name)
            if handle is None:
                continue
            try:
                await handle.close()
            except PlaywrightError as e:
                logger.debug(f"Ignoring error while closing {name.strip('_')}: {e}")
            setattr(self, name, None)

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
