"""
Page Probe
==========
Reads the facts the crawler needs from an opened listing page.

``PageProbe`` defines the contract the tree builder depends on; it never
touches Playwright directly. ``PlaywrightPageProbe`` implements it for
Google Play listing pages on a single shared Playwright ``Page``.

Contract:
    - ``navigate(url)`` loads a page or raises ``NavigationError``
    - ``get_title()`` returns the display title without the store suffix
    - ``get_privacy_policy_link()`` returns the policy URL or ``None``
    - ``get_similar_listing_links()`` returns hrefs from the "Similar" section
    - ``current_url`` is the URL the shared page is showing

DOM lookups that fail are reported as "not present" (``None`` / ``[]``),
never raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeout

from .errors import NavigationError, ProbeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TITLE_SUFFIX = " - Apps on Google Play"

# XPath selectors for the Play Store listing layout
SEE_DETAILS_XPATH = '//span[text()="See details"]'
PRIVACY_POLICY_XPATH = '//a[text()="privacy policy"]'
SIMILAR_LINKS_XPATH = (
    '//span[text()="Similar games" or text()="Similar apps"]'
    '/../../../../..//a[contains(@href, "/store/apps/details?id")]'
)


# ---------------------------------------------------------------------------
# Abstract contract
# ---------------------------------------------------------------------------

class PageProbe(ABC):
    """Capability: read title / policy link / similar links from the open page.

    All methods operate on one shared browsing context and must be awaited
    one at a time.
    """

    @property
    @abstractmethod
    def current_url(self) -> str:
        """URL currently loaded in the shared page."""
        ...

    @abstractmethod
    async def navigate(self, url: str) -> None:
        """Load ``url``. Raises ``NavigationError`` when the page fails to load."""
        ...

    @abstractmethod
    async def get_title(self) -> str:
        ...

    @abstractmethod
    async def get_privacy_policy_link(self) -> Optional[str]:
        ...

    @abstractmethod
    async def get_similar_listing_links(self) -> List[str]:
        ...


# ---------------------------------------------------------------------------
# Playwright implementation
# ---------------------------------------------------------------------------

class PlaywrightPageProbe(PageProbe):
    """PageProbe backed by a single Playwright page.

    Args:
        page:            The shared Playwright page.
        timeout_ms:      Navigation / network-idle timeout per page.
        settle_delay_s:  Wait after clicking "See details" for the panel to render.
        click_timeout_ms: Timeout for the expand click itself.
        title_suffix:    Store suffix stripped from ``document.title``.
    """

    def __init__(
        self,
        page: Page,
        *,
        timeout_ms: int = 30000,
        settle_delay_s: float = 2.0,
        click_timeout_ms: int = 5000,
        title_suffix: str = TITLE_SUFFIX,
    ):
        self._page = page
        self._timeout_ms = timeout_ms
        self._settle_delay_s = settle_delay_s
        self._click_timeout_ms = click_timeout_ms
        self._title_suffix = title_suffix

    @property
    def current_url(self) -> str:
        return self._page.url

    async def navigate(self, url: str) -> None:
        try:
            response = await self._page.goto(url, timeout=self._timeout_ms, wait_until='load')
        except PlaywrightTimeout as e:
            raise NavigationError(url, f"timeout after {self._timeout_ms}ms") from e
        except PlaywrightError as e:
            raise NavigationError(url, str(e).splitlines()[0] if str(e) else type(e).__name__) from e

        if response is not None and response.status >= 400:
            raise NavigationError(url, f"HTTP {response.status}")

        # Listing sections ("Similar apps", data safety) render after 'load'
        try:
            await self._page.wait_for_load_state('networkidle', timeout=self._timeout_ms)
        except PlaywrightTimeout:
            logger.debug(f"[NAV] networkidle not reached for {url[:80]} — continuing")

    async def get_title(self) -> str:
        title = await self._guarded("title", self._page.title, "")
        return title.replace(self._title_suffix, "")

    async def get_privacy_policy_link(self) -> Optional[str]:
        return await self._guarded("privacy policy link", self._query_privacy_policy, None)

    async def get_similar_listing_links(self) -> List[str]:
        return await self._guarded("similar listings", self._query_similar_links, [])

    # ------------------------------------------------------------------
    # DOM queries
    # ------------------------------------------------------------------

    async def _query_privacy_policy(self) -> str:
        details = self._page.locator(f"xpath={SEE_DETAILS_XPATH}")
        if await details.count() == 0:
            raise ProbeError("no 'See details' control")

        await details.first.click(timeout=self._click_timeout_ms)
        await asyncio.sleep(self._settle_delay_s)

        link = self._page.locator(f"xpath={PRIVACY_POLICY_XPATH}")
        if await link.count() == 0:
            raise ProbeError("no 'privacy policy' link in details panel")

        href = await link.first.evaluate("el => el.href")
        if not href:
            raise ProbeError("'privacy policy' link has no href")
        return href

    async def _query_similar_links(self) -> List[str]:
        anchors = self._page.locator(f"xpath={SIMILAR_LINKS_XPATH}")
        hrefs: List[str] = await anchors.evaluate_all("els => els.map(el => el.href)")
        # Icon and caption anchors point at the same listing
        return list(dict.fromkeys(h for h in hrefs if h))

    async def _guarded(self, what: str, query: Callable[[], Awaitable[T]], default: T) -> T:
        try:
            return await query()
        except (ProbeError, PlaywrightError) as e:
            logger.debug(f"[PROBE] {what} not present on {self.current_url[:80]}: {e}")
            return default
