"""
Tests for PlaywrightPageProbe against a stand-in page object.

The stand-in implements only the Page / Locator calls the probe makes:
goto, wait_for_load_state, title, url, locator().count/first/evaluate_all,
first.click/evaluate.
"""

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from policy_crawler.errors import NavigationError
from policy_crawler.probe import PlaywrightPageProbe


class StubResponse:
    def __init__(self, status):
        self.status = status


class StubElement:
    def __init__(self, locator, value):
        self._locator = locator
        self._value = value

    async def click(self, timeout=None):
        page = self._locator.page
        if page.click_error:
            raise page.click_error
        page.clicks += 1
        page.details_open = True

    async def evaluate(self, js):
        return self._value


class StubLocator:
    def __init__(self, page, values):
        self.page = page
        self.values = list(values)

    async def count(self):
        return len(self.values)

    @property
    def first(self):
        return StubElement(self, self.values[0])

    async def evaluate_all(self, js):
        return list(self.values)


class StubPage:
    def __init__(self, title="", has_details=True, policy=None, similar=(),
                 status=200, goto_error=None, idle_timeout=False, click_error=None):
        self.url = "about:blank"
        self._title = title
        self.has_details = has_details
        self.policy = policy
        self.similar = list(similar)
        self.status = status
        self.goto_error = goto_error
        self.idle_timeout = idle_timeout
        self.click_error = click_error
        self.details_open = False
        self.clicks = 0

    async def goto(self, url, timeout=None, wait_until=None):
        if self.goto_error:
            raise self.goto_error
        self.url = url
        return StubResponse(self.status) if self.status is not None else None

    async def wait_for_load_state(self, state, timeout=None):
        if self.idle_timeout:
            raise PlaywrightTimeout("Timeout exceeded while waiting for networkidle")

    async def title(self):
        return self._title

    def locator(self, selector):
        if "See details" in selector:
            return StubLocator(self, ["See details"] if self.has_details else [])
        if "privacy policy" in selector:
            return StubLocator(self, [self.policy] if self.details_open and self.policy else [])
        if "Similar" in selector:
            return StubLocator(self, self.similar)
        return StubLocator(self, [])


def probe_for(page):
    return PlaywrightPageProbe(page, timeout_ms=1000, settle_delay_s=0)


def run(coro):
    return asyncio.run(coro)


class TestNavigate:
    """Page loads and their failure modes."""

    def test_successful_navigation_updates_current_url(self):
        """A good load moves current_url."""
        page = StubPage()
        probe = probe_for(page)
        run(probe.navigate("https://store.example/a"))
        assert probe.current_url == "https://store.example/a"

    def test_http_error_raises_navigation_error(self):
        """A 4xx/5xx response becomes NavigationError."""
        probe = probe_for(StubPage(status=404))
        with pytest.raises(NavigationError, match="HTTP 404"):
            run(probe.navigate("https://store.example/missing"))

    def test_goto_timeout_raises_navigation_error(self):
        """A goto timeout becomes NavigationError."""
        probe = probe_for(StubPage(goto_error=PlaywrightTimeout("Timeout 1000ms exceeded")))
        with pytest.raises(NavigationError, match="timeout"):
            run(probe.navigate("https://store.example/slow"))

    def test_browser_error_raises_navigation_error(self):
        """Any other browser error becomes NavigationError."""
        probe = probe_for(StubPage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED")))
        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
            run(probe.navigate("https://nowhere.invalid/"))

    def test_missing_response_is_accepted(self):
        """goto returning None (same-document load) is not a failure."""
        probe = probe_for(StubPage(status=None))
        run(probe.navigate("https://store.example/a#frag"))

    def test_network_idle_timeout_is_tolerated(self):
        """Never reaching network idle is not a failure."""
        probe = probe_for(StubPage(idle_timeout=True))
        run(probe.navigate("https://store.example/a"))
        assert probe.current_url == "https://store.example/a"


class TestReadListing:
    """Title, policy link and similar links from the DOM."""

    def test_title_suffix_removed(self):
        """The store suffix is stripped from the title."""
        probe = probe_for(StubPage(title="Chess Clock - Apps on Google Play"))
        assert run(probe.get_title()) == "Chess Clock"

    def test_policy_link_read_after_expanding_details(self):
        """The policy link is read after clicking See details."""
        page = StubPage(policy="https://dev.example/privacy")
        assert run(probe_for(page).get_privacy_policy_link()) == "https://dev.example/privacy"
        assert page.clicks == 1

    def test_no_details_control_means_no_policy(self):
        """No See details control gives no policy link."""
        page = StubPage(has_details=False, policy="https://dev.example/privacy")
        assert run(probe_for(page).get_privacy_policy_link()) is None
        assert page.clicks == 0

    def test_details_without_policy_link(self):
        """An expanded panel without the link gives None."""
        assert run(probe_for(StubPage(policy=None)).get_privacy_policy_link()) is None

    def test_click_failure_is_reported_as_absent(self):
        """A failed click is reported as no policy link."""
        page = StubPage(policy="https://dev.example/privacy",
                        click_error=PlaywrightTimeout("element is not visible"))
        assert run(probe_for(page).get_privacy_policy_link()) is None

    def test_similar_links_deduplicated_in_order(self):
        """Repeated hrefs collapse, first occurrence kept."""
        page = StubPage(similar=[
            "https://play.example/details?id=b",
            "https://play.example/details?id=a",
            "https://play.example/details?id=b",
            "",
        ])
        assert run(probe_for(page).get_similar_listing_links()) == [
            "https://play.example/details?id=b",
            "https://play.example/details?id=a",
        ]

    def test_no_similar_section(self):
        """A page without a Similar section gives no links."""
        assert run(probe_for(StubPage()).get_similar_listing_links()) == []
