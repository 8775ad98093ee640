"""
Shared fixtures: an in-memory PageProbe over a fixed listing graph.
"""

from typing import Dict, List, Optional, Set, Tuple

import pytest

from policy_crawler.errors import NavigationError
from policy_crawler.probe import PageProbe

# url -> (title, policy_url, similar links)
Graph = Dict[str, Tuple[str, Optional[str], List[str]]]


class FakePageProbe(PageProbe):
    """PageProbe that serves listings from a dict and records every navigation."""

    def __init__(self, graph: Graph, failing: Optional[Set[str]] = None):
        self.graph = graph
        self.failing = set(failing or ())
        self.navigations: List[str] = []
        self._url = "about:blank"

    @property
    def current_url(self) -> str:
        return self._url

    async def navigate(self, url: str) -> None:
        self.navigations.append(url)
        if url in self.failing or url not in self.graph:
            raise NavigationError(url, "HTTP 404")
        self._url = url

    async def get_title(self) -> str:
        return self.graph[self._url][0]

    async def get_privacy_policy_link(self) -> Optional[str]:
        return self.graph[self._url][1]

    async def get_similar_listing_links(self) -> List[str]:
        return list(self.graph[self._url][2])


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep POLICY_CRAWLER_* settings from the developer's shell out of tests."""
    for var in ("POLICY_CRAWLER_OUTPUT", "POLICY_CRAWLER_HEADLESS",
                "POLICY_CRAWLER_TIMEOUT", "POLICY_CRAWLER_SETTLE_DELAY"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def scenario_graph() -> Graph:
    """Seed X links to Y (new policy) and Z (same policy as X)."""
    return {
        "https://store.example/x": ("X", "https://x.example/privacy", ["https://store.example/l1", "https://store.example/l2"]),
        "https://store.example/l1": ("Y", "https://y.example/privacy", []),
        "https://store.example/l2": ("Z", "https://x.example/privacy", []),
    }


@pytest.fixture()
def layered_graph() -> Graph:
    """
    Three levels below the seed:

        seed -> a, b
        a    -> c, shared
        b    -> shared, d
        c    -> e
    """
    return {
        "seed": ("Seed", "p-seed", ["a", "b"]),
        "a": ("A", "p-a", ["c", "shared"]),
        "b": ("B", "p-b", ["shared", "d"]),
        "c": ("C", "p-c", ["e"]),
        "shared": ("Shared", "p-shared", []),
        "d": ("D", "p-d", []),
        "e": ("E", "p-e", []),
    }


@pytest.fixture()
def make_probe():
    def _make(graph: Graph, failing: Optional[Set[str]] = None) -> FakePageProbe:
        return FakePageProbe(graph, failing)
    return _make
