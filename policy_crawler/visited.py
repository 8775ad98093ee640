"""
Visited policy URLs.

Dedup identity is the raw policy-URL string: no normalisation is applied, so
``https://a.example/privacy`` and ``https://a.example/privacy/`` are distinct.
"""

from __future__ import annotations

from typing import Iterable, Optional, Set


class VisitedSet:
    """Policy URLs already attached to the tree (plus the seed's, even if None)."""

    def __init__(self, urls: Optional[Iterable[Optional[str]]] = None):
        self._urls: Set[Optional[str]] = set(urls or ())

    def contains(self, url: Optional[str]) -> bool:
        return url in self._urls

    def add(self, url: Optional[str]) -> None:
        self._urls.add(url)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __repr__(self) -> str:
        return f"VisitedSet({len(self._urls)} urls)"
