"""
Crawl Statistics
================
Counters collected by the tree builder during one crawl.

Tracks:
- Pages navigated / failed
- Listings added, duplicates skipped, null-policy listings skipped
- Levels expanded and why the crawl stopped
- Elapsed wall-clock time

No locking: the crawl runs on a single asyncio task.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class CrawlStats:
    """Counters for one crawl. Reset by creating a new instance."""
    pages_navigated: int = 0
    pages_failed: int = 0
    listings_added: int = 0
    duplicates_skipped: int = 0
    null_policy_skipped: int = 0
    levels_expanded: int = 0
    stop_reason: str = ""
    failed_urls: List[str] = field(default_factory=list)

    _start_time: float = field(default=0.0, repr=False)
    _end_time: float = field(default=0.0, repr=False)

    def start(self) -> None:
        self._start_time = time.monotonic()
        self._end_time = 0.0

    def finish(self, stop_reason: str) -> None:
        self._end_time = time.monotonic()
        self.stop_reason = stop_reason

    def record_failure(self, url: str) -> None:
        self.pages_failed += 1
        self.failed_urls.append(url)

    @property
    def elapsed_sec(self) -> float:
        if not self._start_time:
            return 0.0
        end = self._end_time or time.monotonic()
        return end - self._start_time

    def to_dict(self) -> Dict:
        return {
            'pages_navigated': self.pages_navigated,
            'pages_failed': self.pages_failed,
            'listings_added': self.listings_added,
            'duplicates_skipped': self.duplicates_skipped,
            'null_policy_skipped': self.null_policy_skipped,
            'levels_expanded': self.levels_expanded,
            'elapsed_time': round(self.elapsed_sec, 2),
            'stop_reason': self.stop_reason or 'completed',
        }
