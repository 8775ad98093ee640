"""
Crawler Errors
==============
Exception taxonomy shared by the probe, tree builder, exporter and CLI.

Propagation policy:
    - ``NavigationError`` for a single link is recovered by the tree builder
      (the link is skipped). Only a failed seed navigation is fatal.
    - ``ProbeError`` never leaves the probe: a DOM query that fails is
      reported as "not present" (``None`` / empty list).
    - ``ExportError`` and ``UsageError`` terminate the CLI run.
"""

from __future__ import annotations


class CrawlerError(Exception):
    """Base class for all policy_crawler errors."""


class UsageError(CrawlerError):
    """Malformed or missing command-line arguments."""


class NavigationError(CrawlerError):
    """A page failed to load (HTTP error, timeout, browser error)."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        msg = f"Failed to load {url}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class ProbeError(CrawlerError):
    """A DOM query for title / policy link / similar links failed."""


class ExportError(CrawlerError):
    """Writing the output file failed."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write {path}: {reason}" if reason else f"Could not write {path}")
