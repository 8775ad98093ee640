"""
Listing Tree Builder
====================
Bounded level-by-level exploration of "similar listing" links.

Algorithm:
    1. Open the seed, read its title and policy URL, mark the URL visited
       (even when it is ``None``).
    2. The frontier starts as ``[(seed_url, root)]``.
    3. For depth ``d`` from 0 while ``d <= max(maximum_depth, 0)``:
       expand every frontier entry: read its similar links, open each link
       in discovery order, and attach a child for every listing whose policy
       URL is non-null and not yet visited.
    4. The next frontier is the newly attached children, in discovery order.
       Stop early when a level attaches nothing.

A negative ``maximum_depth`` (the CLI sentinel ``-1``) still runs exactly one
pass, so the seed's direct neighbours are always explored.

All page operations go through one ``PageProbe`` and are awaited one at a
time; the order of navigation is what makes "first discovered wins" hold.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Set, Tuple

from .errors import NavigationError
from .models import ListingNode, TreeNode, TreeNodeDraft
from .monitor import CrawlStats
from .probe import PageProbe
from .visited import VisitedSet

logger = logging.getLogger(__name__)

Frontier = List[Tuple[str, TreeNodeDraft]]


class TreeBuilder:
    """
    Builds the listing tree for one seed.

    Usage::

        builder = TreeBuilder(probe)
        tree = await builder.build("https://play.google.com/store/apps/details?id=x", 1)
        print(builder.stats.to_dict())

    Args:
        probe:   Page access for the single shared page.
        visited: Dedup set shared across builds. A fresh one per build when omitted.
        stats:   Counters to fill in. A fresh ``CrawlStats`` per build when omitted.
    """

    def __init__(
        self,
        probe: PageProbe,
        visited: Optional[VisitedSet] = None,
        stats: Optional[CrawlStats] = None,
    ):
        self._probe = probe
        self._shared_visited = visited
        self._shared_stats = stats
        self.stats = stats if stats is not None else CrawlStats()
        self.visited: Optional[VisitedSet] = visited
        self._probed_links: Set[str] = set()
        self._progress_callback: Optional[Callable] = None

    def set_progress_callback(self, callback: Callable) -> None:
        """Set callback: callback(listings_found, current_url, depth)"""
        self._progress_callback = callback

    async def build(
        self,
        seed_url: str,
        maximum_depth: int,
        visited: Optional[VisitedSet] = None,
    ) -> TreeNode:
        """
        Explore from ``seed_url`` and return the frozen listing tree.

        Args:
            seed_url:      Listing page to start from.
            maximum_depth: Last depth index expanded; negative means one pass.
            visited:       Dedup set for this build. Falls back to the one given
                           to the constructor, then to a fresh set.

        Raises:
            NavigationError: if the seed page itself cannot be loaded.
        """
        self.stats = self._shared_stats if self._shared_stats is not None else CrawlStats()
        self.stats.start()
        if visited is None:
            visited = self._shared_visited
        self.visited = visited if visited is not None else VisitedSet()
        self._probed_links = {seed_url}

        if self._probe.current_url != seed_url:
            await self._probe.navigate(seed_url)
            self.stats.pages_navigated += 1

        root_listing = await self._read_listing()
        root = TreeNodeDraft(root_listing)
        self.visited.add(root_listing.policy_url)
        logger.info(f"[SEED] {root_listing.title} — policy: {root_listing.policy_url or 'none'}")

        bound = max(maximum_depth, 0)
        frontier: Frontier = [(seed_url, root)]
        depth = 0
        stop_reason = "depth limit reached"

        while depth <= bound:
            logger.info(f"[DEPTH {depth}] Expanding {len(frontier)} listing(s)")
            next_frontier = await self._expand_level(frontier, depth)
            self.stats.levels_expanded += 1

            if not next_frontier:
                stop_reason = "no new listings"
                break
            frontier = next_frontier
            depth += 1

        self.stats.finish(stop_reason)
        tree = root.freeze()
        logger.info(
            f"Tree built: {tree.size()} node(s), {self.stats.levels_expanded} level(s) "
            f"expanded, stop reason: {stop_reason}"
        )
        return tree

    # ------------------------------------------------------------------
    # Level expansion
    # ------------------------------------------------------------------

    async def _expand_level(self, frontier: Frontier, depth: int) -> Frontier:
        next_frontier: Frontier = []
        for url, node in frontier:
            links = await self._similar_links_of(url)
            logger.debug(f"[DEPTH {depth}] {len(links)} similar link(s) on {url[:80]}")
            for link in links:
                child = await self._probe_link(link, depth)
                if child is None:
                    continue
                node.append(child)
                next_frontier.append((link, child))
        return next_frontier

    async def _similar_links_of(self, url: str) -> List[str]:
        """Re-open ``url`` if the shared page moved on, then read its similar links."""
        if self._probe.current_url != url:
            try:
                await self._probe.navigate(url)
            except NavigationError as e:
                self.stats.record_failure(url)
                logger.warning(f"[FAIL] Cannot re-open frontier page: {e}")
                return []
            self.stats.pages_navigated += 1
        return await self._probe.get_similar_listing_links()

    async def _probe_link(self, link: str, depth: int) -> Optional[TreeNodeDraft]:
        """Open one candidate link and return a new child draft, or None."""
        if link in self._probed_links:
            self.stats.duplicates_skipped += 1
            logger.debug(f"[DUP] Link already probed: {link[:80]}")
            return None
        self._probed_links.add(link)

        try:
            await self._probe.navigate(link)
        except NavigationError as e:
            self.stats.record_failure(link)
            logger.warning(f"[FAIL] {e}")
            return None
        self.stats.pages_navigated += 1

        listing = await self._read_listing()
        policy_url = listing.policy_url

        if self.visited.contains(policy_url):
            if policy_url is None:
                self.stats.null_policy_skipped += 1
            else:
                self.stats.duplicates_skipped += 1
                logger.debug(f"[DUP] {listing.title}: {policy_url} already collected")
            return None

        if policy_url is None:
            self.stats.null_policy_skipped += 1
            logger.info(f"[SKIP] {listing.title} — no privacy policy link")
            return None

        self.visited.add(policy_url)
        self.stats.listings_added += 1
        logger.info(f"[{depth}] + {listing.title} — {policy_url}")

        if self._progress_callback:
            self._progress_callback(self.stats.listings_added, link, depth)

        return TreeNodeDraft(listing)

    async def _read_listing(self) -> ListingNode:
        title = await self._probe.get_title()
        policy_url = await self._probe.get_privacy_policy_link()
        return ListingNode(title=title, policy_url=policy_url)
