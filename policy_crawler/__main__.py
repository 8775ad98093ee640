#!/usr/bin/env python3
"""
Command-line entry point
========================
Crawl Google Play listings reachable through "Similar apps" links and write
each listing's title and privacy-policy URL to ``files/corpus.csv``.

Run with:
    python -m policy_crawler SEED_URL [MAX_DEPTH] [options]

``MAX_DEPTH`` that is absent or not a number means a single expansion pass
(the seed's direct neighbours only).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from playwright.async_api import Error as PlaywrightError

from .browser import BrowserSession
from .errors import ExportError, NavigationError, UsageError
from .exporter import export_csv
from .flattener import flatten
from .models import ListingNode
from .monitor import CrawlStats
from .probe import PageProbe, PlaywrightPageProbe
from .run_config import CrawlerRunConfig
from .tree_builder import TreeBuilder

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='policy-crawler',
        description='Collect privacy-policy links of Google Play listings reachable from a seed listing',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m policy_crawler "https://play.google.com/store/apps/details?id=com.example"
  python -m policy_crawler "https://play.google.com/store/apps/details?id=com.example" 2
  python -m policy_crawler "https://play.google.com/store/apps/details?id=com.example" 1 --headed --quote
        """
    )
    parser.add_argument('url', nargs='?', help='Seed listing URL')
    parser.add_argument('depth', nargs='?', help='Maximum depth (non-numeric or omitted: one expansion pass)')
    parser.add_argument('--output', type=str, default=None,
                        help='Output file (default: files/corpus.csv, or POLICY_CRAWLER_OUTPUT)')
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    parser.add_argument('--timeout', type=int, default=None, help='Per-page timeout in seconds (default: 30)')
    parser.add_argument('--settle-delay', type=float, default=None,
                        help='Seconds to wait after expanding listing details (default: 2.0)')
    parser.add_argument('--quote', action='store_true',
                        help='Quote titles containing commas (RFC 4180) instead of raw rows')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


def _is_flag(arg: str) -> bool:
    """True for option-like tokens; negative numbers stay positional."""
    if not arg.startswith('-') or arg == '-':
        return False
    try:
        float(arg)
    except ValueError:
        return True
    return False


def parse_args(argv: Optional[List[str]] = None, parser: Optional[argparse.ArgumentParser] = None) -> argparse.Namespace:
    """Parse argv. Raises ``UsageError`` for a missing seed or surplus arguments."""
    parser = parser or build_parser()
    args, extras = parser.parse_known_args(argv)

    unknown_flags = [e for e in extras if _is_flag(e)]
    if unknown_flags:
        raise UsageError(f"unrecognized arguments: {' '.join(unknown_flags)}")
    if args.url is None:
        raise UsageError("Incorrect number of arguments. Expected at least 1, received 0")
    if extras:
        received = 2 + len(extras)
        raise UsageError(f"Incorrect number of arguments. Expected at most 2, received {received}")
    if not args.url.startswith(('http://', 'https://')):
        args.url = 'https://' + args.url
    return args


# ---------------------------------------------------------------------------
# Crawl
# ---------------------------------------------------------------------------

async def collect_listings(
    probe: PageProbe, seed_url: str, max_depth: int
) -> Tuple[List[ListingNode], CrawlStats]:
    """Build the listing tree with ``probe`` and flatten it into export records."""
    builder = TreeBuilder(probe)

    def progress_cb(listings_found, current_url, depth):
        print(f"[Listing {listings_found} | depth {depth}] {current_url[:70]}...")

    builder.set_progress_callback(progress_cb)
    tree = await builder.build(seed_url, max_depth)
    return flatten(tree), builder.stats


async def run_crawl(seed_url: str, cfg: CrawlerRunConfig) -> Tuple[List[ListingNode], CrawlStats]:
    """Open the browser, crawl from ``seed_url``, close the browser."""
    async with BrowserSession(**cfg.to_browser_kwargs()) as page:
        probe = PlaywrightPageProbe(page, **cfg.to_probe_kwargs())
        return await collect_listings(probe, seed_url, cfg.max_depth)


def print_summary(stats: dict, records: int) -> None:
    """Print crawl summary."""
    print("\n" + "=" * 60)
    print("CRAWL COMPLETE")
    print("=" * 60)
    print(f"  Records exported:    {records}")
    print(f"  Pages navigated:     {stats.get('pages_navigated', 0)}")
    print(f"  Failed pages:        {stats.get('pages_failed', 0)}")
    print(f"  Duplicates skipped:  {stats.get('duplicates_skipped', 0)}")
    print(f"  No policy link:      {stats.get('null_policy_skipped', 0)}")
    print(f"  Levels expanded:     {stats.get('levels_expanded', 0)}")
    print(f"  Total time:          {stats.get('elapsed_time', 0):.1f}s")
    print(f"  Stop reason:         {stats.get('stop_reason', 'completed')}")
    print("=" * 60)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    load_dotenv()
    parser = build_parser()
    try:
        args = parse_args(argv, parser)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    cfg = CrawlerRunConfig.from_cli_args(args)
    cfg.log_summary(args.url)

    try:
        records, stats = asyncio.run(run_crawl(args.url, cfg))
    except NavigationError as e:
        logger.error(f"Seed page could not be loaded: {e}")
        return EXIT_FAILURE
    except PlaywrightError as e:
        logger.error(f"Browser error: {e}")
        return EXIT_FAILURE

    try:
        export_csv(records, cfg.output_csv, quote=cfg.quote_output)
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        return EXIT_FAILURE

    print(f"Please see {cfg.output_csv} for your results")
    print_summary(stats.to_dict(), len(records))
    return EXIT_OK


def run_cli_with_args() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run_cli_with_args()
