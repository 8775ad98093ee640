"""
Policy Crawler Package
Collects developer privacy-policy links from app store listings reachable
through "Similar apps" links, starting from a seed listing.

CLI Usage:
    python -m policy_crawler <seed_url> [max_depth] [options]

    Options:
        --output        Output file (default: files/corpus.csv)
        --headed        Show the browser window
        --timeout       Per-page timeout in seconds (default: 30)
        --settle-delay  Wait after expanding listing details (default: 2.0)
        --quote         RFC 4180 quoting instead of raw rows
        --verbose       Debug logging
"""

from .errors import CrawlerError, UsageError, NavigationError, ProbeError, ExportError
from .models import ListingNode, TreeNode, TreeNodeDraft
from .visited import VisitedSet
from .probe import PageProbe, PlaywrightPageProbe
from .tree_builder import TreeBuilder
from .flattener import flatten
from .exporter import export_csv, format_quoted_rows, format_rows
from .monitor import CrawlStats
from .run_config import CrawlerRunConfig
from .browser import BrowserSession

__all__ = [
    'CrawlerError',
    'UsageError',
    'NavigationError',
    'ProbeError',
    'ExportError',
    'ListingNode',
    'TreeNode',
    'TreeNodeDraft',
    'VisitedSet',
    'PageProbe',
    'PlaywrightPageProbe',
    'TreeBuilder',
    'flatten',
    'export_csv',
    'format_quoted_rows',
    'format_rows',
    'CrawlStats',
    'CrawlerRunConfig',
    'BrowserSession',
]

__version__ = '1.0.0'
