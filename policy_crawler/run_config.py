"""
Unified Run Configuration
=========================
Single source of truth for crawler defaults.

Values are resolved in this order (later wins):
    1. ``_DEFAULTS`` below
    2. Environment variables (``POLICY_CRAWLER_*``, optionally from ``.env``)
    3. Command-line flags
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .exporter import DEFAULT_OUTPUT

logger = logging.getLogger(__name__)

DEPTH_SENTINEL = -1


# ---------------------------------------------------------------------------
# Canonical defaults, the only place these numbers live
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "max_depth": DEPTH_SENTINEL,     # -1 = one expansion pass
    "output_csv": DEFAULT_OUTPUT,
    "quote_output": False,           # raw "title,url" rows
    "headless": True,
    "timeout_seconds": 30,           # per navigation
    "settle_delay_s": 2.0,           # after clicking "See details"
    "click_timeout_ms": 5000,
    "viewport_width": 1366,
    "viewport_height": 768,
    "user_agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    ),
}

# env var → (field, parser)
_ENV_VARS = {
    "POLICY_CRAWLER_OUTPUT": ("output_csv", str),
    "POLICY_CRAWLER_HEADLESS": ("headless", lambda v: v.strip().lower() not in ("0", "false", "no", "off")),
    "POLICY_CRAWLER_TIMEOUT": ("timeout_seconds", int),
    "POLICY_CRAWLER_SETTLE_DELAY": ("settle_delay_s", float),
}


def parse_depth(raw: Optional[str]) -> int:
    """Depth argument → int. Absent or non-numeric gives the -1 sentinel.

    Any numeric spelling is accepted ("2", "1.5", "1e1"); fractions are
    floored, which keeps the inclusive bound of ``depth <= value``.
    """
    if raw is None:
        return DEPTH_SENTINEL
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEPTH_SENTINEL
    if not math.isfinite(value):
        return DEPTH_SENTINEL
    return math.floor(value)


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read ``POLICY_CRAWLER_*`` variables. Unparseable values are logged and ignored."""
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for var, (name, parse) in _ENV_VARS.items():
        raw = environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = parse(raw)
        except ValueError:
            logger.warning(f"Ignoring {var}={raw!r}: not a valid value for {name}")
    return overrides


@dataclass
class CrawlerRunConfig:
    """
    Configuration for one crawl run.

    Populate via:
      - ``CrawlerRunConfig()``                 → all defaults
      - ``CrawlerRunConfig(max_depth=2)``      → override one value
      - ``CrawlerRunConfig.from_cli_args(ns)`` → defaults + env + argparse Namespace
    """

    # ---- Crawl limits ----
    max_depth: int = _DEFAULTS["max_depth"]
    timeout_seconds: int = _DEFAULTS["timeout_seconds"]
    settle_delay_s: float = _DEFAULTS["settle_delay_s"]
    click_timeout_ms: int = _DEFAULTS["click_timeout_ms"]

    # ---- Output ----
    output_csv: str = _DEFAULTS["output_csv"]
    quote_output: bool = _DEFAULTS["quote_output"]

    # ---- Browser ----
    headless: bool = _DEFAULTS["headless"]
    viewport_width: int = _DEFAULTS["viewport_width"]
    viewport_height: int = _DEFAULTS["viewport_height"]
    user_agent: str = _DEFAULTS["user_agent"]

    # -----------------------------------------------------------------------
    # Factory helpers
    # -----------------------------------------------------------------------
    @classmethod
    def from_cli_args(cls, args, environ: Optional[Mapping[str, str]] = None) -> "CrawlerRunConfig":
        """Build config from an argparse Namespace (``__main__.py``).

        Flags left at ``None`` fall back to the environment, then to defaults.
        """
        values: Dict[str, Any] = env_overrides(environ)
        values["max_depth"] = parse_depth(getattr(args, "depth", None))

        cli_values = {
            "output_csv": getattr(args, "output", None),
            "timeout_seconds": getattr(args, "timeout", None),
            "settle_delay_s": getattr(args, "settle_delay", None),
        }
        values.update({k: v for k, v in cli_values.items() if v is not None})

        if getattr(args, "headed", False):
            values["headless"] = False
        if getattr(args, "quote", False):
            values["quote_output"] = True

        return cls(**values)

    # -----------------------------------------------------------------------
    # Converters
    # -----------------------------------------------------------------------
    def to_browser_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``BrowserSession``."""
        return {
            "headless": self.headless,
            "viewport_width": self.viewport_width,
            "viewport_height": self.viewport_height,
            "user_agent": self.user_agent,
        }

    def to_probe_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``PlaywrightPageProbe``."""
        return {
            "timeout_ms": self.timeout_seconds * 1000,
            "settle_delay_s": self.settle_delay_s,
            "click_timeout_ms": self.click_timeout_ms,
        }

    # -----------------------------------------------------------------------
    # Logging helper
    # -----------------------------------------------------------------------
    def log_summary(self, url: str) -> None:
        """Emit a structured summary to the logger."""
        depth_label = f"{self.max_depth}"
        if self.max_depth < 0:
            depth_label += " (single expansion pass)"
        logger.info("=" * 60)
        logger.info("CRAWL RUN CONFIG")
        logger.info("=" * 60)
        logger.info(f"  Seed URL:         {url}")
        logger.info(f"  Max Depth:        {depth_label}")
        logger.info(f"  Timeout:          {self.timeout_seconds}s per page")
        logger.info(f"  Settle Delay:     {self.settle_delay_s}s after expand")
        logger.info(f"  Headless:         {self.headless}")
        logger.info(f"  Output:           {self.output_csv} ({'quoted' if self.quote_output else 'raw'})")
        logger.info("=" * 60)
