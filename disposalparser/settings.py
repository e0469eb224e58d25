"""Settings for the DEA disposal-site scraper.

Defaults live in the module-level constants below.  ``load_settings()`` layers
an optional YAML profile and then ``DISPOSAL_*`` environment variables on top
of them and returns an immutable :class:`ScraperSettings`.

Example profile::

    navigation_timeout_ms: 45000
    headless: false
    debug_screenshot: ./debug_page.png
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Search target
# ---------------------------------------------------------------------------
SEARCH_URL = "https://apps.deadiversion.usdoj.gov/pubdispsearch/spring/main"

VALID_RADII: tuple[str, ...] = ("5", "10", "20", "50")
DEFAULT_RADIUS = "20"
DEFAULT_ZIP_CODE = "73120"

# ---------------------------------------------------------------------------
# Form selectors
# ---------------------------------------------------------------------------
SEARCH_FORM_SELECTOR = 'form[name="searchForm"]'
ZIP_INPUT_SELECTOR = 'input[name="searchForm:zipCodeInput"]'
RADIUS_INPUT_SELECTOR = 'input[name="searchForm:radiusInput"][value="{radius}"]'
SUBMIT_SELECTOR = 'input[type="submit"], button[type="submit"]'
YEAR_ROUND_TAB_PATTERN = "Year-Round"

# ---------------------------------------------------------------------------
# Timeouts (milliseconds)
# ---------------------------------------------------------------------------
NAVIGATION_TIMEOUT_MS = 30_000
SELECTOR_TIMEOUT_MS = 15_000
RESULTS_TIMEOUT_MS = 5_000

# Fixed pauses that let the page's scripts react to tab clicks and submits
TAB_SETTLE_MS = 2_000
SUBMIT_SETTLE_MS = 1_000
RESULTS_SETTLE_MS = 3_000

# ---------------------------------------------------------------------------
# Browser
# ---------------------------------------------------------------------------
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)
BROWSER_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
)
HEADLESS = True

# Path for a full-page screenshot of the results page (None disables it)
DEBUG_SCREENSHOT: str | None = None

# ---------------------------------------------------------------------------
# Result page phrases
# ---------------------------------------------------------------------------
NO_RESULTS_PHRASES: tuple[str, ...] = ("No results", "no results", "No locations found")


@dataclass(frozen=True)
class ScraperSettings:
    search_url: str = SEARCH_URL
    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS
    selector_timeout_ms: int = SELECTOR_TIMEOUT_MS
    results_timeout_ms: int = RESULTS_TIMEOUT_MS
    tab_settle_ms: int = TAB_SETTLE_MS
    submit_settle_ms: int = SUBMIT_SETTLE_MS
    results_settle_ms: int = RESULTS_SETTLE_MS
    user_agent: str = USER_AGENT
    browser_args: tuple[str, ...] = BROWSER_ARGS
    headless: bool = HEADLESS
    debug_screenshot: str | None = DEBUG_SCREENSHOT


_ENV_VARS: dict[str, str] = {
    "DISPOSAL_SEARCH_URL": "search_url",
    "DISPOSAL_NAV_TIMEOUT_MS": "navigation_timeout_ms",
    "DISPOSAL_SELECTOR_TIMEOUT_MS": "selector_timeout_ms",
    "DISPOSAL_HEADLESS": "headless",
    "DISPOSAL_DEBUG_SCREENSHOT": "debug_screenshot",
    "DISPOSAL_USER_AGENT": "user_agent",
}

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _coerce(field_name: str, raw: Any, source: str) -> Any:
    default = getattr(ScraperSettings, field_name)
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() not in _FALSE_VALUES
    if isinstance(default, int):
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"{source} must be an integer, got {raw!r}") from None
    if isinstance(default, tuple):
        if isinstance(raw, str):
            return (raw,)
        return tuple(str(item) for item in raw)
    return None if raw in (None, "") else str(raw)


def load_profile(path: str | Path) -> dict[str, Any]:
    """Load a YAML profile and return the recognised settings overrides."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings profile %s: top level is not a mapping", path)
        return {}

    known = {f.name for f in dataclasses.fields(ScraperSettings)}
    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown setting %r in %s", key, path)
            continue
        overrides[key] = _coerce(key, value, f"{key} in {path}")
    return overrides


def load_settings(profile: str | Path | None = None) -> ScraperSettings:
    """Build settings from defaults, an optional YAML *profile*, then the env."""
    overrides: dict[str, Any] = {}
    if profile:
        overrides.update(load_profile(profile))

    for env_name, field_name in _ENV_VARS.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        overrides[field_name] = _coerce(field_name, raw, env_name)

    return ScraperSettings(**overrides)
