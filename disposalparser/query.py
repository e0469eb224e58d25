"""disposalparser.query: search the DEA disposal locator and extract sites.

Drives the public search form with a headless Chromium browser (Playwright),
snapshots the rendered results page and hands it to the extraction engine.

Basic usage::

    from disposalparser.query import get_disposal_sites

    for site in get_disposal_sites("73120", "20"):
        print(site.name, site.city_state_zip, site.distance)

Offline parsing of a saved results page::

    from disposalparser.query import parse

    sites = parse(Path("results.html").read_text(), url=SEARCH_URL)
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from disposalparser.document import HtmlDocument
from disposalparser.extractors.engine import extract
from disposalparser.settings import (
    DEFAULT_RADIUS,
    DEFAULT_ZIP_CODE,
    NO_RESULTS_PHRASES,
    RADIUS_INPUT_SELECTOR,
    SEARCH_FORM_SELECTOR,
    SUBMIT_SELECTOR,
    VALID_RADII,
    YEAR_ROUND_TAB_PATTERN,
    ZIP_INPUT_SELECTOR,
    ScraperSettings,
    load_settings,
)

if TYPE_CHECKING:
    from disposalparser.items import SiteRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class ScrapeError(RuntimeError):
    """Raised when the search page cannot be driven to a results page.

    Attributes:
        zip_code  -- the ZIP code being searched
        radius    -- the search radius in miles
        timed_out -- True when a navigation or wait exceeded its deadline
    """

    def __init__(
        self,
        message: str,
        zip_code: str = "",
        radius: str = "",
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.zip_code = zip_code
        self.radius = radius
        self.timed_out = timed_out


def _is_timeout(exc: BaseException) -> bool:
    # playwright.sync_api.TimeoutError messages read "Timeout 30000ms exceeded."
    return type(exc).__name__ == "TimeoutError" or "timeout" in str(exc).lower()


def validate_radius(radius: str | int) -> str:
    value = str(radius).strip()
    if value not in VALID_RADII:
        raise ValueError(
            f"Invalid radius {value!r}. Must be one of: {', '.join(VALID_RADII)}",
        )
    return value


def page_reports_no_results(text: str) -> bool:
    return any(phrase in text for phrase in NO_RESULTS_PHRASES)


# ---------------------------------------------------------------------------
# Extraction (rendered HTML → SiteRecord list, no network)
# ---------------------------------------------------------------------------

def parse(html: str, url: str = "") -> list[SiteRecord]:
    """Extract disposal sites from a rendered results page.

    Args:
        html: Rendered HTML of the results page.
        url:  URL the page was served from; used to absolutize map links.
    """
    return extract(HtmlDocument(html, base_url=url))


def extract_from_page(page: Any) -> list[SiteRecord]:
    """Snapshot a live Playwright *page* and extract from the snapshot."""
    html: str = page.content()
    url: str = page.url
    return parse(html, url=url)


# ---------------------------------------------------------------------------
# Form driving
# ---------------------------------------------------------------------------

_CLICK_TAB_JS = """(pattern) => {
    const re = new RegExp(pattern);
    const tab = Array.from(document.querySelectorAll('a')).find(a => re.test(a.textContent));
    if (tab) { tab.click(); return true; }
    return false;
}"""

_FILL_INPUT_JS = """([sel, value]) => {
    const input = document.querySelector(sel);
    if (!input) return false;
    input.focus();
    input.value = '';
    input.value = value;
    input.dispatchEvent(new Event('input', { bubbles: true }));
    input.dispatchEvent(new Event('change', { bubbles: true }));
    return true;
}"""

_CHECK_RADIO_JS = """(sel) => {
    const radio = document.querySelector(sel);
    if (!radio) return false;
    radio.checked = true;
    radio.dispatchEvent(new Event('change', { bubbles: true }));
    return true;
}"""

_FORM_SUBMIT_JS = """() => {
    const form = document.forms['searchForm'];
    if (form) { form.submit(); return true; }
    return false;
}"""


def _activate_year_round_tab(page: Any, settings: ScraperSettings) -> None:
    logger.info("Activating Year-Round tab...")
    clicked = page.evaluate(_CLICK_TAB_JS, YEAR_ROUND_TAB_PATTERN)
    if not clicked:
        logger.debug("Year-Round tab not found; continuing with the current tab")
    page.wait_for_timeout(settings.tab_settle_ms)


def _fill_zip_code(page: Any, zip_code: str, settings: ScraperSettings) -> None:
    logger.info("Filling ZIP code: %s...", zip_code)
    page.wait_for_selector(ZIP_INPUT_SELECTOR, timeout=settings.selector_timeout_ms)
    page.evaluate(_FILL_INPUT_JS, [ZIP_INPUT_SELECTOR, zip_code])


def _select_radius(page: Any, radius: str, settings: ScraperSettings) -> None:
    logger.info("Selecting radius: %s miles...", radius)
    selector = RADIUS_INPUT_SELECTOR.format(radius=radius)
    page.wait_for_selector(selector, timeout=settings.selector_timeout_ms)
    page.evaluate(_CHECK_RADIO_JS, selector)


def _submit_search(page: Any, settings: ScraperSettings) -> None:
    """Submit the search form, by button click first, then ``form.submit()``."""
    logger.info("Submitting form...")
    nav_kwargs = {"wait_until": "networkidle", "timeout": settings.navigation_timeout_ms}

    try:
        button = page.query_selector(SUBMIT_SELECTOR)
        if button is not None:
            logger.debug("Found submit button, clicking...")
            with page.expect_navigation(**nav_kwargs):
                button.click()
            return
    except Exception as exc:
        logger.info("Submit button click failed: %s", exc)

    try:
        with page.expect_navigation(**nav_kwargs):
            page.evaluate(_FORM_SUBMIT_JS)
        return
    except Exception as exc:
        logger.info("form.submit() failed: %s", exc)

    raise ScrapeError("Could not submit form using any method")


def _wait_for_results(page: Any, settings: ScraperSettings) -> None:
    logger.info("Form submitted, waiting for results...")
    page.wait_for_selector("body", timeout=settings.results_timeout_ms)
    page.wait_for_timeout(settings.results_settle_ms)


def _save_screenshot(page: Any, path: str) -> None:
    try:
        page.screenshot(path=path, full_page=True)
        logger.debug("Saved results screenshot to %s", path)
    except Exception as exc:
        logger.warning("Could not save screenshot to %s: %s", path, exc)


def _log_preview(sites: list[SiteRecord], limit: int = 3) -> None:
    for i, site in enumerate(sites[:limit], 1):
        logger.debug(
            "%d. %s | %s | %s | %s",
            i, site.name, site.street_address, site.city_state_zip, site.distance,
        )


def search_disposal_sites(
    page: Any,
    zip_code: str,
    radius: str,
    settings: ScraperSettings,
) -> list[SiteRecord]:
    """Run one search on an open Playwright *page* and extract the results.

    Returns an empty list when the results page reports no locations.
    Playwright errors propagate unchanged.
    """
    logger.info("Loading search page...")
    page.goto(
        settings.search_url,
        wait_until="networkidle",
        timeout=settings.navigation_timeout_ms,
    )
    page.wait_for_selector(SEARCH_FORM_SELECTOR, timeout=settings.selector_timeout_ms)

    _activate_year_round_tab(page, settings)
    _fill_zip_code(page, zip_code, settings)
    _select_radius(page, radius, settings)
    page.wait_for_timeout(settings.submit_settle_ms)
    _submit_search(page, settings)
    _wait_for_results(page, settings)

    page_text = page.text_content("body") or ""
    if page_reports_no_results(page_text):
        logger.info("No results found for %s within %s miles", zip_code, radius)
        return []

    if settings.debug_screenshot:
        _save_screenshot(page, settings.debug_screenshot)

    sites = extract_from_page(page)
    _log_preview(sites)
    return sites


# ---------------------------------------------------------------------------
# Browser lifecycle
# ---------------------------------------------------------------------------

@contextlib.contextmanager
def _open_search_page(settings: ScraperSettings) -> Iterator[Any]:
    """Launch Chromium and yield a fresh page; always closes the browser."""
    from playwright.sync_api import sync_playwright

    with sync_playwright() as p:
        browser = p.chromium.launch(
            headless=settings.headless,
            args=list(settings.browser_args),
        )
        try:
            ctx = browser.new_context(user_agent=settings.user_agent)
            page = ctx.new_page()
            page.set_default_timeout(settings.navigation_timeout_ms)
            yield page
        finally:
            with contextlib.suppress(Exception):
                browser.close()


def get_disposal_sites(
    zip_code: str = DEFAULT_ZIP_CODE,
    radius: str = DEFAULT_RADIUS,
    *,
    settings: ScraperSettings | None = None,
) -> list[SiteRecord]:
    """Fetch DEA disposal sites within *radius* miles of *zip_code*.

    Args:
        zip_code: ZIP code to search around.
        radius:   One of ``"5"``, ``"10"``, ``"20"``, ``"50"``.
        settings: Scraper settings; defaults to :func:`load_settings`.

    Returns:
        Ordered list of :class:`~disposalparser.items.SiteRecord`; empty when
        the page reports no results or nothing could be extracted.

    Raises:
        ValueError:  If *radius* is not a supported value.
        ScrapeError: On navigation timeouts (``timed_out=True``), form
                     submission failure, or any other browser error.
    """
    radius = validate_radius(radius)
    zip_code = str(zip_code).strip()
    settings = settings or load_settings()
    logger.info("Searching disposal sites near %s within %s miles", zip_code, radius)

    try:
        with _open_search_page(settings) as page:
            return search_disposal_sites(page, zip_code, radius, settings)
    except ScrapeError as exc:
        exc.zip_code = exc.zip_code or zip_code
        exc.radius = exc.radius or radius
        raise
    except ImportError as exc:
        raise ScrapeError(
            "Searching requires playwright: pip install playwright && "
            "playwright install chromium",
            zip_code=zip_code,
            radius=radius,
        ) from exc
    except Exception as exc:
        if _is_timeout(exc):
            raise ScrapeError(
                f"Navigation timeout searching {zip_code} ({radius} mi): {exc}",
                zip_code=zip_code,
                radius=radius,
                timed_out=True,
            ) from exc
        raise ScrapeError(
            f"Scrape failed for {zip_code} ({radius} mi): {exc}",
            zip_code=zip_code,
            radius=radius,
        ) from exc
