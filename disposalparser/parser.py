"""disposalparser.parser: high-level DisposalScraper class.

Bundles one set of scraper settings with the search and parse workflows.

Usage::

    from disposalparser import DisposalScraper

    scraper = DisposalScraper()
    sites = scraper.search("73120", radius="10")

    # Parse a saved results page (no network)
    sites = scraper.parse(html, url="https://apps.deadiversion.usdoj.gov/...")

    # Parse from a live Playwright page that is already on the results
    sites = scraper.parse_from_browser(page)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from disposalparser.query import extract_from_page
from disposalparser.query import get_disposal_sites as _search
from disposalparser.query import parse as _parse
from disposalparser.settings import DEFAULT_RADIUS, ScraperSettings, load_settings

if TYPE_CHECKING:
    from pathlib import Path

    from disposalparser.items import SiteRecord


class DisposalScraper:
    """Reusable scraper bound to one :class:`ScraperSettings`.

    Args:
        settings: Explicit settings.  When omitted they are loaded from
                  *profile* and the environment via :func:`load_settings`.
        profile:  Optional YAML settings profile path.
    """

    def __init__(
        self,
        settings: ScraperSettings | None = None,
        profile: str | Path | None = None,
    ) -> None:
        self._settings = settings or load_settings(profile)

    @property
    def settings(self) -> ScraperSettings:
        return self._settings

    def search(self, zip_code: str, radius: str = DEFAULT_RADIUS) -> list[SiteRecord]:
        """Search the DEA locator; see :func:`~disposalparser.query.get_disposal_sites`."""
        return _search(zip_code, radius, settings=self._settings)

    def parse(self, html: str, url: str = "") -> list[SiteRecord]:
        """Extract sites from pre-rendered results HTML; no network calls."""
        return _parse(html, url=url)

    def parse_from_browser(self, page: Any) -> list[SiteRecord]:
        """Extract sites from a live Playwright ``Page`` on the results page.

        Calls ``page.content()`` and ``page.url``; no further navigation.
        """
        return extract_from_page(page)
