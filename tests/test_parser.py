"""Tests for disposalparser.parser.DisposalScraper."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from disposalparser import DisposalScraper
from disposalparser.items import SiteRecord
from disposalparser.settings import SEARCH_URL, ScraperSettings


def _make_site(name: str = "ABC Pharmacy") -> SiteRecord:
    return SiteRecord(
        name=name,
        address1="123 Main St",
        city_state_zip="Oklahoma City, OK 73120",
        distance="2.3 miles",
    )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestInit:
    def test_explicit_settings_kept(self):
        settings = ScraperSettings(headless=False)
        assert DisposalScraper(settings=settings).settings is settings

    def test_profile_loaded(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DISPOSAL_NAV_TIMEOUT_MS", raising=False)
        profile = tmp_path / "p.yaml"
        profile.write_text("navigation_timeout_ms: 12345\n", encoding="utf-8")
        assert DisposalScraper(profile=profile).settings.navigation_timeout_ms == 12345


# ---------------------------------------------------------------------------
# search()
# ---------------------------------------------------------------------------

class TestSearch:
    def test_delegates_with_bound_settings(self):
        settings = ScraperSettings()
        sites = [_make_site()]
        with patch("disposalparser.parser._search", return_value=sites) as mock_search:
            result = DisposalScraper(settings=settings).search("73120", radius="10")
        mock_search.assert_called_once_with("73120", "10", settings=settings)
        assert result == sites

    def test_default_radius(self):
        with patch("disposalparser.parser._search", return_value=[]) as mock_search:
            DisposalScraper(settings=ScraperSettings()).search("73120")
        assert mock_search.call_args.args[1] == "20"

    def test_errors_propagate(self):
        with patch("disposalparser.parser._search", side_effect=ValueError("Invalid radius")):
            with pytest.raises(ValueError):
                DisposalScraper(settings=ScraperSettings()).search("73120", radius="15")


# ---------------------------------------------------------------------------
# parse() / parse_from_browser()
# ---------------------------------------------------------------------------

class TestParse:
    def test_parse_html(self, six_column_html):
        sites = DisposalScraper(settings=ScraperSettings()).parse(six_column_html, url=SEARCH_URL)
        assert [s.name for s in sites] == [
            "ABC Pharmacy",
            "WALGREENS #05829",
            "OKLAHOMA CITY POLICE DEPT",
        ]

    def test_parse_no_network(self, labeled_text_html):
        with patch("disposalparser.parser._search") as mock_search:
            sites = DisposalScraper(settings=ScraperSettings()).parse(labeled_text_html)
        mock_search.assert_not_called()
        assert sites[0].name == "XYZ PHARMACY"

    def test_parse_from_browser(self, six_column_html):
        page = MagicMock()
        page.content.return_value = six_column_html
        page.url = SEARCH_URL
        sites = DisposalScraper(settings=ScraperSettings()).parse_from_browser(page)
        page.content.assert_called_once()
        page.goto.assert_not_called()
        assert len(sites) == 3
