"""Tests for disposalparser.extractors.text_patterns."""

from __future__ import annotations

from disposalparser.document import HtmlDocument
from disposalparser.extractors.text_patterns import (
    extract_from_text,
    extract_keyword_anchored,
    extract_labeled_segments,
    find_disposal_section,
    parse_labeled_entry,
)
from disposalparser.items import SiteRecord

LABELED = (
    "Public Controlled Substance Disposal Locations: "
    "Bus NameXYZ PHARMACYAddr 1100 MAIN STCity, State ZipOKC, OK 73120Dist1.2 miles"
)

# ---------------------------------------------------------------------------
# Section discovery
# ---------------------------------------------------------------------------

class TestFindSection:
    def test_missing_heading(self):
        assert find_disposal_section("Locations near 74104") is None

    def test_section_ends_at_blank_line(self):
        text = LABELED + "\n\nFooter text"
        section = find_disposal_section(text)
        assert section is not None
        assert section.endswith("1.2 miles")

    def test_section_ends_at_next_heading(self):
        text = LABELED + "\nContact: DEA"
        section = find_disposal_section(text)
        assert section is not None
        assert "Contact" not in section


# ---------------------------------------------------------------------------
# Labeled segments
# ---------------------------------------------------------------------------

class TestLabeledSegments:
    def test_single_entry(self):
        assert extract_labeled_segments(LABELED) == [
            SiteRecord(
                name="XYZ PHARMACY",
                address1="100 MAIN ST",
                address2="",
                city_state_zip="OKC, OK 73120",
                distance="1.2 miles",
                map_url="",
            )
        ]

    def test_entry_with_second_address_line(self):
        record = parse_labeled_entry(
            "CVS PHARMACY #2041Addr 12400 NW 23RD STAddr 2STE B"
            "City, State ZipOKLAHOMA CITY, OK 73107Dist3.4 miles"
        )
        assert record == SiteRecord(
            name="CVS PHARMACY #2041",
            address1="2400 NW 23RD ST",
            address2="STE B",
            city_state_zip="OKLAHOMA CITY, OK 73107",
            distance="3.4 miles",
        )

    def test_name_stops_at_distance_label(self):
        record = parse_labeled_entry("XYZ PHARMACYDist1.2 miles")
        assert record is not None
        assert record.name == "XYZ PHARMACY"
        assert record.distance == "1.2 miles"

    def test_preamble_chunk_skipped(self):
        assert parse_labeled_entry(" Results for 73120 ") is None

    def test_no_section_yields_nothing(self):
        assert extract_labeled_segments("CVS PHARMACY 456 OAK AVE") == []

    def test_fixture_page(self, labeled_text_html):
        text = HtmlDocument(labeled_text_html).full_text()
        records = extract_labeled_segments(text)
        assert [r.name for r in records] == ["XYZ PHARMACY", "CVS PHARMACY #2041"]
        assert records[1].address2 == "STE B"
        assert records[1].distance == "3.4 miles"


# ---------------------------------------------------------------------------
# Keyword-anchored windows
# ---------------------------------------------------------------------------

class TestKeywordAnchored:
    def test_pharmacy_with_following_fields(self):
        records = extract_keyword_anchored(
            "Locations near 74104\nCVS PHARMACY 456 OAK AVE TULSA, OK 74104 2.0 miles\n"
        )
        # The city pattern also accepts the street words before the city
        assert records == [
            SiteRecord(
                name="CVS PHARMACY",
                address1="456 OAK AVE",
                city_state_zip="OAK AVE TULSA, OK 74104",
                distance="2.0 miles",
            )
        ]

    def test_previous_listing_in_window_supplies_fields(self):
        text = (
            "WALGREENS PHARMACY 12 ELM ST NORMAN, OK 73069 1.1 miles\n"
            "CVS PHARMACY 456 OAK AVE TULSA, OK 74104 2.0 miles"
        )
        records = extract_keyword_anchored(text)
        assert [r.name for r in records] == ["WALGREENS PHARMACY", "CVS PHARMACY"]
        for record in records:
            assert record.address1 == "12 ELM ST"
            assert record.city_state_zip == "ELM ST NORMAN, OK 73069"
            assert record.distance == "1.1 miles"

    def test_no_pharmacy_keyword(self):
        assert extract_keyword_anchored("Locations near 74104\n123 ELM ST") == []

    def test_fields_may_be_missing(self):
        records = extract_keyword_anchored("see WALGREENS PHARMACY today")
        assert len(records) == 1
        assert records[0].name == "WALGREENS PHARMACY"
        assert records[0].address1 == ""
        assert records[0].city_state_zip == ""


# ---------------------------------------------------------------------------
# Strategy chain
# ---------------------------------------------------------------------------

class TestExtractFromText:
    def test_labeled_strategy_first(self):
        name, records = extract_from_text(LABELED)
        assert name == "labeled_segment"
        assert [r.name for r in records] == ["XYZ PHARMACY"]

    def test_keyword_strategy_when_no_section(self, keyword_text_html):
        name, records = extract_from_text(HtmlDocument(keyword_text_html).full_text())
        assert name == "keyword_anchored"
        assert len(records) == 1
        assert records[0].name == "CVS PHARMACY"
        assert records[0].address1 == "456 OAK AVE"
        assert records[0].city_state_zip == "OAK AVE TULSA, OK 74104"
        assert records[0].map_url == ""

    def test_nothing_extractable(self):
        assert extract_from_text("No locations found within the selected radius.") == (None, [])

    def test_empty_text(self):
        assert extract_from_text("") == (None, [])
