"""Tests for disposalparser.document."""

from __future__ import annotations

from disposalparser.document import (
    CellHandle,
    DocumentView,
    HtmlDocument,
    RowHandle,
)

_ROWS = """
<html><body>
<table><tbody>
<tr><th>Bus Name</th><td>Addr 1</td></tr>
<tr><td> ABC Pharmacy </td><td><a href="map?id=7">Map</a></td><td><a href="">x</a></td></tr>
</tbody></table>
<p>after</p>
</body></html>
"""


class TestHtmlDocument:
    def test_satisfies_protocols(self):
        doc = HtmlDocument(_ROWS)
        assert isinstance(doc, DocumentView)
        row = doc.query_all("tr")[0]
        assert isinstance(row, RowHandle)
        assert isinstance(row.cells()[0], CellHandle)

    def test_th_and_td_are_cells(self):
        header = HtmlDocument(_ROWS).query_all("tr")[0]
        assert [c.text() for c in header.cells()] == ["Bus Name", "Addr 1"]

    def test_row_text_has_no_separators(self):
        header = HtmlDocument(_ROWS).query_all("tr")[0]
        assert header.text() == "Bus NameAddr 1"

    def test_cell_text_is_trimmed(self):
        row = HtmlDocument(_ROWS).query_all("tr")[1]
        assert row.cells()[0].text() == "ABC Pharmacy"

    def test_link_resolved_against_base_url(self):
        doc = HtmlDocument(_ROWS, base_url="https://example.org/search/main")
        cells = doc.query_all("tr")[1].cells()
        assert cells[1].link() == "https://example.org/search/map?id=7"

    def test_link_kept_as_is_without_base_url(self):
        cells = HtmlDocument(_ROWS).query_all("tr")[1].cells()
        assert cells[1].link() == "map?id=7"

    def test_missing_or_empty_link(self):
        cells = HtmlDocument(_ROWS).query_all("tr")[1].cells()
        assert cells[0].link() is None
        assert cells[2].link() is None

    def test_unmatched_selector(self):
        assert HtmlDocument(_ROWS).query_all("table thead tr") == []

    def test_full_text(self):
        text = HtmlDocument(_ROWS).full_text()
        assert "ABC Pharmacy" in text
        assert "after" in text

    def test_fakes_satisfy_protocols(self, make_row, make_document):
        assert isinstance(make_document(), DocumentView)
        assert isinstance(make_row("a", "b"), RowHandle)
