"""Shared pytest fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SEARCH_URL = "https://apps.deadiversion.usdoj.gov/pubdispsearch/spring/main"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def six_column_html() -> str:
    return _read_fixture("six_column.html")


@pytest.fixture
def mixed_columns_html() -> str:
    return _read_fixture("mixed_columns.html")


@pytest.fixture
def header_only_html() -> str:
    return _read_fixture("header_only.html")


@pytest.fixture
def labeled_text_html() -> str:
    return _read_fixture("labeled_text.html")


@pytest.fixture
def keyword_text_html() -> str:
    return _read_fixture("keyword_text.html")


@pytest.fixture
def no_results_html() -> str:
    return _read_fixture("no_results.html")


# ---------------------------------------------------------------------------
# In-memory DocumentView fakes
# ---------------------------------------------------------------------------

@dataclass
class FakeCell:
    value: str = ""
    href: str | None = None

    def text(self) -> str:
        return self.value.strip()

    def link(self) -> str | None:
        return self.href


@dataclass
class FakeRow:
    cell_list: list[FakeCell] = field(default_factory=list)
    row_text: str | None = None

    def cells(self) -> list[FakeCell]:
        return list(self.cell_list)

    def text(self) -> str:
        if self.row_text is not None:
            return self.row_text
        return "".join(cell.value for cell in self.cell_list)


class BrokenRow:
    """Row whose handle fails when read, like a detached DOM node."""

    def cells(self) -> list[FakeCell]:
        raise RuntimeError("element is not attached to the DOM")

    def text(self) -> str:
        raise RuntimeError("element is not attached to the DOM")


@dataclass
class FakeDocument:
    rows_by_selector: dict[str, object] = field(default_factory=dict)
    text: str = ""
    queries: list[str] = field(default_factory=list)

    def query_all(self, selector: str) -> list:
        self.queries.append(selector)
        rows = self.rows_by_selector.get(selector, [])
        if isinstance(rows, Exception):
            raise rows
        return list(rows)

    def full_text(self) -> str:
        return self.text


@pytest.fixture
def make_row():
    """Build a FakeRow; pass ``(text, href)`` tuples for linked cells."""

    def _make(*cells: str | tuple[str, str], text: str | None = None) -> FakeRow:
        built = [
            FakeCell(c[0], c[1]) if isinstance(c, tuple) else FakeCell(c)
            for c in cells
        ]
        return FakeRow(built, row_text=text)

    return _make


@pytest.fixture
def make_document():
    def _make(rows_by_selector: dict[str, object] | None = None, text: str = "") -> FakeDocument:
        return FakeDocument(dict(rows_by_selector or {}), text=text)

    return _make


@pytest.fixture
def broken_row() -> BrokenRow:
    return BrokenRow()
