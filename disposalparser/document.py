"""disposalparser.document: read-only view of a rendered results page.

The extraction engine never touches a live browser.  It consumes the small
capability defined by the ``runtime_checkable`` protocols below, so any
object exposing the same methods (a BeautifulSoup snapshot, an in-memory test
fake) can be extracted from.

Usage::

    from disposalparser.document import HtmlDocument

    doc = HtmlDocument(page.content(), base_url=page.url)
    for row in doc.query_all("table tr"):
        print([cell.text() for cell in row.cells()])
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

# Elements treated as table cells, same as ``querySelectorAll('td, th')``
CELL_TAGS = ("td", "th")

# ---------------------------------------------------------------------------
# Protocol definitions
# ---------------------------------------------------------------------------

@runtime_checkable
class CellHandle(Protocol):
    """One table cell."""

    def text(self) -> str:
        """Trimmed text content of the cell."""
        ...

    def link(self) -> str | None:
        """Absolute href of the first anchor inside the cell, if any."""
        ...


@runtime_checkable
class RowHandle(Protocol):
    """One candidate row returned by a selector."""

    def cells(self) -> list[CellHandle]:
        """Cell-like descendants in document order."""
        ...

    def text(self) -> str:
        """Full concatenated text of the row (no separators, like textContent)."""
        ...


@runtime_checkable
class DocumentView(Protocol):
    """Snapshot of a fully rendered results page."""

    def query_all(self, selector: str) -> list[RowHandle]:
        """Return every element matching the CSS *selector* in document order."""
        ...

    def full_text(self) -> str:
        """Entire rendered body text."""
        ...


# ---------------------------------------------------------------------------
# BeautifulSoup implementation
# ---------------------------------------------------------------------------

class HtmlCell:
    __slots__ = ("_tag", "_base_url")

    def __init__(self, tag: Tag, base_url: str = "") -> None:
        self._tag = tag
        self._base_url = base_url

    def text(self) -> str:
        return self._tag.get_text().strip()

    def link(self) -> str | None:
        anchor = self._tag.find("a")
        if not isinstance(anchor, Tag):
            return None
        href = str(anchor.get("href") or "").strip()
        if not href:
            return None
        # DOM ``a.href`` is always absolute; mirror that for relative links
        if self._base_url:
            href = urljoin(self._base_url, href)
        return href

    def __repr__(self) -> str:
        return f"HtmlCell({self.text()!r})"


class HtmlRow:
    __slots__ = ("_tag", "_base_url")

    def __init__(self, tag: Tag, base_url: str = "") -> None:
        self._tag = tag
        self._base_url = base_url

    def cells(self) -> list[CellHandle]:
        return [
            HtmlCell(el, self._base_url)
            for el in self._tag.find_all(CELL_TAGS)
            if isinstance(el, Tag)
        ]

    def text(self) -> str:
        return self._tag.get_text()

    def __repr__(self) -> str:
        return f"HtmlRow({self.text()[:40]!r})"


class HtmlDocument:
    """:class:`DocumentView` over a static HTML snapshot.

    The HTML is parsed once with lxml.  Note that lxml, unlike a browser,
    does not insert implicit ``<tbody>`` elements; snapshots taken with
    Playwright's ``page.content()`` already contain them.

    Args:
        html:     Rendered page HTML.
        base_url: URL the page was served from, used to absolutize map links.
    """

    def __init__(self, html: str, base_url: str = "") -> None:
        self._soup = BeautifulSoup(html, "lxml")
        self._base_url = base_url

    @property
    def base_url(self) -> str:
        return self._base_url

    def query_all(self, selector: str) -> list[RowHandle]:
        return [
            HtmlRow(el, self._base_url)
            for el in self._soup.select(selector)
            if isinstance(el, Tag)
        ]

    def full_text(self) -> str:
        body = self._soup.find("body")
        return (body or self._soup).get_text()
