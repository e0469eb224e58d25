"""disposalparser.extractors.table: row classifier and table extractor.

The results table has been observed with six, five and four columns, and
occasionally with ragged rows.  Each row is classified by its cell count and
mapped with the matching column layout:

  SIX_COLUMN    Bus Name | Addr 1 | Addr 2 | City, State Zip | Dist | Map
  FIVE_COLUMN   Bus Name | Addr 1 | City, State Zip | Dist | ...
  FOUR_COLUMN   Bus Name | Address | City, State Zip | Dist
  IRREGULAR     two or more cells, mapped positionally like SIX_COLUMN
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from disposalparser.extractors.normalize import normalize_record

if TYPE_CHECKING:
    from disposalparser.document import CellHandle, DocumentView, RowHandle
    from disposalparser.items import SiteRecord

logger = logging.getLogger(__name__)

# Lower-cased substrings that identify heading rows.  "map mapbus" comes from
# the concatenated text of a "Map" cell followed by the "Bus Name" heading.
HEADER_MARKERS: tuple[str, ...] = (
    "bus name",
    "addr 1",
    "public controlled substance",
    "map mapbus",
)


class RowShape(StrEnum):
    SIX_COLUMN  = "six_column"
    FIVE_COLUMN = "five_column"
    FOUR_COLUMN = "four_column"
    IRREGULAR   = "irregular"


def is_header_text(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in HEADER_MARKERS)


def classify_row(cell_count: int) -> RowShape | None:
    """Map a cell count to a :class:`RowShape`; ``None`` means discard."""
    if cell_count >= 6:
        return RowShape.SIX_COLUMN
    if cell_count == 5:
        return RowShape.FIVE_COLUMN
    if cell_count == 4:
        return RowShape.FOUR_COLUMN
    if cell_count >= 2:
        return RowShape.IRREGULAR
    return None


def _at(texts: list[str], index: int) -> str:
    return texts[index] if index < len(texts) else ""


def _row_fields(shape: RowShape, cells: list[CellHandle]) -> dict[str, str]:
    texts = [cell.text() for cell in cells]

    if shape is RowShape.SIX_COLUMN:
        return {
            "name": texts[0],
            "address1": texts[1],
            "address2": texts[2],
            "city_state_zip": texts[3],
            "distance": texts[4],
            "map_url": cells[5].link() or "",
        }
    if shape in (RowShape.FIVE_COLUMN, RowShape.FOUR_COLUMN):
        return {
            "name": texts[0],
            "address1": texts[1],
            "city_state_zip": texts[2],
            "distance": texts[3],
        }
    # IRREGULAR: best-effort positional mapping, absent cells stay empty
    return {
        "name": _at(texts, 0),
        "address1": _at(texts, 1),
        "address2": _at(texts, 2),
        "city_state_zip": _at(texts, 3),
        "distance": _at(texts, 4),
    }


def extract_row(row: RowHandle) -> SiteRecord | None:
    """Extract one record from *row*, or ``None`` for headers and junk."""
    cells = row.cells()
    if not cells:
        return None
    if is_header_text(row.text()):
        return None
    shape = classify_row(len(cells))
    if shape is None:
        return None
    return normalize_record(**_row_fields(shape, cells))


def extract_from_table(document: DocumentView, selector: str) -> list[SiteRecord]:
    """Extract every valid record from the rows matched by *selector*.

    Never raises on malformed rows: a row that fails while being read is
    logged and skipped.  Output order is document row order.
    """
    try:
        rows = document.query_all(selector)
    except Exception as exc:
        logger.debug("Selector %r failed during extraction: %s", selector, exc)
        return []

    logger.debug("Processing %d rows for selector %r", len(rows), selector)
    records: list[SiteRecord] = []
    for i, row in enumerate(rows):
        try:
            record = extract_row(row)
        except Exception as exc:
            logger.debug("Row %d: skipping malformed row: %s", i, exc)
            continue
        if record is None:
            logger.debug("Row %d: skipped", i)
            continue
        logger.debug("Row %d: added site %s", i, record.name)
        records.append(record)

    logger.info("Extracted %d sites from table rows (%s)", len(records), selector)
    return records
