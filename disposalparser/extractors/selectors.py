"""Selector prober: pick the row query that best identifies data rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from disposalparser.extractors.table import is_header_text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from disposalparser.document import DocumentView

logger = logging.getLogger(__name__)

# Most specific first.  Less specific queries over-match the same logical rows,
# so on equal scores the earlier entry must win.
ROW_SELECTORS: tuple[str, ...] = (
    "table tbody tr",
    "table tr",
    "tbody tr",
    "tr",
)


@dataclass(frozen=True)
class SelectorProbe:
    """Winning selector and the number of data rows it matched."""
    selector: str
    score: int


def score_selector(document: DocumentView, selector: str) -> int:
    """Count rows matched by *selector* that have cells and are not headers."""
    score = 0
    for row in document.query_all(selector):
        if row.cells() and not is_header_text(row.text()):
            score += 1
    return score


def probe_selector(
    document: DocumentView,
    candidates: Sequence[str] = ROW_SELECTORS,
) -> SelectorProbe | None:
    """Return the best-scoring candidate, or ``None`` if all score zero."""
    best: SelectorProbe | None = None
    for selector in candidates:
        try:
            score = score_selector(document, selector)
        except Exception as exc:
            logger.debug("Selector %s failed: %s", selector, exc)
            continue
        logger.debug("Selector %s: found %d data rows", selector, score)
        if score > (best.score if best else 0):
            best = SelectorProbe(selector=selector, score=score)

    if best is None:
        logger.info("No table rows found by any selector")
    else:
        logger.info("Using selector %s (found %d rows)", best.selector, best.score)
    return best
