"""disposalparser.extractors.engine: extraction orchestrator.

Sequences the extractors as a linear state machine that never branches back:

  START → PROBE_SELECTOR ─┬─ selector found ──→ TABLE_EXTRACT ─┬─ records ─→ DONE
                          │                                    └─ empty ───┐
                          └─ no selector ──────────────────────────────────┴→ TEXT_FALLBACK → DONE

Fallback reasons (recorded, never raised):
  NO_SELECTOR_MATCH    every candidate selector scored zero
  EMPTY_TABLE_RESULT   a selector matched but no row survived normalization
  NO_EXTRACTABLE_DATA  the text fallback found nothing either; the result
                       is an empty list, which means "no sites nearby"

Collaborator failures (navigation, timeouts) never reach this module; the
engine only reads an already rendered snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from disposalparser.extractors.selectors import probe_selector
from disposalparser.extractors.table import extract_from_table
from disposalparser.extractors.text_patterns import extract_from_text

if TYPE_CHECKING:
    from disposalparser.document import DocumentView
    from disposalparser.items import SiteRecord

logger = logging.getLogger(__name__)


class ExtractionState(StrEnum):
    START          = "start"
    PROBE_SELECTOR = "probe_selector"
    TABLE_EXTRACT  = "table_extract"
    TEXT_FALLBACK  = "text_fallback"
    DONE           = "done"


class ExtractionStrategy(StrEnum):
    TABLE            = "table"
    LABELED_SEGMENT  = "labeled_segment"
    KEYWORD_ANCHORED = "keyword_anchored"
    NONE             = "none"


class FallbackReason(StrEnum):
    NO_SELECTOR_MATCH   = "no_selector_match"
    EMPTY_TABLE_RESULT  = "empty_table_result"
    NO_EXTRACTABLE_DATA = "no_extractable_data"


@dataclass
class ExtractionResult:
    """Records plus provenance for one extraction pass."""
    records: list[SiteRecord] = field(default_factory=list)
    strategy_used: ExtractionStrategy = ExtractionStrategy.NONE
    selector: str | None = None
    selector_score: int = 0
    fallback_reasons: list[FallbackReason] = field(default_factory=list)
    states: list[ExtractionState] = field(default_factory=list)


# Allowed transitions; _advance() refuses anything else
TRANSITIONS: dict[ExtractionState, frozenset[ExtractionState]] = {
    ExtractionState.START:          frozenset({ExtractionState.PROBE_SELECTOR}),
    ExtractionState.PROBE_SELECTOR: frozenset({
        ExtractionState.TABLE_EXTRACT, ExtractionState.TEXT_FALLBACK,
    }),
    ExtractionState.TABLE_EXTRACT:  frozenset({
        ExtractionState.TEXT_FALLBACK, ExtractionState.DONE,
    }),
    ExtractionState.TEXT_FALLBACK:  frozenset({ExtractionState.DONE}),
    ExtractionState.DONE:           frozenset(),
}


class _Run:
    """One pass of the state machine over a single document."""

    def __init__(self, document: DocumentView) -> None:
        self.document = document
        self.result = ExtractionResult(states=[ExtractionState.START])

    @property
    def state(self) -> ExtractionState:
        return self.result.states[-1]

    def _advance(self, target: ExtractionState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal extraction transition {self.state} → {target}")
        self.result.states.append(target)

    # ── State handlers: each returns the next state ─────────────────────────

    def start(self) -> ExtractionState:
        return ExtractionState.PROBE_SELECTOR

    def probe_selector(self) -> ExtractionState:
        probe = probe_selector(self.document)
        if probe is None:
            self.result.fallback_reasons.append(FallbackReason.NO_SELECTOR_MATCH)
            return ExtractionState.TEXT_FALLBACK
        self.result.selector = probe.selector
        self.result.selector_score = probe.score
        return ExtractionState.TABLE_EXTRACT

    def table_extract(self) -> ExtractionState:
        if self.result.selector is None:
            raise RuntimeError(f"No selector chosen before {self.state}")
        records = extract_from_table(self.document, self.result.selector)
        if not records:
            logger.info("Table extraction yielded nothing, trying page text...")
            self.result.fallback_reasons.append(FallbackReason.EMPTY_TABLE_RESULT)
            return ExtractionState.TEXT_FALLBACK
        self.result.records = records
        self.result.strategy_used = ExtractionStrategy.TABLE
        return ExtractionState.DONE

    def text_fallback(self) -> ExtractionState:
        strategy, records = extract_from_text(self.document.full_text())
        if strategy is None:
            self.result.fallback_reasons.append(FallbackReason.NO_EXTRACTABLE_DATA)
        else:
            self.result.records = records
            self.result.strategy_used = ExtractionStrategy(strategy)
        return ExtractionState.DONE

    def run(self) -> ExtractionResult:
        handlers: dict[ExtractionState, Callable[[], ExtractionState]] = {
            ExtractionState.START: self.start,
            ExtractionState.PROBE_SELECTOR: self.probe_selector,
            ExtractionState.TABLE_EXTRACT: self.table_extract,
            ExtractionState.TEXT_FALLBACK: self.text_fallback,
        }
        while self.state is not ExtractionState.DONE:
            self._advance(handlers[self.state]())
        return self.result


def run_extraction(document: DocumentView) -> ExtractionResult:
    """Run the full extraction chain over *document*.

    Returns:
        :class:`ExtractionResult`; ``records`` may be empty, which is a valid
        outcome rather than an error.
    """
    result = _Run(document).run()
    if result.records:
        logger.info(
            "Extracted %d disposal sites via %s",
            len(result.records), result.strategy_used.value,
        )
    else:
        logger.warning(
            "All extraction strategies exhausted (%s); no sites found",
            ", ".join(reason.value for reason in result.fallback_reasons),
        )
    return result


def extract(document: DocumentView) -> list[SiteRecord]:
    """Extract the ordered list of disposal sites from *document*."""
    return run_extraction(document).records
