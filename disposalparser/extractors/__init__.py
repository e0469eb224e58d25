"""Extraction sub-package: selector probing, table rows and free-text fallback."""

from .engine import ExtractionResult, extract, run_extraction
from .normalize import normalize_record
from .selectors import ROW_SELECTORS, probe_selector
from .table import RowShape, classify_row, extract_from_table
from .text_patterns import extract_from_text

__all__ = [
    "ROW_SELECTORS",
    "ExtractionResult",
    "RowShape",
    "classify_row",
    "extract",
    "extract_from_table",
    "extract_from_text",
    "normalize_record",
    "probe_selector",
    "run_extraction",
]
