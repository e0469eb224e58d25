"""disposalparser.extractors.text_patterns: free-text fallback extraction.

Used when no usable table can be recovered from the results page.  Works on
the concatenated body text (``textContent``), where cell boundaries vanish and
labels run straight into values, e.g.::

    Bus NameXYZ PHARMACYAddr 1100 MAIN STCity, State ZipOKC, OK 73120Dist1.2 miles

Strategies, tried in order (first non-empty result wins):
  1. labeled_segment:  split the disposal-locations section on "Bus Name"
                       and read each labeled field
  2. keyword_anchored: find uppercase names containing "PHARMACY" and pick
                       an address, city/state/zip and distance out of the
                       surrounding text

Both are pattern-shape heuristics; neither validates field semantics.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from disposalparser.extractors.normalize import normalize_record
from disposalparser.items import SiteRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Labeled-segment patterns
# ---------------------------------------------------------------------------

SECTION_HEADING = "Public Controlled Substance Disposal Locations:"
ENTRY_MARKER = "Bus Name"

# Section ends at a blank line, a "Word:" heading on a new line, or end of text
_SECTION_RE = re.compile(
    re.escape(SECTION_HEADING) + r"(.+?)(?=\n\n|\n[A-Z][a-z]+:|\n\s*\Z|\Z)",
    re.DOTALL,
)

_FIELD_MARKERS = ("Addr 1", "Addr 2", "City, State Zip", "Dist")

_ENTRY_NAME_RE = re.compile(r"^(.*?)(?=Addr 1|Addr 2|City, State Zip|Dist|\Z)", re.DOTALL)
_ENTRY_ADDR1_RE = re.compile(r"Addr 1\s*(\d.*?)(?=Addr 2|City, State Zip)", re.DOTALL)
_ENTRY_ADDR2_RE = re.compile(r"Addr 2(.*?)(?=City, State Zip)", re.DOTALL)
_ENTRY_CITY_RE = re.compile(r"City, State Zip\s*([A-Z][A-Za-z\s,.'-]*\d{5})")
_ENTRY_DIST_RE = re.compile(r"Dist\s*([0-9.]+\s*miles?)")

# ---------------------------------------------------------------------------
# Keyword-anchored patterns
# ---------------------------------------------------------------------------

_PHARMACY_RE = re.compile(r"[A-Z\s&,.]+PHARMACY[A-Z\s&,.]*")

_WINDOW_BEFORE = 100
_WINDOW_AFTER = 200

STREET_SUFFIXES: tuple[str, ...] = ("AVE", "ST", "RD", "DR", "BLVD", "WAY", "LN", "CT")

_STREET_RE = re.compile(r"([0-9]+[A-Z\s]+(?:" + "|".join(STREET_SUFFIXES) + r"))")
_CITY_STATE_ZIP_RE = re.compile(r"([A-Z\s]+,\s*[A-Z]{2}\s*[0-9]{5})")
_DISTANCE_RE = re.compile(r"([0-9.]+\s*miles?)")


def _group(pattern: re.Pattern[str], text: str) -> str:
    m = pattern.search(text)
    return m.group(1).strip() if m else ""


# ---------------------------------------------------------------------------
# Strategy 1: labeled segments
# ---------------------------------------------------------------------------

def find_disposal_section(full_text: str) -> str | None:
    """Return the text following the disposal-locations heading, if present."""
    m = _SECTION_RE.search(full_text)
    return m.group(1) if m else None


def parse_labeled_entry(entry: str) -> SiteRecord | None:
    """Parse one ``Bus Name``-delimited chunk into a record."""
    if not any(marker in entry for marker in _FIELD_MARKERS):
        # Preamble between the heading and the first entry
        return None
    name_match = _ENTRY_NAME_RE.search(entry)
    return normalize_record(
        name=name_match.group(1) if name_match else "",
        address1=_group(_ENTRY_ADDR1_RE, entry),
        address2=_group(_ENTRY_ADDR2_RE, entry),
        city_state_zip=_group(_ENTRY_CITY_RE, entry),
        distance=_group(_ENTRY_DIST_RE, entry),
    )


def extract_labeled_segments(full_text: str) -> list[SiteRecord]:
    section = find_disposal_section(full_text)
    if section is None:
        logger.debug("No disposal-locations section in page text")
        return []
    logger.debug("Found disposal section: %s", section[:200])

    records: list[SiteRecord] = []
    for entry in section.split(ENTRY_MARKER):
        if not entry.strip():
            continue
        logger.debug("Processing entry: %s", entry[:100])
        record = parse_labeled_entry(entry)
        if record is not None:
            logger.debug("Added site: %s", record.name)
            records.append(record)
    return records


# ---------------------------------------------------------------------------
# Strategy 2: keyword-anchored windows
# ---------------------------------------------------------------------------

def _window_fields(window: str) -> dict[str, str]:
    """Pick address, city/state/zip and distance out of *window*.

    Each field is the first match anywhere in the window, so a previous
    listing inside the look-behind margin can supply them.
    """
    return {
        "address1": _group(_STREET_RE, window),
        "city_state_zip": _group(_CITY_STATE_ZIP_RE, window),
        "distance": _group(_DISTANCE_RE, window),
    }


def extract_keyword_anchored(full_text: str) -> list[SiteRecord]:
    records: list[SiteRecord] = []
    for m in _PHARMACY_RE.finditer(full_text):
        match_text = m.group(0)
        # First occurrence of the matched text anchors the window
        anchor = full_text.find(match_text)
        start = max(0, anchor - _WINDOW_BEFORE)
        window = full_text[start:anchor + _WINDOW_AFTER]
        record = normalize_record(name=match_text, **_window_fields(window))
        if record is not None:
            logger.debug("Added keyword-anchored site: %s", record.name)
            records.append(record)
    return records


# ---------------------------------------------------------------------------
# Strategy chain
# ---------------------------------------------------------------------------

TEXT_STRATEGIES: list[tuple[str, Callable[[str], list[SiteRecord]]]] = [
    ("labeled_segment", extract_labeled_segments),
    ("keyword_anchored", extract_keyword_anchored),
]


def extract_from_text(full_text: str) -> tuple[str | None, list[SiteRecord]]:
    """Run the text strategies in order.

    Returns:
        ``(strategy_name, records)`` for the first strategy that produced
        records, or ``(None, [])`` when none did.
    """
    logger.info("Attempting to extract from page text...")
    for name, strategy in TEXT_STRATEGIES:
        try:
            records = strategy(full_text)
        except Exception as exc:
            logger.warning("Text strategy %s failed: %s", name, exc)
            continue
        if records:
            logger.info("Extracted %d sites with text strategy %s", len(records), name)
            return name, records
    return None, []
