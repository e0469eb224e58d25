"""Record normalizer: raw field fragments → :class:`SiteRecord` or rejection."""

from __future__ import annotations

import logging
import re

from disposalparser.items import SiteRecord

logger = logging.getLogger(__name__)

_NAME_LABEL_RE = re.compile(r"^\s*Bus Name\s*", re.IGNORECASE)
_DIST_LABEL_RE = re.compile(r"^\s*Dist\s*", re.IGNORECASE)

# Names this short are leftover header/label fragments, not businesses
_MIN_NAME_LENGTH = 3


def clean_name(value: str) -> str:
    return _NAME_LABEL_RE.sub("", value or "").strip()


def clean_distance(value: str) -> str:
    return _DIST_LABEL_RE.sub("", value or "").strip()


def is_valid_name(name: str) -> bool:
    """Return True if *name* can stand as a business name.

    Rejects empty names, names of two characters or fewer, and anything
    containing "map" (stray "Map" link cells that survived row filtering).
    """
    return len(name) >= _MIN_NAME_LENGTH and "map" not in name.lower()


def normalize_record(
    name: str,
    address1: str = "",
    address2: str = "",
    city_state_zip: str = "",
    distance: str = "",
    map_url: str = "",
) -> SiteRecord | None:
    """Build a :class:`SiteRecord` from raw strings, or return ``None``.

    Strips a leading ``Bus Name`` label from *name* and a leading ``Dist``
    label from *distance*; every other field is only trimmed.
    """
    cleaned = clean_name(name)
    if not is_valid_name(cleaned):
        logger.debug("Rejected site name %r", cleaned)
        return None
    return SiteRecord(
        name=cleaned,
        address1=(address1 or "").strip(),
        address2=(address2 or "").strip(),
        city_state_zip=(city_state_zip or "").strip(),
        distance=clean_distance(distance),
        map_url=(map_url or "").strip(),
    )
