"""Text, number and timestamp cleanup shared by every conversion stage.

All helpers fail soft: malformed values become a neutral result
(empty string, 0, or None) so that one bad cell never aborts a batch.
"""

import re
from datetime import datetime
from typing import Any, Optional

_WHITESPACE = re.compile(r"\s+")
_LEADING_INT = re.compile(r"^[+-]?\d+")
_INTEGER = re.compile(r"[+-]?\d+")
_FILENAME_STAMP = re.compile(r"(\d{4})-(\d{2})-(\d{2})_(\d{2})-(\d{2})-(\d{2})")

# Largest count a single clip can report; anything above is out of range
MAX_QUANTITY = 2**31 - 1

# Accepted combined date/time layouts, tried in order
TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%Y-%m-%d",
    "%Y/%m/%d",
)


def normalize_text(value: Any) -> Any:
    """Replace NBSP, collapse whitespace runs and trim.

    ``None`` becomes ``""``; other non-string values are returned unchanged.
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    return _WHITESPACE.sub(" ", value.replace("\xa0", " ")).strip()


def parse_quantity(value: Any) -> int:
    """Parse a non-negative integer quantity.

    Reads the leading integer (``"100+"`` -> 100, ``"3.7"`` -> 3).
    Non-numeric input yields 0. Negative values and values above
    ``MAX_QUANTITY`` are out of range and clamped to 0.

    >>> parse_quantity("5"), parse_quantity("-5"), parse_quantity("invalid")
    (5, 0, 0)
    """
    if isinstance(value, bool):
        return 0
    if value is None:
        return 0
    if isinstance(value, int):
        number = value
    else:
        match = _LEADING_INT.match(normalize_text(str(value)))
        if match is None:
            return 0
        number = int(match.group())
    return number if 0 <= number <= MAX_QUANTITY else 0


def is_integer_text(value: Any) -> bool:
    """True when the cell holds a plain (optionally signed) integer."""
    if value is None:
        return False
    return _INTEGER.fullmatch(normalize_text(str(value))) is not None


def parse_level(value: Any) -> Optional[int]:
    """Parse an optional 1-5 style level (confidence, video quality).

    Blank or non-numeric cells return None, meaning "not recorded".
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(normalize_text(str(value)))
    return int(match.group()) if match else None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a combined date-and-time string.

    Returns None for anything unparsable instead of raising, so callers
    can drop or flag the row and carry on.
    """
    if isinstance(value, datetime):
        return value
    text = normalize_text(value)
    if not isinstance(text, str) or not text:
        return None

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Calendar dates are taken from the local wall clock of the camera
    return parsed.replace(tzinfo=None)


def timestamp_from_filename(file_name: str) -> Optional[datetime]:
    """Extract ``YYYY-MM-DD_HH-MM-SS`` from a clip name such as
    ``algapelago_1_2025-04-05_10-00-47``."""
    match = _FILENAME_STAMP.search(normalize_text(file_name) or "")
    if match is None:
        return None
    year, month, day, hour, minute, second = (int(g) for g in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None
