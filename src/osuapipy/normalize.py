"""
normalize.py

The v1 API encodes nearly every value as a string ("923357", "1",
"2020-01-01 10:00:00"). `normalize_response()` walks a decoded JSON value and
retypes its leaves:

  - fields listed in BOOLEAN_FIELDS: "0"/"1" -> False/True
  - date-time strings -> timezone-aware UTC datetime (unparseable ones, like
    "0000-00-00 00:00:00", are left as strings)
  - numeric strings -> int / float
  - everything else untouched

The function is idempotent, so normalizing twice is harmless.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import *

import dateutil.parser as _dateutil_parser
from dateutil import tz

__all__ = ["BOOLEAN_FIELDS", "normalize_response", "parse_datetime", "parse_number"]

# Fields the API sends as "0"/"1" but which mean yes/no
BOOLEAN_FIELDS: FrozenSet[str] = frozenset({
    "perfect",
    "pass",
    "replay_available",
    "storyboard",
    "video",
    "download_unavailable",
    "audio_unavailable",
})

_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2}(?:Z|[+-]\d{2}:?\d{2})?$"
)
_NUMBER_RE = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INT_RE = re.compile(r"^-?\d+$")


def parse_datetime(value: str) -> datetime:
    """Parse an API date string, treating a missing offset as UTC. Result is always in UTC."""
    dt = _dateutil_parser.parse(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz.UTC)
    return dt.astimezone(tz.UTC)


def parse_number(value: str) -> Optional[Union[int, float]]:
    """Return `value` as int/float if it is a clean finite number, else None."""
    if not value or not _NUMBER_RE.match(value):
        return None
    if _INT_RE.match(value):
        return int(value)
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def normalize_response(value: Any, key: Optional[str] = None) -> Any:
    """
    Recursively convert a raw API payload into typed values.

    Parameters
    ----------
    value : Any
        Decoded JSON (dict, list, str, number, bool or None).
    key : Optional[str]
        Name of the field `value` was found under; decides boolean coercion.

    Returns
    -------
    Any
        A new structure of the same shape with retyped leaves. Containers are
        copied, the input is left untouched.

    Example
    -------
    >>> normalize_response({"perfect": "1", "score": "923357"})
    {'perfect': True, 'score': 923357}
    """
    if isinstance(value, bool):
        return value

    if key in BOOLEAN_FIELDS and value in ("0", "1", 0, 1):
        return bool(int(value))

    if isinstance(value, str):
        if _DATETIME_RE.match(value):
            try:
                return parse_datetime(value)
            except (ValueError, OverflowError):
                # "0000-00-00 00:00:00" and other impossible dates stay text
                pass
        number = parse_number(value)
        return value if number is None else number

    if isinstance(value, list):
        return [normalize_response(item) for item in value]

    if isinstance(value, dict):
        return {k: normalize_response(v, k) for k, v in value.items()}

    # None, int, float, datetime and anything already typed
    return value
