"""
Parsing helpers for form input.

The CLI prompts, the TUI forms and the sheet loaders all receive raw
text. These functions turn it into the typed values the use cases
expect, raising ``ValidationError`` with a message suitable for a user
notification when a required field is missing or a number is not a
number.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

from aviary.domain.errors import ValidationError

_NUM_RE = re.compile(r"^[-+]?\d+(?:[.,]\d+)?$")
_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")
# a date, optionally followed by the time part spreadsheets attach to it
_DATE_RE = re.compile(r"^(\S+?)(?:[ T]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)?$")
_DATETIME_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M")


def _clean(txt: Any) -> Optional[str]:
    if txt is None:
        return None
    s = str(txt).strip()
    return s or None


def optional_text(txt: Any) -> Optional[str]:
    return _clean(txt)


def require_text(txt: Any, field: str) -> str:
    s = _clean(txt)
    if s is None:
        raise ValidationError(f"{field} is required")
    return s


def parse_amount(txt: Any, field: str, required: bool = True) -> Optional[float]:
    """Interpret a non-negative decimal amount.

    Accepts a dot or a comma as decimal separator:
        "48"    → 48.0
        "47,5"  → 47.5
        ""      → None (only when ``required`` is False)

    Raises:
        ValidationError: missing required value, non-numeric or negative text.
    """
    if isinstance(txt, (int, float)) and not isinstance(txt, bool):
        value = float(txt)
    else:
        s = _clean(txt)
        if s is None:
            if required:
                raise ValidationError(f"{field} is required")
            return None
        if not _NUM_RE.match(s):
            raise ValidationError(f"{field} must be a number, got {s!r}")
        value = float(s.replace(",", "."))
    if value < 0:
        raise ValidationError(f"{field} must not be negative")
    return value


def parse_count(txt: Any, field: str, required: bool = True, default: Optional[int] = None) -> Optional[int]:
    """Interpret a whole, non-negative count of birds or eggs.

    Blank input gives ``default`` when the field is optional.
    """
    if _clean(txt) is None and not isinstance(txt, (int, float)):
        if required and default is None:
            raise ValidationError(f"{field} is required")
        return default
    value = parse_amount(txt, field)
    if value is None or value != int(value):
        raise ValidationError(f"{field} must be a whole number")
    return int(value)


def parse_date(txt: Any, field: str, required: bool = True) -> Optional[date]:
    """Interpret ``YYYY-MM-DD`` or ``DD/MM/YYYY`` (dates pass through)."""
    if isinstance(txt, datetime):
        return txt.date()
    if isinstance(txt, date):
        return txt
    s = _clean(txt)
    if s is None:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    m = _DATE_RE.match(s)
    if m:
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(m.group(1), fmt).date()
            except ValueError:
                continue
    raise ValidationError(f"{field} must be a date (YYYY-MM-DD), got {s!r}")


def parse_timestamp(txt: Any, field: str) -> Optional[datetime]:
    """Interpret ``YYYY-MM-DD HH:MM`` (seconds optional); blank gives None."""
    if isinstance(txt, datetime):
        return txt
    s = _clean(txt)
    if s is None:
        return None
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    raise ValidationError(f"{field} must be a timestamp (YYYY-MM-DD HH:MM), got {s!r}")


def parse_choice(txt: Any, field: str, choices, default: Optional[str] = None) -> str:
    """Match ``txt`` case-insensitively against the allowed ``choices``."""
    s = _clean(txt)
    if s is None:
        if default is not None:
            return default
        raise ValidationError(f"{field} is required")
    s = s.lower()
    if s not in choices:
        raise ValidationError(f"{field} must be one of {', '.join(choices)}; got {s!r}")
    return s
