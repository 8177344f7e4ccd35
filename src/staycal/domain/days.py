"""Calendar-day normalization and day arithmetic.

Every date that reaches the engine goes through normalize_day(), which
reduces it to a DayKey (a plain ``datetime.date``). The day is taken as
written: time of day and embedded UTC offsets are ignored, so
"2026-01-05T00:00:00.000Z" is Jan 5 whatever the viewer's timezone.

normalize_key() is the single comparison helper for loosely-typed ids and
codes coming from upstream documents.
"""

from __future__ import annotations

import calendar
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

DayKey = date

# Time appended when the raw value does not parse on its own
_MIDNIGHT = "T00:00:00"


def _parse_iso(text: str) -> datetime | None:
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def normalize_day(value: str | date | datetime | None) -> DayKey | None:
    """Reduce a date-like value to its calendar day.

    Accepts ISO-8601 datetimes, bare ``YYYY-MM-DD`` (or compact
    ``YYYYMMDD``) strings, and date/datetime objects.

    Returns:
        The calendar day, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None

    for candidate in (raw, raw + _MIDNIGHT):
        parsed = _parse_iso(candidate)
        if parsed is not None:
            return parsed.date()
    return None


def normalize_key(value: Any) -> str:
    """Stringify and trim a loosely-typed key. None becomes "".

    A populated reference ({"_id": ...} or {"id": ...}) reduces to its id.
    """
    if isinstance(value, Mapping):
        return normalize_key(_first_present(value, "_id", "id", "$oid"))
    if value is None:
        return ""
    return str(value).strip()


def _first_present(ref: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if ref.get(key) is not None:
            return ref[key]
    return None


def day_range(start: DayKey, end: DayKey) -> list[DayKey]:
    """Days in the half-open range [start, end)."""
    return [start + timedelta(days=i) for i in range((end - start).days)]


def nights_between(check_in: DayKey, check_out: DayKey) -> int:
    return (check_out - check_in).days


def days_until(day: DayKey, today: DayKey) -> int:
    """Signed number of days from today to day (negative if in the past)."""
    return (day - today).days


def today_key(tz_name: str) -> DayKey:
    """Today's date in the property's timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def month_days(year: int, month: int) -> list[DayKey]:
    _, last = calendar.monthrange(year, month)
    return [date(year, month, d) for d in range(1, last + 1)]


def leading_blanks(year: int, month: int) -> int:
    """Empty cells before day 1 in a Sunday-first week grid."""
    # date.weekday(): Monday=0 .. Sunday=6
    return (date(year, month, 1).weekday() + 1) % 7
