from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DATE_FORMAT, TIME_FORMAT, TIME_WITH_SECONDS_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_day(value) -> date:
    """Accept a date, a datetime or an ISO string (time-of-day is discarded)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValidationError("Date is required")
    try:
        return parse_iso_date(text[:10])
    except ValueError:
        raise ValidationError(f"Invalid date: {text!r} (expected YYYY-MM-DD)")


def parse_clock(value) -> Optional[time]:
    """Parse HH:MM or HH:MM:SS into a time; empty input gives None."""
    if value is None or isinstance(value, time):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in (TIME_FORMAT, TIME_WITH_SECONDS_FORMAT):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time: {text!r} (expected HH:MM)")


def format_clock(value: Optional[time]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value is not None else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
