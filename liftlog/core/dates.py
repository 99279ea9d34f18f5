from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from liftlog.core.errors import InvalidDateInput

UTC = ZoneInfo("UTC")
END_OF_DAY = time(23, 59, 59, 999000)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(text: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a calendar date."""
    if not isinstance(text, str) or not _DATE_RE.match(text):
        raise InvalidDateInput(f"Invalid date {text!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidDateInput(f"Invalid date {text!r}") from None


def format_date(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def today(tz: ZoneInfo = UTC) -> date:
    return datetime.now(tz).date()


def to_calendar_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_timezone(name: str | None) -> ZoneInfo:
    if not name:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidDateInput(f"Unknown time zone {name!r}") from None


def day_bounds(day: date | datetime, tz: ZoneInfo = UTC) -> tuple[datetime, datetime]:
    """Inclusive local-day window of ``day`` in ``tz``.

    Stored timestamps are naive UTC, so both bounds are converted to UTC and
    stripped of tzinfo before they reach a query.
    """
    calendar_day = to_calendar_date(day)
    local_start = datetime.combine(calendar_day, time.min, tzinfo=tz)
    local_end = datetime.combine(calendar_day, END_OF_DAY, tzinfo=tz)
    start_utc = local_start.astimezone(timezone.utc).replace(tzinfo=None)
    end_utc = local_end.astimezone(timezone.utc).replace(tzinfo=None)
    return start_utc, end_utc
