# backend/gcal/timeutil.py
"""Range tokens and form date/time parsing.

All wall-clock values are interpreted in the server's local zone; callers
never pass a timezone.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from dateutil import tz

from .errors import ValidationError

RANGE_TODAY = "today"
RANGE_TOMORROW = "tomorrow"
RANGE_WEEK = "week"

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_24H_RE = re.compile(r"^(?P<h>\d{1,2}):(?P<m>\d{2})$")
TIME_12H_RE = re.compile(r"^(?P<h>\d{1,2}):(?P<m>\d{2}) (?P<ampm>AM|PM)$")
TIME_12H_NOSPACE_RE = re.compile(r"^(?P<h>\d{1,2}):(?P<m>\d{2})(?P<ampm>AM|PM)$")


def _local_now() -> datetime:
    return datetime.now(tz.tzlocal())


def start_of_day(d: date, tzinfo) -> datetime:
    return datetime.combine(d, time(0, 0, 0, 0), tzinfo=tzinfo)


def end_of_day(d: date, tzinfo) -> datetime:
    return datetime.combine(d, time(23, 59, 59, 999999), tzinfo=tzinfo)


def resolve_range(token: Optional[str], now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Map a range token onto a [from, to] window anchored on ``now``.
    Unknown or empty tokens fall back to today.
    """
    if now is None:
        now = _local_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz.tzlocal())
    zone = now.tzinfo
    today = now.date()

    if token == RANGE_TOMORROW:
        tomorrow = today + timedelta(days=1)
        return start_of_day(tomorrow, zone), end_of_day(tomorrow, zone)
    if token == RANGE_WEEK:
        return start_of_day(today, zone), end_of_day(today + timedelta(days=7), zone)
    return start_of_day(today, zone), end_of_day(today, zone)


def _to_24h(h: int, ampm: str) -> int:
    if ampm == "PM" and h != 12:
        return h + 12
    if ampm == "AM" and h == 12:
        return 0
    return h


def parse_time_string(s: str) -> Tuple[int, int]:
    """Parse "15:04", "3:04 PM" or "3:04PM" into (hour, minute)."""
    m = TIME_24H_RE.match(s)
    if m:
        h, mi = int(m.group("h")), int(m.group("m"))
        if h <= 23 and mi <= 59:
            return h, mi
    for pattern in (TIME_12H_RE, TIME_12H_NOSPACE_RE):
        m = pattern.match(s)
        if not m:
            continue
        h, mi = int(m.group("h")), int(m.group("m"))
        if 0 <= h <= 12 and mi <= 59:
            return _to_24h(h, m.group("ampm")), mi
    raise ValidationError(f"cannot parse time: {s}")


def parse_date(s: str) -> date:
    if not DATE_RE.match(s):
        raise ValidationError(f"invalid date format: {s!r} is not YYYY-MM-DD")
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"invalid date format: {e}") from e


def parse_date_times(
    date_str: str,
    start_time: str,
    end_time: str,
    all_day: bool,
) -> Tuple[datetime, datetime]:
    """
    Combine a YYYY-MM-DD date with optional start/end times.

    All-day events span 00:00:00 to 23:59:59 and ignore the times. The end is
    not required to be after the start.
    """
    if not date_str:
        raise ValidationError("date is required")
    d = parse_date(date_str)
    local = tz.tzlocal()

    if all_day:
        return (
            datetime.combine(d, time(0, 0, 0), tzinfo=local),
            datetime.combine(d, time(23, 59, 59), tzinfo=local),
        )

    if not start_time or not end_time:
        raise ValidationError("start_time and end_time are required for non-all-day events")

    try:
        s_h, s_m = parse_time_string(start_time)
    except ValidationError as e:
        raise ValidationError(f"invalid start_time: {e.message}") from e
    try:
        e_h, e_m = parse_time_string(end_time)
    except ValidationError as e:
        raise ValidationError(f"invalid end_time: {e.message}") from e

    return (
        datetime.combine(d, time(s_h, s_m, 0), tzinfo=local),
        datetime.combine(d, time(e_h, e_m, 0), tzinfo=local),
    )
