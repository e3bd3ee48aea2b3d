"""
Reporting window arithmetic.

A reporting week runs Monday to Sunday. Sunday belongs to the week that
started the previous Monday. Each group leader's weekly report is due by
Sunday noon of that week.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_DEADLINE_HOUR = 12


def _now(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    if now is not None:
        return now
    return datetime.now(tz) if tz is not None else datetime.now()


def _as_date(moment: Union[date, datetime]) -> date:
    return moment.date() if isinstance(moment, datetime) else moment


def week_bounds(day: Union[date, datetime]) -> Tuple[date, date]:
    """Monday and Sunday of the week containing ``day``."""
    day = _as_date(day)
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def current_week_start(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> date:
    """Monday on or before ``now``; a Sunday maps to the previous Monday."""
    return week_bounds(_now(now, tz))[0]


def current_week_end(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> date:
    """Sunday closing the current week (week start + 6 days)."""
    return current_week_start(now, tz) + timedelta(days=6)


def report_deadline(
    now: Optional[datetime] = None,
    deadline_hour: int = DEFAULT_DEADLINE_HOUR,
    tz: Optional[tzinfo] = None,
) -> datetime:
    """Sunday at ``deadline_hour``:00 of the current week, in ``now``'s timezone."""
    now = _now(now, tz)
    sunday = current_week_end(now)
    return datetime.combine(sunday, time(deadline_hour, 0, 0), tzinfo=now.tzinfo)


def is_deadline_passed(
    now: Optional[datetime] = None,
    deadline_hour: int = DEFAULT_DEADLINE_HOUR,
    tz: Optional[tzinfo] = None,
) -> bool:
    now = _now(now, tz)
    return now > report_deadline(now, deadline_hour)


def is_this_week(moment: Union[date, datetime], now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> bool:
    """True when ``moment`` falls between Monday 00:00 and Sunday 23:59:59.999999."""
    start, end = week_bounds(_now(now, tz))
    return start <= _as_date(moment) <= end


def format_week_range(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> str:
    """Human readable ``dd/mm/yyyy - dd/mm/yyyy`` for the current week."""
    start, end = week_bounds(_now(now, tz))
    return f"{start.strftime('%d/%m/%Y')} - {end.strftime('%d/%m/%Y')}"


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """ZoneInfo for an IANA name, None for a blank one; ValueError when unknown."""
    if name is None or not name.strip():
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"unknown timezone {name!r}") from None


def as_aware(moment: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Timezone-aware copy of ``moment`` so stored timestamps compare safely.

    Naive values are read in ``tz``, or in local time when ``tz`` is None.
    """
    if moment.tzinfo is not None and moment.utcoffset() is not None:
        return moment
    if tz is not None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone()
