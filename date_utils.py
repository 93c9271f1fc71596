"""Date helpers shared by the parser and the trigger scheduler.

All datetimes handled here are naive local wall-clock values. Callers obtain
"now" through local_now() so that "today" means today in the configured zone.
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta


def local_now(tz_name: str = "UTC") -> datetime:
    """Current wall-clock time in tz_name, without tzinfo."""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None, microsecond=0)


def add_years(value: datetime, years: int = 1) -> datetime:
    """Add whole years, clamping Feb 29 to Feb 28 on non-leap years."""
    return value + relativedelta(years=years)


def shift_to_future(
    candidate: datetime,
    reference: datetime,
    by_calendar_day: bool = False
) -> datetime:
    """Advance candidate by one year when it is not ahead of reference.

    With by_calendar_day the comparison ignores time of day and a candidate
    falling on the reference day also moves (so "today" lands next year).
    Otherwise only a candidate strictly before reference moves.

    Args:
        candidate: Datetime to test
        reference: The current moment
        by_calendar_day: Compare dates instead of instants

    Returns:
        datetime: candidate, or candidate plus one year
    """
    if by_calendar_day:
        stale = candidate.date() <= reference.date()
    else:
        stale = candidate < reference
    return add_years(candidate) if stale else candidate


def at_time_of_day(value: datetime, hour: int, minute: int) -> datetime:
    """Same calendar day as value, at hour:minute exactly."""
    return value.replace(hour=hour, minute=minute, second=0, microsecond=0)


def days_until(target: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole calendar days from now's day to target's day (negative if past)."""
    if target is None:
        return None
    return (target.date() - now.date()).days


def countdown_label(days: Optional[int]) -> str:
    """Short countdown text for a day difference."""
    if days is None:
        return ""
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days == -1:
        return "Yesterday"
    if days > 0:
        return f"{days} days"
    return f"{abs(days)} days past"
