"""Trigger scheduler: turns a reminder's date and intervals into alert times.

Computation only. Registering and cancelling alerts is done by the caller,
which must cancel every identifier from all_trigger_identifiers() before
registering a fresh schedule() result, so deselected intervals leave nothing
behind.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from config import settings
from date_utils import at_time_of_day, local_now, shift_to_future
from enums import RecurrenceEnum
from intervals import CATALOG, LEAD_TIMES, NotificationInterval, order_intervals
from logger_config import setup_logger
from schemas import ScheduledTrigger

logger = setup_logger(__name__, 'scheduler.log')


def trigger_identifier(item_id: str, interval: NotificationInterval) -> str:
    """Stable alert identifier for one interval of one reminder."""
    return f"{item_id}-{NotificationInterval(interval).value}"


def all_trigger_identifiers(item_id: str) -> List[str]:
    """Identifiers for every catalog interval, selected or not."""
    return [trigger_identifier(item_id, interval) for interval in CATALOG]


def compute_trigger_date(
    target_date: datetime,
    interval: NotificationInterval,
    hour: int,
    minute: int
) -> datetime:
    """Target day at hour:minute, minus the interval's lead time."""
    return at_time_of_day(target_date, hour, minute) - LEAD_TIMES[interval]


def schedule(
    target_date: Optional[datetime],
    recurrence: RecurrenceEnum,
    enabled_intervals: Iterable,
    hour: int = 9,
    minute: int = 0,
    now: Optional[datetime] = None,
    notifications_enabled: bool = True
) -> List[ScheduledTrigger]:
    """Compute the alerts to register for a reminder.

    For each selected interval, in catalog order:
    - the trigger is the target day at hour:minute minus the lead time
    - an annual reminder whose trigger is already past moves one year ahead
    - a trigger that is still not after now is skipped

    Args:
        target_date: Reminder date; nothing is scheduled without one
        recurrence: NONE for one-shot alerts, ANNUAL for yearly repeats
        enabled_intervals: Interval names or NotificationInterval members
        hour: Alert hour of day
        minute: Alert minute
        now: Current local time (defaults to the configured zone's clock)
        notifications_enabled: Master switch for the reminder

    Returns:
        List[ScheduledTrigger]: triggers strictly after now, in catalog order
    """
    if not notifications_enabled or target_date is None:
        return []
    if now is None:
        now = local_now(settings.TIMEZONE)

    recurrence = RecurrenceEnum(recurrence)
    annual = recurrence == RecurrenceEnum.ANNUAL

    triggers = []
    for interval in order_intervals(enabled_intervals):
        trigger_date = compute_trigger_date(target_date, interval, hour, minute)

        if annual:
            trigger_date = shift_to_future(trigger_date, now)

        if trigger_date <= now:
            logger.debug(f"Skipping {interval.value}: {trigger_date} is not after {now}")
            continue

        triggers.append(ScheduledTrigger(interval=interval, fire_at=trigger_date, repeats=annual))

    return triggers
