"""Interval catalog: the fixed, ordered set of notification lead times."""

import enum
from typing import Iterable, List

from dateutil.relativedelta import relativedelta


class NotificationInterval(str, enum.Enum):
    """Named lead time before a reminder's date. Declaration order is catalog order."""
    ONE_MONTH = "oneMonth"
    TWO_WEEKS = "twoWeeks"
    ONE_WEEK = "oneWeek"
    THREE_DAYS = "threeDays"
    ONE_DAY = "oneDay"
    DAY_OF = "dayOf"


CATALOG: List[NotificationInterval] = list(NotificationInterval)

LEAD_TIMES = {
    NotificationInterval.ONE_MONTH: relativedelta(months=1),
    NotificationInterval.TWO_WEEKS: relativedelta(days=14),
    NotificationInterval.ONE_WEEK: relativedelta(days=7),
    NotificationInterval.THREE_DAYS: relativedelta(days=3),
    NotificationInterval.ONE_DAY: relativedelta(days=1),
    NotificationInterval.DAY_OF: relativedelta(),
}

# Shown next to each toggle in reminder settings
LABELS = {
    NotificationInterval.ONE_MONTH: "1 month before",
    NotificationInterval.TWO_WEEKS: "2 weeks before",
    NotificationInterval.ONE_WEEK: "1 week before",
    NotificationInterval.THREE_DAYS: "3 days before",
    NotificationInterval.ONE_DAY: "1 day before",
    NotificationInterval.DAY_OF: "Day of",
}

# Completes "... is happening <phrase>."
PHRASES = {
    NotificationInterval.ONE_MONTH: "in 1 month",
    NotificationInterval.TWO_WEEKS: "in 2 weeks",
    NotificationInterval.ONE_WEEK: "in 1 week",
    NotificationInterval.THREE_DAYS: "in 3 days",
    NotificationInterval.ONE_DAY: "tomorrow",
    NotificationInterval.DAY_OF: "today",
}

DEFAULT_INTERVALS: List[NotificationInterval] = [
    NotificationInterval.ONE_WEEK,
    NotificationInterval.DAY_OF,
]


def order_intervals(names: Iterable) -> List[NotificationInterval]:
    """Known intervals among names, de-duplicated, in catalog order.

    Unknown names are dropped.
    """
    wanted = set()
    for name in names:
        try:
            wanted.add(NotificationInterval(name))
        except ValueError:
            continue
    return [interval for interval in CATALOG if interval in wanted]


def notification_body(title: str, interval: NotificationInterval) -> str:
    """Alert text shown to the user for one interval."""
    return f"Reminder: {title} is happening {PHRASES[interval]}."
