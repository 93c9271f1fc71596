"""Keyword classifier mapping free text to a reminder type."""

from typing import Optional, Tuple

from enums import ReminderTypeEnum

# Declaration order is the priority order when text matches several categories.
CATEGORY_KEYWORDS: Tuple[Tuple[ReminderTypeEnum, Tuple[str, ...]], ...] = (
    (ReminderTypeEnum.BIRTHDAY, ("birthday", "bday")),
    (ReminderTypeEnum.ANNIVERSARY, ("anniversary",)),
    (ReminderTypeEnum.MEDICAL, ("surgery", "doctor", "appointment", "checkup")),
    (ReminderTypeEnum.MEMORIAL, ("memorial", "death")),
)


def classify(text: str) -> Tuple[ReminderTypeEnum, Optional[str]]:
    """Find the first category keyword contained in text.

    Matching is a case-insensitive substring test, so "Bday" and "birthdays"
    both count as birthday.

    Args:
        text: Text to scan

    Returns:
        Tuple of (type, keyword). (OTHER, None) when nothing matches.
    """
    lowered = text.lower()
    for reminder_type, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword in lowered:
                return reminder_type, keyword
    return ReminderTypeEnum.OTHER, None
