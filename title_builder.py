"""Display-title synthesis for parsed reminders."""

import re
from typing import Optional

from date_extractor import DateMatch
from enums import ReminderTypeEnum

FILLER_WORDS = ("is", "was", "are", "were", "be", "been", "being", "on", "at", "in")

# Whole words only: "in" must survive inside "Tina"
FILLER_PATTERN = re.compile(r'\b(?:' + '|'.join(FILLER_WORDS) + r')\b', re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r'\s+')


def remove_keyword(text: str, keyword: str) -> str:
    """Remove the first case-insensitive occurrence of keyword."""
    found = re.search(re.escape(keyword), text, re.IGNORECASE)
    if not found:
        return text
    return text[:found.start()] + text[found.end():]


def synthesize_title(
    text: str,
    date_match: Optional[DateMatch],
    keyword: Optional[str],
    reminder_type: ReminderTypeEnum
) -> str:
    """Build a clean display title from the raw input.

    The date span goes first, then the category keyword, then filler words,
    so the filler pattern never sees half of an excised date or keyword.

    Args:
        text: Original user input
        date_match: Date found in text, if any
        keyword: Category keyword found in text, if any
        reminder_type: Detected reminder type, used for the empty fallback

    Returns:
        str: Non-empty title
    """
    title = text
    if date_match is not None and date_match.found:
        title = date_match.strip_from(title)
    if keyword:
        title = remove_keyword(title, keyword)
    title = FILLER_PATTERN.sub('', title)
    title = WHITESPACE_PATTERN.sub(' ', title).strip()

    if title:
        return title
    if reminder_type != ReminderTypeEnum.OTHER:
        return reminder_type.value.capitalize()
    # Blank input still gets a title
    return text.strip() or reminder_type.value.capitalize()
