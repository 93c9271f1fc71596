"""Date extraction from free-text reminder phrases.

Finds the first date-like substring in a phrase and turns it into a calendar
date that is always upcoming. Two strategies are tried in order:

1. A natural-language detector (dateparser's search_dates), which handles
   month names, ordinals and day-level relative phrases like "tomorrow".
   Matches must pin down a month and a day.
2. A strict numeric month/day pattern such as 8/8, 12-25 or 09.09.

Whichever succeeds first wins; the result is then moved one year ahead when its
calendar day is today or earlier.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from dateparser.search import search_dates

from config import settings
from date_utils import local_now, shift_to_future
from logger_config import setup_logger

logger = setup_logger(__name__, 'parser.log')

NUMERIC_DATE_PATTERN = re.compile(r'\b(?P<month>\d{1,2})[/.\-](?P<day>\d{1,2})\b')

# Hour assigned to dates built from the numeric pattern
NUMERIC_DATE_HOUR = 12

Detector = Callable[[str, datetime], Optional[Tuple[str, datetime]]]


@dataclass(frozen=True)
class DateMatch:
    """A parsed date plus the exact slice of input it came from."""

    date: Optional[datetime] = None
    text: Optional[str] = None
    start: int = -1
    end: int = -1

    @classmethod
    def empty(cls) -> "DateMatch":
        return cls()

    @property
    def found(self) -> bool:
        return self.date is not None

    def strip_from(self, source: str) -> str:
        """Return source with the matched slice removed."""
        if not self.found:
            return source
        return source[:self.start] + source[self.end:]


class DateparserDetector:
    """Natural-language date detection backed by dateparser."""

    def __init__(self, languages: Optional[List[str]] = None):
        self.languages = languages or list(settings.DATE_DETECTOR_LANGUAGES)

    def __call__(self, text: str, now: datetime) -> Optional[Tuple[str, datetime]]:
        matches = search_dates(
            text,
            languages=self.languages,
            settings={
                'RELATIVE_BASE': now,
                'DATE_ORDER': 'MDY',
                'PREFER_DATES_FROM': 'current_period',
                'RETURN_AS_TIMEZONE_AWARE': False,
                # A lone weekday or month word ("Mark Sun", "Take May") is not a date
                'REQUIRE_PARTS': ['day', 'month'],
            },
        )
        if not matches:
            return None
        return matches[0]


class DateExtractor:
    """Ordered-fallback date extractor.

    Args:
        detector: Callable returning the first (substring, datetime) found in
            a text, or None. Pass None to run on the numeric pattern alone.
    """

    def __init__(self, detector: Optional[Detector] = None):
        self.detector = detector

    def extract(self, text: str, now: Optional[datetime] = None) -> DateMatch:
        """Extract the first date in text.

        Args:
            text: Raw user input
            now: Current local time (defaults to the configured zone's clock)

        Returns:
            DateMatch: shifted date and the original matched span, or an
            empty match when no date-like substring exists
        """
        if now is None:
            now = local_now(settings.TIMEZONE)

        match = self._detect(text, now)
        if not match.found:
            match = self._match_numeric(text, now)
        if not match.found:
            return match

        shifted = shift_to_future(match.date, now, by_calendar_day=True)
        if shifted != match.date:
            logger.debug(f"Shifted '{match.text}' from {match.date} to {shifted}")
        return DateMatch(date=shifted, text=match.text, start=match.start, end=match.end)

    def _detect(self, text: str, now: datetime) -> DateMatch:
        if self.detector is None:
            return DateMatch.empty()

        try:
            found = self.detector(text, now)
        except Exception as e:
            logger.warning(f"Date detector failed on '{text}', using numeric fallback: {e}")
            return DateMatch.empty()

        if not found:
            return DateMatch.empty()

        matched_text, parsed = found
        start = text.find(matched_text)
        if start < 0:
            logger.debug(f"Detector span '{matched_text}' not found in '{text}'")
            return DateMatch.empty()
        return DateMatch(date=parsed, text=matched_text, start=start, end=start + len(matched_text))

    def _match_numeric(self, text: str, now: datetime) -> DateMatch:
        found = NUMERIC_DATE_PATTERN.search(text)
        if not found:
            return DateMatch.empty()

        month = int(found.group('month'))
        day = int(found.group('day'))
        try:
            parsed = datetime(now.year, month, day, NUMERIC_DATE_HOUR)
        except ValueError:
            logger.debug(f"Ignoring impossible month/day '{found.group(0)}'")
            return DateMatch.empty()

        return DateMatch(date=parsed, text=found.group(0), start=found.start(), end=found.end())


def default_extractor() -> DateExtractor:
    """Extractor wired according to settings."""
    if settings.DATE_DETECTOR_ENABLED:
        return DateExtractor(DateparserDetector())
    return DateExtractor()


def extract_date(text: str, now: Optional[datetime] = None) -> DateMatch:
    """Extract the first date in text with the configured extractor."""
    return default_extractor().extract(text, now)
