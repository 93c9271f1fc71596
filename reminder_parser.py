"""Parse orchestration: free text in, ParseResult out.

    "Dominic's birthday is 9/25"  ->  title "Dominic's", type birthday, Sep 25

parse() is pure. The sticky default (the last specific type a user saved) is
applied afterwards by the caller through resolve_type().
"""

from datetime import datetime
from typing import Optional, Tuple

from classifier import classify
from date_extractor import DateExtractor, default_extractor
from enums import ReminderTypeEnum
from schemas import ParseResult
from title_builder import synthesize_title


def parse(
    text: str,
    now: Optional[datetime] = None,
    extractor: Optional[DateExtractor] = None
) -> ParseResult:
    """Parse a reminder phrase into date, type and title.

    Args:
        text: Raw user input, e.g. "Surgery on Jan 18"
        now: Current local time (defaults to the configured zone's clock)
        extractor: Date extractor to use (defaults to the configured one)

    Returns:
        ParseResult: date may be None; title is never empty
    """
    if extractor is None:
        extractor = default_extractor()

    date_match = extractor.extract(text, now)
    # The keyword is still present here; only the date has been cut out.
    reminder_type, keyword = classify(date_match.strip_from(text))
    title = synthesize_title(text, date_match, keyword, reminder_type)

    return ParseResult(date=date_match.date, title=title, type=reminder_type)


def resolve_type(
    parsed_type: ReminderTypeEnum,
    sticky_default: Optional[ReminderTypeEnum]
) -> ReminderTypeEnum:
    """Apply the sticky default to a parsed type.

    A specific parsed type always wins. An "other" result falls back to the
    sticky default when one exists. The returned value is what the caller
    should store as the new sticky default.
    """
    if parsed_type != ReminderTypeEnum.OTHER:
        return parsed_type
    if sticky_default is not None and sticky_default != ReminderTypeEnum.OTHER:
        return sticky_default
    return ReminderTypeEnum.OTHER


def predict_type(
    text: str,
    sticky_default: Optional[ReminderTypeEnum],
    now: Optional[datetime] = None,
    extractor: Optional[DateExtractor] = None
) -> Tuple[ParseResult, ReminderTypeEnum]:
    """Parse text and report the type a save would end up with."""
    result = parse(text, now, extractor)
    return result, resolve_type(result.type, sticky_default)
