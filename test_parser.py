"""Tests for date extraction, classification, title synthesis and parse()."""

from datetime import datetime

import pytest

from classifier import classify
from date_extractor import DateExtractor, DateMatch, NUMERIC_DATE_HOUR, extract_date
from enums import ReminderTypeEnum
from reminder_parser import parse, predict_type, resolve_type
from title_builder import synthesize_title


class StubDetector:
    """Detector returning a fixed (substring, datetime) when the substring occurs."""

    def __init__(self, substring=None, value=None, error=None):
        self.substring = substring
        self.value = value
        self.error = error
        self.calls = 0

    def __call__(self, text, now):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.substring and self.substring in text:
            return self.substring, self.value
        return None


class TestClassify:
    """Tests for the keyword classifier."""

    def test_birthday_keywords(self):
        assert classify("Stef birthday") == (ReminderTypeEnum.BIRTHDAY, "birthday")
        assert classify("Mom's BDAY") == (ReminderTypeEnum.BIRTHDAY, "bday")

    def test_medical_keywords(self):
        assert classify("Surgery on Jan 18") == (ReminderTypeEnum.MEDICAL, "surgery")
        assert classify("dentist appointment") == (ReminderTypeEnum.MEDICAL, "appointment")

    def test_memorial(self):
        assert classify("Grandpa death") == (ReminderTypeEnum.MEMORIAL, "death")

    def test_no_keyword(self):
        assert classify("Lunch with Sam") == (ReminderTypeEnum.OTHER, None)

    def test_priority_follows_declaration_order(self):
        # Both birthday and medical keywords present; birthday is declared first
        assert classify("doctor birthday")[0] == ReminderTypeEnum.BIRTHDAY
        assert classify("anniversary memorial")[0] == ReminderTypeEnum.ANNIVERSARY

    def test_substring_match(self):
        assert classify("birthdays!")[0] == ReminderTypeEnum.BIRTHDAY


class TestNumericFallback:
    """Tests for the month/day pattern used when no detector match exists."""

    def test_slash_date(self, numeric_extractor, now):
        match = numeric_extractor.extract("Stef birthday 8/8", now)
        assert match.text == "8/8"
        assert (match.date.month, match.date.day) == (8, 8)
        assert match.date.hour == NUMERIC_DATE_HOUR

    def test_dash_date_after_today_keeps_year(self, numeric_extractor, now):
        match = numeric_extractor.extract("Anniversary 12-25", now)
        assert match.date == datetime(2026, 12, 25, 12)

    def test_dot_date_before_today_moves_to_next_year(self, numeric_extractor, now):
        match = numeric_extractor.extract("Dad 09.09", now)
        assert match.date == datetime(2027, 9, 9, 12)

    def test_today_moves_to_next_year(self, numeric_extractor, now):
        match = numeric_extractor.extract("Party 10/18", now)
        assert match.date == datetime(2027, 10, 18, 12)

    def test_tomorrow_stays(self, numeric_extractor, now):
        match = numeric_extractor.extract("Party 10/19", now)
        assert match.date.year == 2026

    def test_first_match_only(self, numeric_extractor, now):
        match = numeric_extractor.extract("11/2 or 12/3", now)
        assert match.text == "11/2"
        assert match.start == 0

    def test_impossible_date(self, numeric_extractor, now):
        match = numeric_extractor.extract("Locker 13/45", now)
        assert not match.found
        assert match.text is None

    def test_no_date(self, numeric_extractor, now):
        assert numeric_extractor.extract("Call mom", now) == DateMatch.empty()

    def test_leap_day_shift_clamps(self, numeric_extractor):
        match = numeric_extractor.extract("Leap 2/29", datetime(2028, 3, 1, 8, 0))
        assert match.date == datetime(2029, 2, 28, 12)


class TestDetectorStage:
    """Tests for the detector stage and its fallback."""

    def test_detector_result_used_and_span_located(self, now):
        detector = StubDetector("Jan 18", datetime(2026, 1, 18))
        match = DateExtractor(detector).extract("Surgery on Jan 18", now)
        assert match.date == datetime(2027, 1, 18)
        assert (match.start, match.end) == (11, 17)
        assert match.strip_from("Surgery on Jan 18") == "Surgery on "

    def test_detector_wins_over_numeric(self, now):
        detector = StubDetector("tomorrow", datetime(2026, 10, 19, 10, 30))
        match = DateExtractor(detector).extract("tomorrow not 12/1", now)
        assert match.text == "tomorrow"
        assert match.date == datetime(2026, 10, 19, 10, 30)

    def test_detector_miss_falls_back(self, now):
        detector = StubDetector()
        match = DateExtractor(detector).extract("Stef birthday 8/8", now)
        assert detector.calls == 1
        assert match.text == "8/8"

    def test_detector_failure_falls_back(self, now):
        detector = StubDetector(error=RuntimeError("boom"))
        match = DateExtractor(detector).extract("Dad 12/24", now)
        assert match.date == datetime(2026, 12, 24, 12)

    def test_today_from_detector_moves_to_next_year(self, now):
        detector = StubDetector("Today", now)
        match = DateExtractor(detector).extract("Today's event", now)
        assert match.date.year == now.year + 1
        assert match.text == "Today"


class TestSynthesizeTitle:
    """Tests for display-title synthesis."""

    def test_strips_date_keyword_and_fillers(self, numeric_extractor, now):
        text = "Dominic's birthday is 9/25"
        match = numeric_extractor.extract(text, now)
        assert synthesize_title(text, match, "birthday", ReminderTypeEnum.BIRTHDAY) == "Dominic's"

    def test_fillers_removed_as_whole_words_only(self):
        title = synthesize_title("Tina is in Berlin", None, None, ReminderTypeEnum.OTHER)
        assert title == "Tina Berlin"

    def test_keyword_removed_case_insensitively_once(self):
        title = synthesize_title("Birthday cake birthday", None, "birthday", ReminderTypeEnum.BIRTHDAY)
        assert title == "cake birthday"

    def test_empty_falls_back_to_type_name(self):
        title = synthesize_title("birthday", None, "birthday", ReminderTypeEnum.BIRTHDAY)
        assert title == "Birthday"

    def test_empty_other_falls_back_to_input(self):
        assert synthesize_title("  on at  ", None, None, ReminderTypeEnum.OTHER) == "on at"


class TestParse:
    """Tests for the parse orchestrator."""

    def test_slash_birthday(self, numeric_extractor, now):
        result = parse("Stef birthday 8/8", now, numeric_extractor)
        assert result.type == ReminderTypeEnum.BIRTHDAY
        assert result.title == "Stef"
        assert (result.date.month, result.date.day) == (8, 8)
        assert result.date.year == 2027

    def test_possessive_with_connector(self, numeric_extractor, now):
        result = parse("Dominic's birthday is 9/25", now, numeric_extractor)
        assert result.title == "Dominic's"
        assert result.type == ReminderTypeEnum.BIRTHDAY
        assert (result.date.month, result.date.day) == (9, 25)

    def test_month_name_via_detector(self, now):
        extractor = DateExtractor(StubDetector("Jan 18", datetime(2026, 1, 18)))
        result = parse("Surgery on Jan 18", now, extractor)
        assert result.type == ReminderTypeEnum.MEDICAL
        assert result.date is not None
        assert result.title == "Medical"

    def test_no_date(self, numeric_extractor, now):
        result = parse("  Call the plumber ", now, numeric_extractor)
        assert result.date is None
        assert result.type == ReminderTypeEnum.OTHER
        assert result.title == "Call the plumber"

    def test_reparsing_clean_title_is_stable(self, numeric_extractor, now):
        first = parse("Anniversary dinner 12-25", now, numeric_extractor)
        second = parse(first.title, now, numeric_extractor)
        assert first.title == "dinner"
        assert second.title == first.title
        assert second.type == ReminderTypeEnum.OTHER

    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_blank_input_gets_fallback_title(self, numeric_extractor, now, text):
        result = parse(text, now, numeric_extractor)
        assert result.date is None
        assert result.type == ReminderTypeEnum.OTHER
        assert result.title == "Other"


class TestParseWithDateparser:
    """parse() with the real natural-language detector."""

    def test_slash_birthday(self):
        result = parse("Stef birthday 8/8")
        assert result.type == ReminderTypeEnum.BIRTHDAY
        assert (result.date.month, result.date.day) == (8, 8)

    def test_possessive_month_day(self):
        result = parse("Dominic's birthday is 9/25")
        assert result.type == ReminderTypeEnum.BIRTHDAY
        assert (result.date.month, result.date.day) == (9, 25)

    def test_surgery_month_name(self):
        result = parse("Surgery on Jan 18")
        assert result.type == ReminderTypeEnum.MEDICAL
        assert result.date is not None
        assert (result.date.month, result.date.day) == (1, 18)

    def test_ordinal_month_name(self):
        match = extract_date("Mom birthday Jan 3rd")
        assert match.found
        assert (match.date.month, match.date.day) == (1, 3)
        assert "Jan 3" in match.text

    def test_weekday_word_in_name_does_not_beat_numeric_date(self, now):
        result = parse("Mark Sun birthday 8/8", now)
        assert result.type == ReminderTypeEnum.BIRTHDAY
        assert (result.date.year, result.date.month, result.date.day) == (2027, 8, 8)
        assert result.title == "Mark Sun"

    def test_month_word_in_name_does_not_beat_numeric_date(self, now):
        result = parse("Take May to doctor 6/12", now)
        assert result.type == ReminderTypeEnum.MEDICAL
        assert (result.date.year, result.date.month, result.date.day) == (2027, 6, 12)
        assert "May" in result.title

    def test_impossible_numeric_date_gives_no_date(self, now):
        result = parse("Party 13/45", now)
        assert result.date is None
        assert result.title == "Party 13/45"

    def test_blank_input(self, now):
        result = parse("   ", now)
        assert result.date is None
        assert result.title == "Other"

    def test_date_is_never_today_or_past(self):
        result = parse("Chris Birthday Nov 3")
        assert result.date is not None
        assert result.date.date() > datetime.now().date()


class TestStickyDefault:
    """Tests for the caller-side sticky default rule."""

    @pytest.mark.parametrize("parsed, sticky, expected", [
        (ReminderTypeEnum.BIRTHDAY, ReminderTypeEnum.MEDICAL, ReminderTypeEnum.BIRTHDAY),
        (ReminderTypeEnum.OTHER, ReminderTypeEnum.MEDICAL, ReminderTypeEnum.MEDICAL),
        (ReminderTypeEnum.OTHER, ReminderTypeEnum.OTHER, ReminderTypeEnum.OTHER),
        (ReminderTypeEnum.OTHER, None, ReminderTypeEnum.OTHER),
    ])
    def test_resolve_type(self, parsed, sticky, expected):
        assert resolve_type(parsed, sticky) == expected

    def test_predict_type_does_not_touch_parse_result(self, numeric_extractor, now):
        result, resolved = predict_type("Lunch 11/1", ReminderTypeEnum.ANNIVERSARY, now, numeric_extractor)
        assert result.type == ReminderTypeEnum.OTHER
        assert resolved == ReminderTypeEnum.ANNIVERSARY
