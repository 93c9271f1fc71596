"""Tests for the interval catalog and trigger scheduler."""

from datetime import datetime, timedelta

from date_utils import countdown_label, days_until, shift_to_future
from enums import RecurrenceEnum
from intervals import CATALOG, NotificationInterval, notification_body, order_intervals
from scheduler import all_trigger_identifiers, compute_trigger_date, schedule, trigger_identifier


class TestIntervals:
    """Tests for the interval catalog."""

    def test_catalog_order(self):
        assert [i.value for i in CATALOG] == [
            "oneMonth", "twoWeeks", "oneWeek", "threeDays", "oneDay", "dayOf"
        ]

    def test_order_intervals_sorts_dedupes_and_drops_unknown(self):
        assert order_intervals(["dayOf", "bogus", "oneMonth", "dayOf"]) == [
            NotificationInterval.ONE_MONTH, NotificationInterval.DAY_OF
        ]

    def test_notification_body(self):
        assert notification_body("Stef", NotificationInterval.ONE_DAY) == \
            "Reminder: Stef is happening tomorrow."


class TestFutureShift:
    """Tests for the shared future-shift helper."""

    def test_instant_comparison(self, now):
        assert shift_to_future(now - timedelta(minutes=1), now).year == now.year + 1
        assert shift_to_future(now, now) == now
        assert shift_to_future(now + timedelta(minutes=1), now).year == now.year

    def test_calendar_day_comparison(self, now):
        later_today = now + timedelta(hours=5)
        assert shift_to_future(later_today, now, by_calendar_day=True).year == now.year + 1
        tomorrow = now + timedelta(days=1)
        assert shift_to_future(tomorrow, now, by_calendar_day=True) == tomorrow

    def test_countdown(self, now):
        assert days_until(None, now) is None
        assert countdown_label(days_until(now + timedelta(days=1), now)) == "Tomorrow"
        assert countdown_label(0) == "Today"
        assert countdown_label(-1) == "Yesterday"
        assert countdown_label(5) == "5 days"
        assert countdown_label(-3) == "3 days past"


class TestSchedule:
    """Tests for schedule()."""

    def test_trigger_dates(self):
        target = datetime(2027, 3, 31, 12)
        assert compute_trigger_date(target, NotificationInterval.DAY_OF, 9, 0) == datetime(2027, 3, 31, 9)
        assert compute_trigger_date(target, NotificationInterval.ONE_WEEK, 9, 0) == datetime(2027, 3, 24, 9)
        # Month arithmetic clamps to the last day of February
        assert compute_trigger_date(target, NotificationInterval.ONE_MONTH, 9, 0) == datetime(2027, 2, 28, 9)

    def test_stale_one_shot_trigger_skipped(self, now):
        target = now + timedelta(days=10)
        assert schedule(target, RecurrenceEnum.NONE, ["oneMonth"], now=now) == []

    def test_stale_annual_trigger_moves_a_year(self, now):
        target = now + timedelta(days=10)
        triggers = schedule(target, RecurrenceEnum.ANNUAL, ["oneMonth"], now=now)
        assert len(triggers) == 1
        trigger = triggers[0]
        assert trigger.interval == NotificationInterval.ONE_MONTH
        assert trigger.repeats is True
        assert trigger.fire_at > now
        assert trigger.fire_at.year == now.year + 1

    def test_configured_time_and_catalog_order(self, now):
        target = datetime(2026, 12, 25)
        triggers = schedule(target, "none", ["dayOf", "oneWeek"], hour=18, minute=30, now=now)
        assert [t.interval for t in triggers] == [NotificationInterval.ONE_WEEK, NotificationInterval.DAY_OF]
        assert triggers[0].fire_at == datetime(2026, 12, 18, 18, 30)
        assert triggers[1].fire_at == datetime(2026, 12, 25, 18, 30)
        assert all(not t.repeats for t in triggers)

    def test_trigger_equal_to_now_is_skipped(self, now):
        target = datetime(2026, 10, 18)
        assert schedule(target, "none", ["dayOf"], hour=10, minute=30, now=now) == []

    def test_partial_result(self, now):
        target = now + timedelta(days=5)
        triggers = schedule(target, "none", [i.value for i in CATALOG], now=now)
        assert [t.interval.value for t in triggers] == ["threeDays", "oneDay", "dayOf"]

    def test_disabled_or_undated(self, now):
        target = now + timedelta(days=30)
        assert schedule(target, "none", ["dayOf"], now=now, notifications_enabled=False) == []
        assert schedule(None, "annual", ["dayOf"], now=now) == []

    def test_identifiers(self):
        assert trigger_identifier("abc", NotificationInterval.ONE_WEEK) == "abc-oneWeek"
        assert trigger_identifier("abc", "dayOf") == "abc-dayOf"
        assert len(all_trigger_identifiers("abc")) == len(CATALOG)
