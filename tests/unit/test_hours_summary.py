"""Tests for breakdown caches and the pay period hours summary."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from hourscalc.sdk.cache import InMemoryBreakdownCache, JsonFileBreakdownCache, cache_key
from hourscalc.sdk.hours import cached_breakdown, format_hours, summarize_hours
from hourscalc.sdk.overtime import OvertimeBreakdown
from hourscalc.sdk.pay_period import InvalidConfigurationError, PayPeriodConfig, current_pay_period
from hourscalc.sdk.schemas import PayPeriodSettings
from hourscalc.sdk.time_entries import TimeEntry


TZ = ZoneInfo("America/Chicago")
CONFIG = PayPeriodConfig("2024-02-25", 14, 40)
FIRST = current_pay_period(CONFIG, date(2024, 3, 1), TZ)
SECOND = current_pay_period(CONFIG, date(2024, 3, 12), TZ)


class FakeSource:
    """In-memory TimeEntrySource that records the ranges it was asked for."""

    def __init__(self, entries):
        self.entries = entries
        self.requests = []

    def get_time_entries(self, start_date, end_date):
        self.requests.append((start_date, end_date))
        return [e for e in self.entries if start_date <= e.date <= end_date]


class TestInMemoryBreakdownCache:

    def test_get_after_set(self):
        cache = InMemoryBreakdownCache()
        breakdown = OvertimeBreakdown(regular_hours=10, total_hours=10)

        cache.set(cache_key(FIRST, "user_1"), breakdown)

        assert cache.get("user_1:2024-02-25") == breakdown
        assert cache.get("user_1:2024-03-10") is None

    def test_new_period_evicts_previous_in_same_scope(self):
        cache = InMemoryBreakdownCache()
        cache.set(cache_key(FIRST, "user_1"), OvertimeBreakdown(total_hours=1))
        cache.set(cache_key(FIRST, "user_2"), OvertimeBreakdown(total_hours=2))

        cache.set(cache_key(SECOND, "user_1"), OvertimeBreakdown(total_hours=3))

        assert cache.get(cache_key(FIRST, "user_1")) is None
        assert cache.get(cache_key(FIRST, "user_2")).total_hours == 2
        assert cache.get(cache_key(SECOND, "user_1")).total_hours == 3
        assert len(cache) == 2


class TestJsonFileBreakdownCache:

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "cache" / "breakdowns.json"
        breakdown = OvertimeBreakdown(
            regular_hours=40, overtime_hours=6, total_hours=46, weekly_hours=(46.0, 0.0)
        )

        JsonFileBreakdownCache(path).set(cache_key(FIRST), breakdown)

        assert JsonFileBreakdownCache(path).get(cache_key(FIRST)) == breakdown

    def test_eviction_is_persisted(self, tmp_path):
        path = tmp_path / "breakdowns.json"
        cache = JsonFileBreakdownCache(path)
        cache.set(cache_key(FIRST), OvertimeBreakdown(total_hours=1))
        cache.set(cache_key(SECOND), OvertimeBreakdown(total_hours=2))

        assert JsonFileBreakdownCache(path).get(cache_key(FIRST)) is None

    def test_unreadable_file_is_a_miss(self, tmp_path):
        path = tmp_path / "breakdowns.json"
        path.write_text("{not json")

        assert JsonFileBreakdownCache(path).get(cache_key(FIRST)) is None

    def test_default_path_uses_xdg_cache(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
        cache = JsonFileBreakdownCache()
        assert cache.path == tmp_path / "hours-calc" / "breakdowns.json"


class TestSummarizeHours:

    def test_queries_the_period_range_and_computes(self):
        source = FakeSource([
            TimeEntry("2024-02-26", 9), TimeEntry("2024-02-27", 9), TimeEntry("2024-02-28", 9),
            TimeEntry("2024-02-29", 9), TimeEntry("2024-03-01", 9), TimeEntry("2024-03-12", 4),
        ])

        summary = summarize_hours(source, CONFIG, as_of=date(2024, 3, 1), tz=TZ)

        assert source.requests == [("2024-02-25", "2024-03-09")]
        assert summary.entry_count == 5
        assert summary.breakdown.regular_hours == 40
        assert summary.breakdown.overtime_hours == 5
        assert summary.threshold == 40

    def test_settings_threshold_is_used(self):
        settings = PayPeriodSettings(type="weekly", start_date="2024-02-25", weekly_overtime_threshold=30)
        source = FakeSource([TimeEntry("2024-03-04", 20), TimeEntry("2024-03-05", 15)])

        summary = summarize_hours(source, settings, as_of=date(2024, 3, 6), tz=TZ)

        assert summary.period.start_date == "2024-03-03"
        assert summary.breakdown.regular_hours == 30
        assert summary.breakdown.overtime_hours == 5

    def test_cache_holds_closed_totals_only(self):
        cache = InMemoryBreakdownCache()
        source = FakeSource([TimeEntry("2024-03-04", 8)])
        as_of = datetime(2024, 3, 5, 12, 0, tzinfo=TZ)

        summary = summarize_hours(
            source, CONFIG, as_of=as_of, tz=TZ, live_hours=1.5, cache=cache, scope="user_1"
        )

        cached = cached_breakdown(cache, CONFIG, as_of, TZ, scope="user_1")
        assert summary.breakdown.current_week_hours == 9.5
        assert cached.current_week_hours == 8
        assert cached.in_progress_hours == 0
        assert cached.with_live_hours(1.5) == summary.breakdown
        assert cached_breakdown(cache, CONFIG, as_of, TZ, scope="user_2") is None

    def test_summary_dict(self):
        summary = summarize_hours(FakeSource([]), CONFIG, as_of=date(2024, 3, 1), tz=TZ)
        data = summary.to_dict()

        assert data["period"]["start_date"] == "2024-02-25"
        assert data["total_hours"] == 0
        assert data["entry_count"] == 0

    def test_invalid_config_raises(self):
        with pytest.raises(InvalidConfigurationError):
            summarize_hours(FakeSource([]), PayPeriodConfig("2024-02-25", 0), as_of=date(2024, 3, 1), tz=TZ)


class TestFormatHours:

    @pytest.mark.parametrize("hours,expected", [
        (0, "0h 0m"),
        (8.75, "8h 45m"),
        (46, "46h 0m"),
        (1.999, "1h 59m"),
    ])
    def test_format(self, hours, expected):
        assert format_hours(hours) == expected
