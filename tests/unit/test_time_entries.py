"""Tests for time entry parsing and the JSON entry store."""

import json
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from hourscalc.sdk.time_entries import (
    JsonTimeEntryStore,
    MalformedEntryError,
    STATUS_CLOCKED_IN,
    active_hours,
    parse_entry_date,
    time_entry_from_record,
)


TZ = ZoneInfo("America/Chicago")


class TestTimeEntryFromRecord:
    """Duration resolution and validation."""

    def test_explicit_hours(self):
        result = time_entry_from_record({"id": "a", "date": "2024-03-04", "durationInHours": 8.5})

        assert result.duration_in_hours == 8.5
        assert result.id == "a"
        assert not result.is_active

    def test_duration_in_seconds(self):
        result = time_entry_from_record({"date": "2024-03-04", "duration": 30600})
        assert result.duration_in_hours == 8.5

    def test_duration_from_clock_times(self):
        result = time_entry_from_record({
            "date": "2024-03-04",
            "status": "clocked-out",
            "clockInTime": "2024-03-04T08:00:00-06:00",
            "clockOutTime": "2024-03-04T16:30:00-06:00",
        })

        assert result.duration_in_hours == 8.5
        assert result.clock_in_time == datetime(2024, 3, 4, 14, 0, tzinfo=timezone.utc)

    def test_utc_z_suffix(self):
        result = time_entry_from_record({
            "date": "2024-03-04",
            "clockInTime": "2024-03-04T14:00:00Z",
            "clockOutTime": "2024-03-04T15:30:00Z",
        })
        assert result.duration_in_hours == 1.5

    def test_snake_case_keys(self):
        result = time_entry_from_record({"date": "2024-03-04", "duration_in_hours": 2})
        assert result.duration_in_hours == 2.0

    def test_open_clock_in_is_active(self):
        result = time_entry_from_record({
            "date": "2024-03-04",
            "clockInTime": "2024-03-04T08:00:00-06:00",
        })

        assert result.status == STATUS_CLOCKED_IN
        assert result.is_active
        assert result.duration_in_hours == 0

    def test_negative_duration_rejected(self):
        with pytest.raises(MalformedEntryError, match="negative"):
            time_entry_from_record({"date": "2024-03-04", "durationInHours": -1})

    def test_missing_date_rejected(self):
        with pytest.raises(MalformedEntryError):
            time_entry_from_record({"durationInHours": 3})

    def test_bad_timestamp_rejected(self):
        with pytest.raises(MalformedEntryError, match="timestamp"):
            time_entry_from_record({"date": "2024-03-04", "clockInTime": "8am"})

    def test_non_numeric_hours_rejected(self):
        with pytest.raises(MalformedEntryError):
            time_entry_from_record({"date": "2024-03-04", "durationInHours": "eight"})

    @pytest.mark.parametrize("hours", ["NaN", float("nan"), float("inf"), "-Infinity"])
    def test_non_finite_hours_rejected(self, hours):
        with pytest.raises(MalformedEntryError, match="non-finite"):
            time_entry_from_record({"date": "2024-03-04", "durationInHours": hours})

    def test_non_finite_seconds_rejected(self):
        with pytest.raises(MalformedEntryError):
            time_entry_from_record({"date": "2024-03-04", "duration": float("inf")})

    @pytest.mark.parametrize("value", ["2024-3-4", " 2024-03-04", "2024-03-04 "])
    def test_date_is_normalized(self, value):
        result = time_entry_from_record({"date": value, "durationInHours": 8})
        assert result.date == "2024-03-04"

    def test_invalid_date_rejected(self):
        with pytest.raises(MalformedEntryError, match="Invalid entry date"):
            time_entry_from_record({"date": "03/04/2024", "durationInHours": 8})


class TestParseEntryDate:

    def test_valid(self):
        assert parse_entry_date("2024-03-04") == date(2024, 3, 4)

    @pytest.mark.parametrize("value", ["03/04/2024", "2024-13-01", "", None, 20240304])
    def test_invalid(self, value):
        with pytest.raises(MalformedEntryError):
            parse_entry_date(value)


class TestActiveHours:

    def test_elapsed_hours(self):
        clock_in = datetime(2024, 3, 4, 8, 0, tzinfo=TZ)
        now = datetime(2024, 3, 4, 10, 30, tzinfo=TZ)
        assert active_hours(clock_in, now) == 2.5

    def test_future_clock_in_is_zero(self):
        clock_in = datetime(2024, 3, 4, 11, 0, tzinfo=TZ)
        now = datetime(2024, 3, 4, 10, 0, tzinfo=TZ)
        assert active_hours(clock_in, now) == 0

    def test_naive_clock_in_takes_now_timezone(self):
        clock_in = datetime(2024, 3, 4, 8, 0)
        now = datetime(2024, 3, 4, 9, 0, tzinfo=TZ)
        assert active_hours(clock_in, now) == 1.0


@pytest.fixture
def entries_file(tmp_path):
    """JSON export with closed, active, malformed, and out-of-range records."""
    records = [
        {"id": "late", "date": "2024-03-08", "durationInHours": 6},
        {"id": "early", "date": "2024-02-26", "durationInHours": 8},
        {"id": "before", "date": "2024-02-20", "durationInHours": 8},
        {"id": "bad", "date": "2024-02-27", "durationInHours": -4},
        {"id": "open", "date": "2024-03-08", "status": "clocked-in",
         "clockInTime": "2024-03-08T13:00:00-06:00"},
    ]
    path = tmp_path / "entries.json"
    path.write_text(json.dumps(records))
    return path


class TestJsonTimeEntryStore:

    def test_returns_closed_entries_in_range_sorted(self, entries_file):
        store = JsonTimeEntryStore(entries_file)
        result = store.get_time_entries("2024-02-25", "2024-03-09")

        assert [e.id for e in result] == ["early", "late"]

    def test_malformed_records_are_logged_and_skipped(self, entries_file, caplog):
        store = JsonTimeEntryStore(entries_file)
        store.get_time_entries("2024-01-01", "2024-12-31")

        assert "skipping record" in caplog.text

    def test_active_entry(self, entries_file):
        open_entry = JsonTimeEntryStore(entries_file).active_entry()

        assert open_entry.id == "open"
        assert open_entry.clock_in_time == datetime(2024, 3, 8, 19, 0, tzinfo=timezone.utc)

    def test_entries_wrapper_object(self, tmp_path):
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"entries": [{"date": "2024-03-01", "durationInHours": 3}]}))

        result = JsonTimeEntryStore(path).get_time_entries("2024-03-01", "2024-03-01")

        assert len(result) == 1
        assert JsonTimeEntryStore(path).active_entry() is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonTimeEntryStore(tmp_path / "nope.json").get_time_entries("2024-01-01", "2024-12-31")

    def test_non_list_content(self, tmp_path):
        path = tmp_path / "odd.json"
        path.write_text(json.dumps("hello"))

        with pytest.raises(ValueError):
            JsonTimeEntryStore(path).get_time_entries("2024-01-01", "2024-12-31")

    def test_unpadded_dates_are_in_range(self, tmp_path):
        path = tmp_path / "loose.json"
        path.write_text(json.dumps([
            {"id": "a", "date": "2024-3-4", "durationInHours": 8},
            {"id": "b", "date": " 2024-03-05", "durationInHours": 8},
            {"id": "c", "date": "2024-03-10", "durationInHours": 8},
        ]))

        result = JsonTimeEntryStore(path).get_time_entries("2024-02-25", "2024-03-09")

        assert [e.id for e in result] == ["a", "b"]
        assert [e.date for e in result] == ["2024-03-04", "2024-03-05"]

    def test_nan_literal_records_are_skipped(self, tmp_path, caplog):
        path = tmp_path / "nan.json"
        path.write_text('[{"date": "2024-03-04", "durationInHours": 8},'
                        ' {"date": "2024-03-05", "durationInHours": NaN},'
                        ' {"date": "2024-03-06", "durationInHours": Infinity}]')

        result = JsonTimeEntryStore(path).get_time_entries("2024-02-25", "2024-03-09")

        assert [e.duration_in_hours for e in result] == [8.0]
        assert caplog.text.count("skipping record") == 2
