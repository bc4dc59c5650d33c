"""Time entry records and the providers that supply them.

A time entry is one worked span on a calendar day: either a closed
clock-in/clock-out pair or a manual entry with explicit hours. Records are
read in the shape the time tracking store exports them (camelCase keys),
with snake_case accepted too:

    {
        "id": "te_01",
        "date": "2024-03-04",
        "status": "clocked-out",
        "clockInTime": "2024-03-04T08:00:00-06:00",
        "clockOutTime": "2024-03-04T16:30:00-06:00",
        "durationInHours": 8.5,
        "notes": "Spring portraits"
    }

Dates are normalized to YYYY-MM-DD. Duration resolution order:
1. durationInHours (hours)
2. duration (seconds)
3. clockOutTime - clockInTime

An entry with a clock-in but no clock-out is active: its hours are live
and supplied separately (see active_hours), never summed as a closed entry.
"""

import json
import logging
import math
import os
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

ENTRY_DATE_FORMAT = "%Y-%m-%d"
STATUS_CLOCKED_IN = "clocked-in"
STATUS_CLOCKED_OUT = "clocked-out"


class MalformedEntryError(ValueError):
    """Raised when a time entry record cannot be interpreted."""


@dataclass(frozen=True)
class TimeEntry:
    """A single time entry snapshot."""

    date: str
    duration_in_hours: float
    id: Optional[str] = None
    status: str = STATUS_CLOCKED_OUT
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """True for a clock-in that has not been closed."""
        return self.status == STATUS_CLOCKED_IN

    @property
    def entry_date(self) -> date:
        return parse_entry_date(self.date)


def parse_entry_date(value: Any) -> date:
    """Parse an entry's YYYY-MM-DD date.

    Raises:
        MalformedEntryError: If the value is not a valid date string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise MalformedEntryError(f"Entry date must be a YYYY-MM-DD string, got {value!r}")
    try:
        return datetime.strptime(value.strip(), ENTRY_DATE_FORMAT).date()
    except ValueError:
        raise MalformedEntryError(f"Invalid entry date: {value!r}")


def check_duration(hours: Any, entry_id: Optional[str] = None) -> float:
    """Duration as float hours.

    Raises:
        MalformedEntryError: If hours is not a finite, non-negative number
    """
    if isinstance(hours, bool):
        raise MalformedEntryError(f"Time entry {entry_id!r} has a non-numeric duration")
    try:
        value = float(hours)
    except (TypeError, ValueError):
        raise MalformedEntryError(f"Time entry {entry_id!r} has a non-numeric duration")
    if not math.isfinite(value):
        raise MalformedEntryError(f"Time entry {entry_id!r} has non-finite duration {hours!r}")
    if value < 0:
        raise MalformedEntryError(f"Time entry {entry_id!r} has negative duration {value}")
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (trailing 'Z' allowed). None passes through."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise MalformedEntryError(f"Timestamp must be an ISO-8601 string, got {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise MalformedEntryError(f"Invalid timestamp: {value!r}")


def _first(record: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def time_entry_from_record(record: Dict[str, Any]) -> TimeEntry:
    """Build a TimeEntry from a stored record.

    Raises:
        MalformedEntryError: If the record has no valid date, a negative,
            non-finite or non-numeric duration, or unparsable clock times
    """
    if not isinstance(record, dict):
        raise MalformedEntryError(f"Time entry must be an object, got {type(record).__name__}")

    entry_id = record.get("id")
    raw_date = record.get("date")
    if not isinstance(raw_date, str) or not raw_date:
        raise MalformedEntryError(f"Time entry {entry_id!r} has no date")
    entry_date = parse_entry_date(raw_date).isoformat()

    clock_in = parse_timestamp(_first(record, "clockInTime", "clock_in_time"))
    clock_out = parse_timestamp(_first(record, "clockOutTime", "clock_out_time"))

    status = record.get("status") or ""
    if not status:
        status = STATUS_CLOCKED_IN if clock_in and not clock_out else STATUS_CLOCKED_OUT

    hours = _first(record, "durationInHours", "duration_in_hours")
    seconds = record.get("duration")
    if hours is not None:
        hours = check_duration(hours, entry_id)
    elif seconds:
        hours = check_duration(seconds, entry_id) / 3600.0
    elif clock_in and clock_out:
        try:
            elapsed = (clock_out - clock_in).total_seconds()
        except TypeError:
            raise MalformedEntryError(f"Time entry {entry_id!r} mixes naive and aware clock times")
        hours = check_duration(elapsed / 3600.0, entry_id)
    else:
        hours = 0.0

    return TimeEntry(
        date=entry_date,
        duration_in_hours=hours,
        id=entry_id,
        status=status,
        clock_in_time=clock_in,
        clock_out_time=clock_out,
        notes=record.get("notes"),
    )


def active_hours(clock_in_time: datetime, now: Optional[datetime] = None) -> float:
    """Elapsed hours of an open clock-in (never negative).

    A naive clock-in time is taken to be in now's timezone.
    """
    if now is None:
        now = datetime.now(tz=clock_in_time.tzinfo)
    if clock_in_time.tzinfo is None and now.tzinfo is not None:
        clock_in_time = clock_in_time.replace(tzinfo=now.tzinfo)
    elif clock_in_time.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=clock_in_time.tzinfo)
    elapsed = (now - clock_in_time).total_seconds()
    return max(elapsed, 0.0) / 3600.0


# =============================================================================
# Providers
# =============================================================================


class TimeEntrySource(Protocol):
    """Anything that can return time entries for an inclusive date range."""

    def get_time_entries(self, start_date: str, end_date: str) -> List[TimeEntry]:
        ...


class JsonTimeEntryStore:
    """Time entries exported to a JSON file.

    The file holds either a list of records or {"entries": [...]}.
    Records that cannot be parsed are logged and skipped.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._entries: Optional[List[TimeEntry]] = None

    def _load(self) -> List[TimeEntry]:
        if self._entries is not None:
            return self._entries

        if not self.path.exists():
            raise FileNotFoundError(f"Time entries file not found: {self.path}")

        with open(self.path, "r") as f:
            raw = json.load(f)

        if isinstance(raw, dict):
            raw = raw.get("entries", [])
        if not isinstance(raw, list):
            raise ValueError(f"{self.path.name}: expected a list of time entries")

        entries = []
        for i, record in enumerate(raw):
            try:
                entries.append(time_entry_from_record(record))
            except MalformedEntryError as e:
                logger.warning(f"{self.path.name}[{i}]: skipping record: {e}")

        logger.debug(f"loaded {len(entries)} of {len(raw)} records from {self.path.name}")
        self._entries = entries
        return entries

    def get_time_entries(self, start_date: str, end_date: str) -> List[TimeEntry]:
        """Closed entries whose date is within [start_date, end_date]."""
        start = parse_entry_date(start_date)
        end = parse_entry_date(end_date)
        return sorted(
            (
                e for e in self._load()
                if not e.is_active and start <= e.entry_date <= end
            ),
            key=lambda e: e.entry_date,
        )

    def active_entry(self) -> Optional[TimeEntry]:
        """The most recent open clock-in, if any."""
        active = [e for e in self._load() if e.is_active and e.clock_in_time]
        if not active:
            return None
        return max(active, key=lambda e: e.clock_in_time)
