"""Regular/overtime hour split for a pay period.

SDK layer - pure logic, returns an OvertimeBreakdown. No I/O.

Entries are bucketed by week within the pay period, counting 7-day weeks
from the period's first day (week 0, week 1, ...). Each week's hours up to
the threshold are regular and the rest overtime. Entries dated outside the
period are skipped, so every bucket index lies within the period.

Live in-progress hours (an open clock-in) count toward the current week
only and are reported separately from the closed totals.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, tzinfo
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from .pay_period import InvalidConfigurationError, PayPeriod, local_day
from .schemas import DEFAULT_WEEKLY_OVERTIME_THRESHOLD
from .time_entries import (
    MalformedEntryError,
    TimeEntry,
    check_duration,
    parse_entry_date,
    time_entry_from_record,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OvertimeBreakdown:
    """Hour totals for one pay period."""

    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    total_hours: float = 0.0
    current_week_hours: float = 0.0
    in_progress_hours: float = 0.0
    weekly_hours: Tuple[float, ...] = field(default_factory=tuple)
    skipped_entries: int = 0

    @property
    def projected_total_hours(self) -> float:
        """Closed total plus the live in-progress hours."""
        return self.total_hours + self.in_progress_hours

    def with_live_hours(self, hours: float) -> "OvertimeBreakdown":
        """Copy with an open clock-in's hours added to the current week."""
        return replace(
            self,
            current_week_hours=self.current_week_hours + hours,
            in_progress_hours=self.in_progress_hours + hours,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "total_hours": self.total_hours,
            "current_week_hours": self.current_week_hours,
            "in_progress_hours": self.in_progress_hours,
            "projected_total_hours": self.projected_total_hours,
            "weekly_hours": list(self.weekly_hours),
            "skipped_entries": self.skipped_entries,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OvertimeBreakdown":
        return cls(
            regular_hours=data.get("regular_hours", 0.0),
            overtime_hours=data.get("overtime_hours", 0.0),
            total_hours=data.get("total_hours", 0.0),
            current_week_hours=data.get("current_week_hours", 0.0),
            in_progress_hours=data.get("in_progress_hours", 0.0),
            weekly_hours=tuple(data.get("weekly_hours", ())),
            skipped_entries=data.get("skipped_entries", 0),
        )


def week_index(period: PayPeriod, day: date) -> int:
    """0-based week of day within period (floored, may be out of range)."""
    return (day - period.start_day).days // 7


def compute_breakdown(
    entries: Iterable[Union[TimeEntry, Dict[str, Any]]],
    period: PayPeriod,
    as_of: Union[date, datetime, None] = None,
    threshold: float = DEFAULT_WEEKLY_OVERTIME_THRESHOLD,
    live_in_progress_hours: float = 0.0,
    tz: Optional[tzinfo] = None,
) -> OvertimeBreakdown:
    """Split a pay period's hours into regular and overtime.

    Args:
        entries: Closed time entries (TimeEntry or stored record dicts).
            Entries sharing a date are summed.
        period: The enclosing pay period
        as_of: "Now" for picking the current week (defaults to now)
        threshold: Weekly overtime threshold in hours
        live_in_progress_hours: Hours of an open clock-in, added to the
            current week only
        tz: Timezone for as_of (defaults to the period's timezone)

    Returns:
        OvertimeBreakdown. Malformed and out-of-period entries are logged,
        skipped, and counted in skipped_entries.

    Raises:
        InvalidConfigurationError: If threshold is negative
        ValueError: If live_in_progress_hours is negative or not finite
    """
    if threshold < 0:
        raise InvalidConfigurationError(f"Overtime threshold must not be negative, got {threshold}")
    if not math.isfinite(live_in_progress_hours) or live_in_progress_hours < 0:
        raise ValueError(f"In-progress hours must be a non-negative number, got {live_in_progress_hours}")

    if tz is None:
        tz = period.tz

    weekly = [0.0] * period.week_count
    skipped = 0

    for entry in entries:
        try:
            if isinstance(entry, dict):
                entry = time_entry_from_record(entry)
            day = parse_entry_date(entry.date)
            hours = check_duration(entry.duration_in_hours, entry.id)
        except MalformedEntryError as e:
            logger.warning(f"Skipping time entry: {e}")
            skipped += 1
            continue

        if entry.is_active:
            logger.debug(f"Ignoring active entry {entry.id} dated {entry.date}")
            continue

        if not period.contains(day):
            logger.warning(
                f"Skipping time entry {entry.id or ''} dated {entry.date}: "
                f"outside pay period {period.start_date} to {period.end_date}"
            )
            skipped += 1
            continue

        weekly[week_index(period, day)] += hours

    current = week_index(period, local_day(as_of, tz))
    current_week_hours = weekly[current] if 0 <= current < len(weekly) else 0.0
    current_week_hours += live_in_progress_hours

    regular = 0.0
    overtime = 0.0
    for week_hours in weekly:
        regular += min(week_hours, threshold)
        overtime += max(week_hours - threshold, 0.0)

    return OvertimeBreakdown(
        regular_hours=regular,
        overtime_hours=overtime,
        total_hours=regular + overtime,
        current_week_hours=current_week_hours,
        in_progress_hours=live_in_progress_hours,
        weekly_hours=tuple(weekly),
        skipped_entries=skipped,
    )
