"""Pay period hours summary.

Ties the pieces together for callers that recompute on every data update:
resolve the pay period, fetch its entries from a TimeEntrySource, compute
the overtime breakdown and store it in an optional cache so the next
display can start from the last value.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any, Dict, Optional, Union

from .cache import BreakdownCache, cache_key
from .overtime import OvertimeBreakdown, compute_breakdown
from .pay_period import PayPeriod, Schedule, now_in, overtime_threshold, resolve_pay_period
from .time_entries import TimeEntrySource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoursSummary:
    """A pay period with its computed breakdown."""

    period: PayPeriod
    breakdown: OvertimeBreakdown
    threshold: float
    entry_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period.to_dict(),
            "threshold": self.threshold,
            "entry_count": self.entry_count,
            **self.breakdown.to_dict(),
        }


def format_hours(hours: float) -> str:
    """Format decimal hours for display, e.g. 8.75 -> '8h 45m'.

    Truncates to whole minutes.
    """
    total_minutes = int(hours * 60)
    h, m = divmod(total_minutes, 60)
    return f"{h}h {m}m"


def summarize_hours(
    source: TimeEntrySource,
    schedule: Schedule,
    as_of: Union[date, datetime, None] = None,
    tz: Optional[tzinfo] = None,
    live_hours: float = 0.0,
    cache: Optional[BreakdownCache] = None,
    scope: str = "default",
) -> HoursSummary:
    """Compute the hours breakdown for the pay period enclosing as_of.

    Args:
        source: Provider of time entries for the period's date range
        schedule: PayPeriodSettings or PayPeriodConfig
        as_of: "Now" (defaults to the current time in tz)
        tz: Timezone for day boundaries (defaults to local)
        live_hours: Hours of an open clock-in
        cache: Optional cache updated with the closed-entry breakdown
            (live hours excluded)
        scope: Cache scope, e.g. an employee ID

    Raises:
        InvalidConfigurationError: If the schedule is invalid
        ValueError: If live_hours is negative or not finite
    """
    if not math.isfinite(live_hours) or live_hours < 0:
        raise ValueError(f"Live hours must be a non-negative number, got {live_hours}")
    if as_of is None:
        as_of = now_in(tz)

    period = resolve_pay_period(schedule, as_of, tz)
    threshold = overtime_threshold(schedule)

    entries = source.get_time_entries(period.start_date, period.end_date)
    logger.debug(f"{len(entries)} entries for pay period {period.start_date} to {period.end_date}")

    closed = compute_breakdown(entries, period, as_of=as_of, threshold=threshold, tz=tz)

    # Cache holds closed-entry totals only
    if cache is not None:
        cache.set(cache_key(period, scope), closed)

    breakdown = closed.with_live_hours(live_hours) if live_hours else closed

    return HoursSummary(
        period=period,
        breakdown=breakdown,
        threshold=threshold,
        entry_count=len(entries),
    )


def cached_breakdown(
    cache: BreakdownCache,
    schedule: Schedule,
    as_of: Union[date, datetime, None] = None,
    tz: Optional[tzinfo] = None,
    scope: str = "default",
) -> Optional[OvertimeBreakdown]:
    """Last stored closed-entry breakdown for the pay period enclosing as_of.

    Live hours are never cached; callers add current ones with
    OvertimeBreakdown.with_live_hours.
    """
    period = resolve_pay_period(schedule, as_of, tz)
    return cache.get(cache_key(period, scope))
