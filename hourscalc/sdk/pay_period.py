"""Pay period boundary calculation.

SDK layer - pure logic, no I/O. Every function takes the timezone used for
day boundaries explicitly (tz=None means the machine's local zone), so
results are reproducible regardless of where they run.

Fixed-length schedules (weekly, bi-weekly) are anchored on a reference date
known to start a period:

    days_since = (as_of_day - reference_day).days
    periods_elapsed = days_since // period_length_days   # floored
    start = reference_day + periods_elapsed * period_length_days
    end = start + (period_length_days - 1) days, at 23:59:59

Floored division means dates before the reference date land in the
preceding period, so periods tile backward with no gap or overlap.

Calendar schedules (monthly, semi-monthly) follow the month instead.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import List, Optional, Union

from .schemas import (
    DEFAULT_PERIOD_LENGTH_DAYS,
    DEFAULT_REFERENCE_DATE,
    DEFAULT_WEEKLY_OVERTIME_THRESHOLD,
    PayPeriodSettings,
)

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59)

PERIOD_LENGTHS = {
    "weekly": 7,
    "bi-weekly": 14,
}
CALENDAR_TYPES = ("semi-monthly", "monthly")
TYPE_ALIASES = {
    "biweekly": "bi-weekly",
    "semimonthly": "semi-monthly",
}


class InvalidConfigurationError(ValueError):
    """Raised when pay period configuration cannot produce a valid period."""


@dataclass(frozen=True)
class PayPeriodConfig:
    """Fixed-length pay period schedule."""

    reference_date: Union[date, str] = DEFAULT_REFERENCE_DATE
    period_length_days: int = DEFAULT_PERIOD_LENGTH_DAYS
    weekly_overtime_threshold_hours: float = DEFAULT_WEEKLY_OVERTIME_THRESHOLD


DEFAULT_CONFIG = PayPeriodConfig()


@dataclass(frozen=True)
class PayPeriod:
    """A pay period: start-of-day start through 23:59:59 on its last day."""

    start: datetime
    end: datetime
    label: str = ""
    # Zone the period was resolved in (None: machine local, DST-aware)
    tz: Optional[tzinfo] = field(default=None, compare=False, repr=False)

    @property
    def start_day(self) -> date:
        return self.start.date()

    @property
    def end_day(self) -> date:
        return self.end.date()

    @property
    def start_date(self) -> str:
        """Start as YYYY-MM-DD, the format time entry queries use."""
        return self.start_day.isoformat()

    @property
    def end_date(self) -> str:
        return self.end_day.isoformat()

    @property
    def length_days(self) -> int:
        return (self.end_day - self.start_day).days + 1

    @property
    def week_count(self) -> int:
        """Number of (possibly partial) weeks within the period."""
        return -(-self.length_days // 7)

    def contains(self, day: date) -> bool:
        return self.start_day <= day <= self.end_day

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "start_date": self.start_date,
            "end_date": self.end_date,
            "label": self.label,
            "length_days": self.length_days,
        }


# =============================================================================
# Day helpers
# =============================================================================


def now_in(tz: Optional[tzinfo] = None) -> datetime:
    """Current aware time in tz (None: the machine's local zone)."""
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz=tz)


def localize(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Attach tz to a naive wall-clock datetime; aware values pass through.

    With tz=None the machine's local rules apply to each value, so the
    UTC offset follows DST instead of being fixed to today's offset.
    """
    if value.tzinfo is not None:
        return value
    if tz is None:
        return value.astimezone()
    return value.replace(tzinfo=tz)


def local_day(value: Union[date, datetime, None], tz: Optional[tzinfo] = None) -> date:
    """Calendar day of value in tz (None: machine local).

    Aware datetimes are converted into tz first; naive datetimes are taken
    as wall-clock time in tz. None means now.
    """
    if value is None:
        return now_in(tz).date()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(tz).date()
        return value.date()
    return value


def coerce_reference_date(value: Union[date, datetime, str]) -> date:
    """Reference date as a day, stripped of any time of day.

    Raises:
        InvalidConfigurationError: If value is not a date or YYYY-MM-DD string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            pass
    raise InvalidConfigurationError(f"Invalid pay period reference date: {value!r}")


def _format_day(day: date) -> str:
    return f"{day:%b} {day.day}, {day.year}"


def period_label(start_day: date, end_day: date) -> str:
    """Human label, e.g. 'Feb 25, 2024 - Mar 9, 2024'."""
    return f"{_format_day(start_day)} - {_format_day(end_day)}"


def _make_period(start_day: date, end_day: date, tz: Optional[tzinfo], label: Optional[str] = None) -> PayPeriod:
    return PayPeriod(
        start=localize(datetime.combine(start_day, time.min), tz),
        end=localize(datetime.combine(end_day, END_OF_DAY), tz),
        label=label if label is not None else period_label(start_day, end_day),
        tz=tz,
    )


# =============================================================================
# Fixed-length periods
# =============================================================================


def current_pay_period(
    config: PayPeriodConfig,
    as_of: Union[date, datetime, None] = None,
    tz: Optional[tzinfo] = None,
) -> PayPeriod:
    """Pay period enclosing as_of for a fixed-length schedule.

    Args:
        config: Reference date and period length
        as_of: Query date or datetime (defaults to now)
        tz: Timezone for day boundaries (defaults to local)

    Returns:
        PayPeriod with start <= as_of's day <= end

    Raises:
        InvalidConfigurationError: If period_length_days is not positive or
            the reference date cannot be parsed
    """
    length = config.period_length_days
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise InvalidConfigurationError(
            f"period_length_days must be a positive integer, got {length!r}"
        )

    reference_day = coerce_reference_date(config.reference_date)
    target_day = local_day(as_of, tz)

    days_since_reference = (target_day - reference_day).days
    periods_elapsed = days_since_reference // length

    start_day = reference_day + timedelta(days=periods_elapsed * length)
    end_day = start_day + timedelta(days=length - 1)

    logger.debug(
        f"pay period {start_day} to {end_day} "
        f"(reference {reference_day}, target {target_day}, "
        f"days since reference {days_since_reference}, periods elapsed {periods_elapsed})"
    )

    return _make_period(start_day, end_day, tz)


# =============================================================================
# Calendar periods
# =============================================================================


def _clamp_day(year: int, month: int, day: int) -> date:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last))


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_pay_period(
    as_of: Union[date, datetime, None] = None,
    day_of_month: int = 1,
    tz: Optional[tzinfo] = None,
) -> PayPeriod:
    """Monthly period starting on day_of_month.

    Months shorter than day_of_month start on their last day. The period
    ends the day before the next month's start.
    """
    if not 1 <= day_of_month <= 31:
        raise InvalidConfigurationError(f"day_of_month must be 1-31, got {day_of_month}")

    target = local_day(as_of, tz)

    start = _clamp_day(target.year, target.month, day_of_month)
    if target < start:
        year, month = _shift_month(target.year, target.month, -1)
        start = _clamp_day(year, month, day_of_month)

    year, month = _shift_month(start.year, start.month, 1)
    end = _clamp_day(year, month, day_of_month) - timedelta(days=1)

    return _make_period(start, end, tz, label=f"{calendar.month_name[start.month]} {start.year}")


def semi_monthly_pay_period(
    as_of: Union[date, datetime, None] = None,
    first_date: int = 1,
    second_date: int = 15,
    tz: Optional[tzinfo] = None,
) -> PayPeriod:
    """Semi-monthly period: [first_date, second_date - 1] or [second_date, ...].

    The second period runs until the day before the next month's
    first_date (the month's last day when first_date is 1).
    """
    if not 1 <= first_date < second_date <= 28:
        raise InvalidConfigurationError(
            f"semi-monthly days must satisfy 1 <= first_date < second_date <= 28, "
            f"got {first_date} and {second_date}"
        )

    target = local_day(as_of, tz)

    if first_date <= target.day < second_date:
        start = date(target.year, target.month, first_date)
        end = date(target.year, target.month, second_date - 1)
    else:
        if target.day >= second_date:
            year, month = target.year, target.month
        else:
            year, month = _shift_month(target.year, target.month, -1)
        start = date(year, month, second_date)
        next_year, next_month = _shift_month(year, month, 1)
        end = date(next_year, next_month, first_date) - timedelta(days=1)

    if start.month == end.month:
        label = f"{calendar.month_name[start.month]} {start.day}-{end.day}, {start.year}"
    else:
        label = period_label(start, end)

    return _make_period(start, end, tz, label=label)


# =============================================================================
# Settings dispatch
# =============================================================================


def normalize_period_type(period_type: str) -> str:
    """Canonical period type; unknown types fall back to bi-weekly."""
    normalized = (period_type or "").strip().lower()
    normalized = TYPE_ALIASES.get(normalized, normalized)
    if normalized in PERIOD_LENGTHS or normalized in CALENDAR_TYPES:
        return normalized
    logger.warning(f"Unknown pay period type {period_type!r}, defaulting to bi-weekly")
    return "bi-weekly"


def settings_to_config(settings: PayPeriodSettings) -> PayPeriodConfig:
    """Fixed-length config for weekly/bi-weekly settings.

    Inactive settings yield the default configuration.

    Raises:
        InvalidConfigurationError: For calendar (monthly, semi-monthly) types
    """
    if not settings.is_active:
        return DEFAULT_CONFIG

    period_type = normalize_period_type(settings.type)
    if period_type in CALENDAR_TYPES:
        raise InvalidConfigurationError(f"{period_type} periods have no fixed length")

    return PayPeriodConfig(
        reference_date=settings.start_date,
        period_length_days=PERIOD_LENGTHS[period_type],
        weekly_overtime_threshold_hours=settings.weekly_overtime_threshold,
    )


Schedule = Union[PayPeriodSettings, PayPeriodConfig]


def resolve_pay_period(
    schedule: Schedule,
    as_of: Union[date, datetime, None] = None,
    tz: Optional[tzinfo] = None,
) -> PayPeriod:
    """Pay period enclosing as_of for either settings or a fixed config.

    Inactive settings use the default bi-weekly schedule from 2024-02-25.

    Raises:
        InvalidConfigurationError: If the schedule cannot produce a period
    """
    if isinstance(schedule, PayPeriodConfig):
        return current_pay_period(schedule, as_of, tz)

    if not schedule.is_active:
        logger.debug("pay period settings inactive, using default schedule")
        return current_pay_period(DEFAULT_CONFIG, as_of, tz)

    period_type = normalize_period_type(schedule.type)
    if period_type == "monthly":
        day_of_month = schedule.day_of_month or coerce_reference_date(schedule.start_date).day
        return monthly_pay_period(as_of, day_of_month, tz)
    if period_type == "semi-monthly":
        return semi_monthly_pay_period(as_of, schedule.first_date, schedule.second_date, tz)

    return current_pay_period(settings_to_config(schedule), as_of, tz)


def overtime_threshold(schedule: Schedule) -> float:
    """Weekly overtime threshold configured for a schedule."""
    if isinstance(schedule, PayPeriodConfig):
        return schedule.weekly_overtime_threshold_hours
    if not schedule.is_active:
        return DEFAULT_CONFIG.weekly_overtime_threshold_hours
    return schedule.weekly_overtime_threshold


def next_pay_period(schedule: Schedule, period: PayPeriod) -> PayPeriod:
    """The period immediately after period."""
    return resolve_pay_period(schedule, period.end_day + timedelta(days=1), period.tz)


def previous_pay_period(schedule: Schedule, period: PayPeriod) -> PayPeriod:
    """The period immediately before period."""
    return resolve_pay_period(schedule, period.start_day - timedelta(days=1), period.tz)


def pay_periods_between(
    schedule: Schedule,
    start: Union[date, datetime],
    end: Union[date, datetime],
    tz: Optional[tzinfo] = None,
) -> List[PayPeriod]:
    """All pay periods overlapping [start, end], in order.

    Raises:
        ValueError: If end precedes start
    """
    start_day = local_day(start, tz)
    end_day = local_day(end, tz)
    if end_day < start_day:
        raise ValueError(f"Range end {end_day} precedes start {start_day}")

    periods = []
    period = resolve_pay_period(schedule, start_day, tz)
    while period.start_day <= end_day:
        periods.append(period)
        period = next_pay_period(schedule, period)
    return periods
