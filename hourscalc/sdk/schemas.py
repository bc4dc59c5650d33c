"""Pydantic schemas for hours-calc organization settings and PTO state.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in profile.yaml cause clear errors rather than silent ignoring.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


DEFAULT_REFERENCE_DATE = "2024-02-25"
DEFAULT_PERIOD_LENGTH_DAYS = 14
DEFAULT_WEEKLY_OVERTIME_THRESHOLD = 40.0


# =============================================================================
# Pay period settings
# =============================================================================


class PayPeriodSettings(BaseModel):
    """Organization pay period settings as stored in profile.yaml."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(
        default="bi-weekly",
        description="weekly, bi-weekly (or biweekly), semi-monthly, or monthly",
    )
    start_date: str = Field(
        default=DEFAULT_REFERENCE_DATE,
        description="Reference date (YYYY-MM-DD) known to start a pay period",
    )
    is_active: bool = Field(
        default=True,
        description="Inactive settings fall back to the default bi-weekly schedule",
    )
    weekly_overtime_threshold: float = Field(
        default=DEFAULT_WEEKLY_OVERTIME_THRESHOLD, ge=0,
        description="Hours per week beyond which hours count as overtime",
    )
    first_date: int = Field(
        default=1, ge=1, le=28,
        description="Semi-monthly: day of month the first period starts",
    )
    second_date: int = Field(
        default=15, ge=2, le=28,
        description="Semi-monthly: day of month the second period starts",
    )
    day_of_month: Optional[int] = Field(
        default=None, ge=1, le=31,
        description="Monthly: day periods start (defaults to start_date's day)",
    )

    @model_validator(mode="after")
    def check_semi_monthly_order(self) -> "PayPeriodSettings":
        if self.second_date <= self.first_date:
            raise ValueError(
                f"second_date ({self.second_date}) must be after first_date ({self.first_date})"
            )
        return self


# =============================================================================
# PTO accrual
# =============================================================================


class PtoSettings(BaseModel):
    """Organization PTO accrual settings (hour banking)."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True)
    accrual_rate: float = Field(
        default=1, ge=0,
        description="PTO hours earned per full accrual_period of worked hours",
    )
    accrual_period: float = Field(
        default=40, gt=0,
        description="Worked hours required to earn accrual_rate PTO hours",
    )
    max_accrual: float = Field(
        default=240, ge=0,
        description="Cap on the total PTO balance",
    )


class ProcessedPeriod(BaseModel):
    """History entry for a pay period already credited to a balance."""

    model_config = ConfigDict(extra="forbid")

    start_date: str
    end_date: str
    label: str = ""
    hours_worked: float = 0
    pto_earned: float = 0
    banking_balance: float = 0
    processed_at: Optional[str] = None


class PtoBalance(BaseModel):
    """PTO balance for one employee."""

    model_config = ConfigDict(extra="forbid")

    total_balance: float = Field(default=0, ge=0)
    banking_balance: float = Field(
        default=0, ge=0,
        description="Worked hours carried toward the next accrual",
    )
    used_this_year: float = Field(default=0, ge=0)
    processed_periods: List[ProcessedPeriod] = Field(default_factory=list)

    def has_processed(self, start_date: str, end_date: str) -> bool:
        return any(
            p.start_date == start_date and p.end_date == end_date
            for p in self.processed_periods
        )


class PtoAccrual(BaseModel):
    """Outcome of accruing PTO for one pay period."""

    model_config = ConfigDict(extra="forbid")

    start_date: str
    end_date: str
    hours_worked: float
    pto_earned: float = Field(..., description="PTO hours actually added (after the cap)")
    previous_balance: float
    new_balance: float
    banking_balance: float
    skipped_reason: Optional[str] = Field(
        None, description="Set when the period was not credited"
    )

    @property
    def applied(self) -> bool:
        return self.skipped_reason is None
