"""PTO accrual by cumulative hour banking.

SDK layer. Worked hours accumulate in a banking balance; every full
accrual_period of banked hours converts to accrual_rate PTO hours and the
remainder carries into the next pay period:

    banking = previous_banking + hours_worked
    earned = floor(banking / accrual_period) * accrual_rate
    remaining_banking = banking % accrual_period
    new_total = min(previous_total + earned, max_accrual)

Each pay period is credited at most once per balance.
"""

import json
import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .pay_period import PayPeriod
from .schemas import ProcessedPeriod, PtoAccrual, PtoBalance, PtoSettings

logger = logging.getLogger(__name__)

BALANCES_FILENAME = "pto_balances.json"


def pay_period_ends_on(period: PayPeriod, day: date) -> bool:
    """True if period closes on day (the day accrual runs)."""
    return period.end_day == day


def accrue_pto(
    balance: PtoBalance,
    hours_worked: float,
    period: PayPeriod,
    settings: PtoSettings,
    processed_at: Optional[datetime] = None,
) -> Tuple[PtoBalance, PtoAccrual]:
    """Credit one closed pay period's worked hours to a PTO balance.

    Args:
        balance: Current balance (not modified)
        hours_worked: Closed hours worked in the period
        period: The pay period being credited
        settings: Accrual settings
        processed_at: Timestamp recorded in the period history

    Returns:
        (new_balance, accrual). When the period is skipped, new_balance is
        the input balance and accrual.skipped_reason says why.
    """
    if hours_worked < 0:
        raise ValueError(f"hours_worked must not be negative, got {hours_worked}")

    previous_total = balance.total_balance

    def skipped(reason: str) -> Tuple[PtoBalance, PtoAccrual]:
        logger.info(f"PTO not accrued for {period.start_date} to {period.end_date}: {reason}")
        return balance, PtoAccrual(
            start_date=period.start_date,
            end_date=period.end_date,
            hours_worked=hours_worked,
            pto_earned=0,
            previous_balance=previous_total,
            new_balance=previous_total,
            banking_balance=balance.banking_balance,
            skipped_reason=reason,
        )

    if not settings.enabled:
        return skipped("PTO accrual disabled")

    if balance.has_processed(period.start_date, period.end_date):
        return skipped("pay period already processed")

    banking = balance.banking_balance + hours_worked
    earned = math.floor(banking / settings.accrual_period) * settings.accrual_rate
    remaining_banking = banking % settings.accrual_period

    # A balance already above the cap is never reduced
    new_total = max(min(previous_total + earned, settings.max_accrual), previous_total)
    added = new_total - previous_total

    if added <= 0 and hours_worked <= 0:
        return skipped("no hours worked")

    logger.debug(
        f"banking {balance.banking_balance} + {hours_worked} = {banking}, "
        f"earned {earned}, remaining {remaining_banking}, balance {previous_total} -> {new_total}"
    )

    history = ProcessedPeriod(
        start_date=period.start_date,
        end_date=period.end_date,
        label=period.label,
        hours_worked=hours_worked,
        pto_earned=added,
        banking_balance=remaining_banking,
        processed_at=(processed_at or datetime.now()).isoformat(),
    )

    new_balance = balance.model_copy(update={
        "total_balance": new_total,
        "banking_balance": remaining_banking,
        "processed_periods": [*balance.processed_periods, history],
    })

    return new_balance, PtoAccrual(
        start_date=period.start_date,
        end_date=period.end_date,
        hours_worked=hours_worked,
        pto_earned=added,
        previous_balance=previous_total,
        new_balance=new_total,
        banking_balance=remaining_banking,
    )


class PtoBalanceStore:
    """PTO balances keyed by employee, persisted as JSON."""

    def __init__(self, path: Union[str, Path, None] = None):
        if path is None:
            from .config import get_data_path
            path = get_data_path() / BALANCES_FILENAME
        self.path = Path(path)

    def _read(self) -> Dict[str, dict]:
        if not self.path.exists():
            return {}
        with open(self.path, "r") as f:
            return json.load(f)

    def load(self, employee: str) -> PtoBalance:
        """Balance for employee (zero balance if none recorded)."""
        data = self._read().get(employee)
        if data is None:
            return PtoBalance()
        return PtoBalance.model_validate(data)

    def save(self, employee: str, balance: PtoBalance) -> Path:
        balances = self._read()
        balances[employee] = balance.model_dump()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(balances, f, indent=2)

        return self.path
