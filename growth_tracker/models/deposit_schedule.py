"""
Expansion of recurring deposit schedules into concrete cash flows.

Identifiers are derived from the deposit date unless a factory is injected,
so expanding the same schedule twice yields identical cash flows.
"""

from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from .tracker import CashFlow, DepositSchedule

IdFactory = Callable[[], str]

_FIXED_STEPS = {
    "daily": timedelta(days=1),
    "weekly": timedelta(weeks=1),
    "biweekly": timedelta(weeks=2),
}


def _scheduled_id(occurrence: date) -> str:
    return f"scheduled-{occurrence.isoformat()}"


def _occurrence(anchor: date, frequency: str, k: int) -> date:
    if frequency == "monthly":
        # Offsetting from the anchor keeps the day of month stable (Jan 31 -> Feb 28 -> Mar 31)
        return anchor + relativedelta(months=k)
    return anchor + _FIXED_STEPS[frequency] * k


def generate_scheduled_cash_flows(
    schedule: DepositSchedule,
    tracker_start: date,
    tracker_end: date,
    id_factory: Optional[IdFactory] = None,
) -> List[CashFlow]:
    """
    Expand a deposit schedule into dated deposits.

    The first deposit lands one frequency step after the schedule start;
    deposits continue up to and including the schedule end.

    Args:
        schedule: Deposit schedule
        tracker_start: Used when the schedule has no start date
        tracker_end: Used when the schedule has no end date
        id_factory: Source of cash flow identifiers (defaults to date-derived ids)

    Returns:
        Scheduled deposits ordered by date; empty when disabled or amount <= 0
    """
    if not schedule.enabled or schedule.amount <= 0:
        return []

    anchor = schedule.start_date or tracker_start
    end = schedule.end_date or tracker_end

    cash_flows = []
    k = 1
    occurrence = _occurrence(anchor, schedule.frequency, k)
    while occurrence <= end:
        cash_flows.append(
            CashFlow(
                id=id_factory() if id_factory else _scheduled_id(occurrence),
                date=occurrence,
                amount=schedule.amount,
                type="deposit",
                source="scheduled",
            )
        )
        k += 1
        occurrence = _occurrence(anchor, schedule.frequency, k)

    return cash_flows


def merge_scheduled_cash_flows(
    cash_flows: Iterable[CashFlow], scheduled: Iterable[CashFlow]
) -> List[CashFlow]:
    """Replace previously scheduled flows with a fresh expansion, keeping manual ones."""
    manual = [cf for cf in cash_flows if cf.source != "scheduled"]
    return sorted(manual + list(scheduled), key=lambda cf: cf.date)
