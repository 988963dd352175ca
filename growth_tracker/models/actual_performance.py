"""
Actual-performance rate estimator.

Infers a realized, cash-flow-neutral growth rate per business day from sparse
account snapshots. Each pair of consecutive snapshots is one segment; the
net cash flow that landed inside the segment is removed from the segment's
ending value so deposits are not read as gains and withdrawals not as losses.
"""

import logging
from datetime import date
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .business_calendar import count_business_days
from .cash_flows import calculate_projection, net_cash_flow
from .tracker import ActualDataPoint, CashFlow, sort_by_date

logger = logging.getLogger(__name__)

# (cumulative return, total business days); None once a segment is unusable
_Accumulator = Optional[Tuple[float, int]]


class ActualGrowthRate(BaseModel):
    """Realized growth estimated from actual snapshots."""

    model_config = ConfigDict(frozen=True)

    daily_rate: float = Field(..., description="Per-business-day rate (decimal)")
    interval_percentage: float = Field(
        ..., description="Daily rate re-compounded over one interval, in percent"
    )
    cumulative_return: float = Field(
        ..., gt=0, description="Product of segment growth factors"
    )
    total_business_days: int = Field(
        ..., gt=0, description="Business days covered by the snapshots"
    )


def _accumulate_segments(
    points: Sequence[ActualDataPoint], cash_flows: Sequence[CashFlow]
) -> _Accumulator:
    """Fold consecutive snapshot pairs into (cumulative return, business days)."""

    def step(acc: _Accumulator, pair: Tuple[ActualDataPoint, ActualDataPoint]):
        if acc is None:
            return None
        start, end = pair
        if start.amount <= 0:
            return None
        adjusted_end = end.amount - net_cash_flow(cash_flows, start.date, end.date)
        cumulative_return, business_days = acc
        return (
            cumulative_return * (adjusted_end / start.amount),
            business_days + count_business_days(start.date, end.date),
        )

    return reduce(step, zip(points, points[1:]), (1.0, 0))


def calculate_actual_average_increase(
    actual_data: Iterable[ActualDataPoint],
    interval_days: int,
    cash_flows: Iterable[CashFlow] = (),
) -> Optional[ActualGrowthRate]:
    """
    Estimate the realized growth rate from actual snapshots.

    The interval percentage is the per-business-day rate re-compounded over
    exactly ``interval_days``, which keeps trackers with different observation
    spans comparable.

    Args:
        actual_data: Account snapshots (any order)
        interval_days: Business days per interval used for the percentage
        cash_flows: Deposits and withdrawals to neutralize

    Returns:
        ActualGrowthRate, or None when there is not enough usable data
    """
    points = sort_by_date(actual_data)
    if len(points) < 2:
        logger.debug("Fewer than two actual data points, no growth rate")
        return None
    if points[0].amount <= 0:
        logger.debug("First actual amount is not positive, no growth rate")
        return None

    accumulated = _accumulate_segments(points, list(cash_flows))
    if accumulated is None:
        logger.debug("Non-positive segment start amount, no growth rate")
        return None

    cumulative_return, total_business_days = accumulated
    if total_business_days <= 0:
        logger.debug("No business days elapsed between actual data points")
        return None
    if cumulative_return <= 0:
        logger.debug(f"Cumulative return {cumulative_return} is not positive")
        return None

    daily_rate = cumulative_return ** (1 / total_business_days) - 1
    try:
        interval_percentage = ((1 + daily_rate) ** interval_days - 1) * 100
    except OverflowError:
        logger.debug(
            f"Daily rate {daily_rate} overflows over {interval_days} business days"
        )
        return None

    return ActualGrowthRate(
        daily_rate=daily_rate,
        interval_percentage=interval_percentage,
        cumulative_return=cumulative_return,
        total_business_days=total_business_days,
    )


def project_actual_trend(
    actual_data: Iterable[ActualDataPoint],
    base_dates: Sequence[Any],
    daily_rate: float,
    cash_flows: Iterable[CashFlow] = (),
) -> Dict[date, float]:
    """
    Extrapolate the latest actual value forward at the realized rate.

    Args:
        actual_data: Account snapshots
        base_dates: Dense date series (dates or records with ``date``)
        daily_rate: Realized per-business-day rate
        cash_flows: Deposits and withdrawals applied along the way

    Returns:
        Mapping of date to extrapolated value for dates on or after the
        latest snapshot; empty when there are no snapshots
    """
    points = sort_by_date(actual_data)
    if not points:
        return {}

    latest = points[-1]
    future: List[Any] = [
        p for p in base_dates if (p if isinstance(p, date) else p.date) >= latest.date
    ]
    # Flows up to the latest snapshot are already part of its amount
    pending = [cf for cf in cash_flows if cf.date > latest.date]
    return calculate_projection(future, latest.amount, daily_rate, pending)
