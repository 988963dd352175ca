"""
Cash-flow-aware compositor.

This module applies a per-business-day compounding rate together with
discrete deposits and withdrawals to a base series of dates. Composition is
strictly sequential: each value depends only on the previous value and the
cash flows that became effective since the previous date.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .business_calendar import count_business_days
from .tracker import CashFlow


def net_cash_flow(
    cash_flows: Iterable[CashFlow],
    start: Optional[date] = None,
    end: Optional[date] = None,
    include_start: bool = False,
) -> float:
    """
    Signed sum of cash flows dated within a range.

    Args:
        cash_flows: Cash flows to sum
        start: Lower bound, exclusive unless ``include_start`` (None = unbounded)
        end: Inclusive upper bound (None = unbounded)
        include_start: Whether flows dated exactly on ``start`` count

    Returns:
        Deposits minus withdrawals over the range
    """
    total = 0.0
    for cf in cash_flows:
        if start is not None:
            if cf.date < start or (cf.date == start and not include_start):
                continue
        if end is not None and cf.date > end:
            continue
        total += cf.signed_amount
    return total


def cumulative_cash_flow(cash_flows: Iterable[CashFlow], as_of: date) -> float:
    """Net cash flow dated on or before ``as_of``."""
    return net_cash_flow(cash_flows, end=as_of)


def _as_date(point: Any) -> date:
    return point if isinstance(point, date) else point.date


def calculate_projection(
    base_dates: Sequence[Any],
    starting_amount: float,
    daily_rate: float,
    cash_flows: Iterable[CashFlow] = (),
) -> Dict[date, float]:
    """
    Compound a starting amount over a date series while applying cash flows.

    The first value is the starting amount plus every flow dated on or before
    the first date. Each later value is the previous value grown by
    ``(1 + daily_rate) ** business_days`` plus the net flow dated after the
    previous date and up to the current one. Values are never clamped, so a
    large withdrawal may legitimately produce a negative balance.

    Args:
        base_dates: Ascending dates, or records with a ``date`` attribute
        starting_amount: Value on the first date before any cash flow
        daily_rate: Per-business-day compounding rate (decimal)
        cash_flows: Deposits and withdrawals

    Returns:
        Mapping of date to composed value, in input order
    """
    flows: List[CashFlow] = list(cash_flows)
    dates = [_as_date(p) for p in base_dates]
    result: Dict[date, float] = {}
    if not dates:
        return result

    value = starting_amount + cumulative_cash_flow(flows, dates[0])
    result[dates[0]] = value

    for previous, current in zip(dates, dates[1:]):
        business_days = count_business_days(previous, current)
        growth_multiplier = (1 + daily_rate) ** business_days
        value = value * growth_multiplier + net_cash_flow(flows, previous, current)
        result[current] = value

    return result
