"""
Variance and risk analytics for growth trackers.

This module compares actual account values against projections and derives
risk metrics from the actual series: cash-flow-adjusted returns, drawdown,
volatility, Sharpe ratio, rolling returns, best/worst monthly periods and win
rate. Every metric neutralizes deposits and withdrawals so capital movements
are never reported as performance.
"""

import datetime as dt
import logging
import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field

from .cash_flows import cumulative_cash_flow, net_cash_flow
from .tracker import (
    ActualDataPoint,
    CashFlow,
    DrawdownPeriod,
    PerformancePeriod,
    ProjectedDataPoint,
    sort_by_date,
)

logger = logging.getLogger(__name__)

DEFAULT_ROLLING_WINDOWS = (30, 60, 90)
TRADING_DAYS_PER_YEAR = 252
DAYS_PER_YEAR = 365.25


class VarianceResult(BaseModel):
    """Difference between an actual value and its cash-flow-inclusive projection."""

    model_config = ConfigDict(frozen=True)

    projected_with_cash_flows: float
    absolute: float
    percentage: float


class RollingReturnPoint(BaseModel):
    """Trailing-window return recorded against the later snapshot date."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    return_pct: float


class DrawdownAnalysis(BaseModel):
    """Drawdown statistics of a cash-flow-neutralized actual series."""

    model_config = ConfigDict(frozen=True)

    max_drawdown: float = Field(default=0.0, ge=0)
    max_drawdown_start_date: Optional[date] = None
    max_drawdown_end_date: Optional[date] = None
    current_drawdown: float = Field(default=0.0, ge=0)
    drawdown_periods: List[DrawdownPeriod] = Field(default_factory=list)


class VolatilityResult(BaseModel):
    """Sample volatility of step returns."""

    model_config = ConfigDict(frozen=True)

    volatility: float = 0.0
    annualized_volatility: float = 0.0
    returns: List[float] = Field(default_factory=list)


class BestWorstPeriods(BaseModel):
    """Top and bottom monthly periods."""

    model_config = ConfigDict(frozen=True)

    best: List[PerformancePeriod] = Field(default_factory=list)
    worst: List[PerformancePeriod] = Field(default_factory=list)


class WinRateResult(BaseModel):
    """How often the actual value met or beat the projection."""

    model_config = ConfigDict(frozen=True)

    win_rate: float = Field(default=0.0, description="Percentage of wins")
    wins: int = 0
    losses: int = 0
    total: int = 0


class PerformanceSummary(BaseModel):
    """Scalar summary metrics of a tracker."""

    model_config = ConfigDict(frozen=True)

    total_return: float = 0.0
    annualized_return: float = 0.0
    volatility: float = Field(default=0.0, description="Annualized volatility")
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0
    current_drawdown: float = 0.0
    win_rate: float = 0.0
    best_month: Optional[PerformancePeriod] = None
    worst_month: Optional[PerformancePeriod] = None


class AnalyticsConfig(BaseModel):
    """Configuration for performance analytics."""

    risk_free_rate: float = Field(
        default=0.0, description="Risk-free return per step, in percent"
    )
    rolling_windows: List[int] = Field(
        default=list(DEFAULT_ROLLING_WINDOWS),
        description="Rolling return lookback windows in calendar days",
    )
    volatility_period_steps: int = Field(
        default=30, ge=0, description="Most recent step returns used (0 = all)"
    )
    top_n: int = Field(default=5, ge=1, description="Best/worst periods reported")
    trading_days_per_year: int = Field(
        default=TRADING_DAYS_PER_YEAR, gt=0, description="Annualization factor base"
    )


def calculate_variance(
    projected: float,
    actual: float,
    on_date: date,
    cash_flows: Iterable[CashFlow] = (),
) -> VarianceResult:
    """
    Compare an actual value to a base projection on a date.

    Args:
        projected: Base projected value (growth only)
        actual: Actual account value (includes cash flows)
        on_date: Date of the comparison
        cash_flows: Deposits and withdrawals

    Returns:
        VarianceResult with the cash-flow-inclusive projection
    """
    projected_with_cash_flows = projected + cumulative_cash_flow(cash_flows, on_date)
    absolute = actual - projected_with_cash_flows
    percentage = (
        absolute / projected_with_cash_flows * 100
        if projected_with_cash_flows > 0
        else 0.0
    )
    return VarianceResult(
        projected_with_cash_flows=projected_with_cash_flows,
        absolute=absolute,
        percentage=percentage,
    )


def calculate_return(
    start_value: float,
    end_value: float,
    cash_flows: Iterable[CashFlow],
    start_date: date,
    end_date: date,
) -> float:
    """
    Cash-flow-adjusted return between two dated values, in percent.

    Flows dated after ``start_date`` and up to ``end_date`` are added to the
    starting value before measuring growth.

    Returns:
        Return in percent, 0 when the adjusted start value is not positive
    """
    adjusted_start = start_value + net_cash_flow(cash_flows, start_date, end_date)
    if adjusted_start <= 0:
        return 0.0
    return (end_value - adjusted_start) / adjusted_start * 100


def calculate_annualized_return(
    start_value: float,
    end_value: float,
    start_date: date,
    end_date: date,
    cash_flows: Iterable[CashFlow] = (),
) -> float:
    """Annualize the cash-flow-adjusted return over the calendar span."""
    days = (end_date - start_date).days
    if days <= 0 or start_value <= 0:
        return 0.0

    total_return = calculate_return(
        start_value, end_value, cash_flows, start_date, end_date
    )
    growth_factor = 1 + total_return / 100
    if growth_factor <= 0:
        return 0.0

    years = days / DAYS_PER_YEAR
    try:
        return (growth_factor ** (1 / years) - 1) * 100
    except OverflowError:
        logger.debug(
            f"Annualized return overflows for growth {growth_factor} over {days} days"
        )
        return 0.0


def calculate_drawdown(
    actual_data: Iterable[ActualDataPoint], cash_flows: Iterable[CashFlow] = ()
) -> DrawdownAnalysis:
    """
    Analyze drawdowns of the cash-flow-neutralized actual series.

    Each value has its cumulative net cash flow removed before it is compared
    with the running peak, so a deposit never ends a drawdown and a withdrawal
    never starts one.

    Args:
        actual_data: Account snapshots
        cash_flows: Deposits and withdrawals

    Returns:
        DrawdownAnalysis with maximum, current and per-period drawdowns
    """
    points = sort_by_date(actual_data)
    if not points:
        return DrawdownAnalysis()

    flows = list(cash_flows)
    neutralized = [
        (p.date, p.amount - cumulative_cash_flow(flows, p.date)) for p in points
    ]

    peak_date, peak = neutralized[0]
    max_drawdown = 0.0
    max_start: Optional[date] = None
    max_end: Optional[date] = None
    periods: List[DrawdownPeriod] = []
    open_start: Optional[date] = None
    open_depth = 0.0

    for point_date, value in neutralized:
        if value > peak:
            if open_start is not None:
                periods.append(
                    DrawdownPeriod(
                        start_date=open_start,
                        end_date=point_date,
                        drawdown=open_depth,
                        recovered=True,
                    )
                )
                open_start = None
                open_depth = 0.0
            peak, peak_date = value, point_date
            continue

        drawdown = (peak - value) / peak * 100 if peak > 0 else 0.0
        if drawdown > 0 and open_start is None:
            open_start = peak_date
            open_depth = drawdown
        elif open_start is not None:
            open_depth = max(open_depth, drawdown)

        if drawdown > max_drawdown:
            max_drawdown = drawdown
            max_start, max_end = peak_date, point_date

    if open_start is not None:
        periods.append(
            DrawdownPeriod(
                start_date=open_start, end_date=None, drawdown=open_depth
            )
        )

    last_value = neutralized[-1][1]
    current = (peak - last_value) / peak * 100 if peak > 0 and peak > last_value else 0.0

    return DrawdownAnalysis(
        max_drawdown=max_drawdown,
        max_drawdown_start_date=max_start,
        max_drawdown_end_date=max_end,
        current_drawdown=current,
        drawdown_periods=periods,
    )


def _find_last_on_or_before(
    points: Sequence[ActualDataPoint], target: date
) -> Optional[ActualDataPoint]:
    for point in reversed(points):
        if point.date <= target:
            return point
    return None


def calculate_rolling_returns(
    actual_data: Iterable[ActualDataPoint],
    cash_flows: Iterable[CashFlow] = (),
    windows: Iterable[int] = DEFAULT_ROLLING_WINDOWS,
) -> Dict[int, List[RollingReturnPoint]]:
    """
    Compute trailing-window returns for each snapshot.

    For every snapshot the latest earlier snapshot at or before
    ``date - window`` is the anchor; snapshots without an anchor are skipped.

    Returns:
        One sparse series per window, keyed by window length in days
    """
    windows = list(windows)
    points = sort_by_date(actual_data)
    flows = list(cash_flows)
    results: Dict[int, List[RollingReturnPoint]] = {w: [] for w in windows}
    if len(points) < 2:
        return results

    for window in windows:
        for point in points:
            anchor = _find_last_on_or_before(
                points, point.date - timedelta(days=window)
            )
            if anchor is None or anchor.date >= point.date:
                continue
            results[window].append(
                RollingReturnPoint(
                    date=point.date,
                    return_pct=calculate_return(
                        anchor.amount, point.amount, flows, anchor.date, point.date
                    ),
                )
            )

    return results


def _step_returns(
    points: Sequence[ActualDataPoint], cash_flows: Sequence[CashFlow]
) -> List[float]:
    return [
        calculate_return(prev.amount, cur.amount, cash_flows, prev.date, cur.date)
        for prev, cur in zip(points, points[1:])
    ]


def calculate_volatility(
    actual_data: Iterable[ActualDataPoint],
    cash_flows: Iterable[CashFlow] = (),
    period_steps: int = 30,
    trading_days_per_year: int = TRADING_DAYS_PER_YEAR,
) -> VolatilityResult:
    """
    Sample standard deviation of step-wise cash-flow-adjusted returns.

    Args:
        actual_data: Account snapshots
        cash_flows: Deposits and withdrawals
        period_steps: Keep only the most recent N step returns (0 keeps all)
        trading_days_per_year: Annualization base

    Returns:
        VolatilityResult; zeros when fewer than two step returns exist
    """
    points = sort_by_date(actual_data)
    if len(points) < 2:
        return VolatilityResult()

    returns = _step_returns(points, list(cash_flows))
    if period_steps > 0 and len(returns) > period_steps:
        returns = returns[-period_steps:]

    if len(returns) < 2:
        return VolatilityResult(returns=returns)

    volatility = float(np.std(np.asarray(returns, dtype=np.float64), ddof=1))
    return VolatilityResult(
        volatility=volatility,
        annualized_volatility=volatility * math.sqrt(trading_days_per_year),
        returns=returns,
    )


def calculate_sharpe_ratio(
    mean_return: float, volatility: float, risk_free_rate: float = 0.0
) -> float:
    """Excess mean return per unit of volatility, 0 when volatility is 0."""
    if volatility == 0:
        return 0.0
    return (mean_return - risk_free_rate) / volatility


def _month_starts(first: date, last: date) -> List[date]:
    months = []
    current = first.replace(day=1)
    while current <= last:
        months.append(current)
        current += relativedelta(months=1)
    return months


def get_best_worst_periods(
    actual_data: Iterable[ActualDataPoint],
    cash_flows: Iterable[CashFlow] = (),
    top_n: int = 5,
) -> BestWorstPeriods:
    """
    Rank calendar months by cash-flow-adjusted return.

    The first observed month has no earlier anchor and is skipped. For each
    later month the anchor is the last snapshot at or before the month start
    (or the first one after it) and the end is the last snapshot at or before
    the month end.

    Returns:
        The ``top_n`` best months (descending) and worst months (ascending)
    """
    points = sort_by_date(actual_data)
    if len(points) < 2:
        return BestWorstPeriods()

    flows = list(cash_flows)
    monthly: List[PerformancePeriod] = []

    for month_start in _month_starts(points[0].date, points[-1].date)[1:]:
        month_end = month_start + relativedelta(months=1, days=-1)
        start_point = _find_last_on_or_before(points, month_start) or next(
            (p for p in points if p.date >= month_start), None
        )
        end_point = _find_last_on_or_before(points, month_end)
        if start_point is None or end_point is None:
            continue
        if start_point.date >= end_point.date:
            continue

        monthly.append(
            PerformancePeriod(
                start_date=month_start,
                end_date=month_end,
                return_pct=calculate_return(
                    start_point.amount,
                    end_point.amount,
                    flows,
                    start_point.date,
                    end_point.date,
                ),
                duration=(end_point.date - start_point.date).days,
            )
        )

    ranked = sorted(monthly, key=lambda p: p.return_pct, reverse=True)
    return BestWorstPeriods(
        best=ranked[:top_n], worst=list(reversed(ranked[-top_n:]))
    )


def calculate_win_rate(
    actual_data: Iterable[ActualDataPoint],
    projected_data: Iterable[ProjectedDataPoint],
) -> WinRateResult:
    """Share of actual dates, with a projected value, where actual >= projected."""
    projected_by_date = {p.date: p.amount for p in projected_data}
    wins = losses = 0
    for actual in actual_data:
        projected = projected_by_date.get(actual.date)
        if projected is None:
            continue
        if actual.amount >= projected:
            wins += 1
        else:
            losses += 1

    total = wins + losses
    return WinRateResult(
        win_rate=wins / total * 100 if total > 0 else 0.0,
        wins=wins,
        losses=losses,
        total=total,
    )


def calculate_performance_summary(
    actual_data: Iterable[ActualDataPoint],
    projected_data: Iterable[ProjectedDataPoint] = (),
    cash_flows: Iterable[CashFlow] = (),
    risk_free_rate: float = 0.0,
    trading_days_per_year: int = TRADING_DAYS_PER_YEAR,
) -> PerformanceSummary:
    """
    Summarize performance of an actual series.

    Args:
        actual_data: Account snapshots
        projected_data: Projection to compute the win rate against (optional)
        cash_flows: Deposits and withdrawals
        risk_free_rate: Risk-free return per step, in percent
        trading_days_per_year: Annualization base for volatility

    Returns:
        PerformanceSummary; all zeros when there is no actual data
    """
    points = sort_by_date(actual_data)
    if not points:
        logger.debug("No actual data points, empty performance summary")
        return PerformanceSummary()

    flows = list(cash_flows)
    projected = list(projected_data)
    first, last = points[0], points[-1]

    volatility = calculate_volatility(
        points, flows, period_steps=0, trading_days_per_year=trading_days_per_year
    )
    mean_return = float(np.mean(volatility.returns)) if volatility.returns else 0.0
    drawdown = calculate_drawdown(points, flows)
    win_rate = calculate_win_rate(points, projected) if projected else WinRateResult()
    periods = get_best_worst_periods(points, flows, top_n=1)

    return PerformanceSummary(
        total_return=calculate_return(
            first.amount, last.amount, flows, first.date, last.date
        ),
        annualized_return=calculate_annualized_return(
            first.amount, last.amount, first.date, last.date, flows
        ),
        volatility=volatility.annualized_volatility,
        sharpe_ratio=calculate_sharpe_ratio(
            mean_return, volatility.volatility, risk_free_rate
        ),
        max_drawdown=drawdown.max_drawdown,
        current_drawdown=drawdown.current_drawdown,
        win_rate=win_rate.win_rate,
        best_month=periods.best[0] if periods.best else None,
        worst_month=periods.worst[0] if periods.worst else None,
    )


class PerformanceAnalyzer:
    """Calculator bundling the analytics for one configuration."""

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        """Initialize the analyzer.

        Args:
            config: Analytics configuration
        """
        self.config = config or AnalyticsConfig()

    def summary(
        self,
        actual_data: Sequence[ActualDataPoint],
        projected_data: Sequence[ProjectedDataPoint] = (),
        cash_flows: Sequence[CashFlow] = (),
    ) -> PerformanceSummary:
        return calculate_performance_summary(
            actual_data,
            projected_data,
            cash_flows,
            risk_free_rate=self.config.risk_free_rate,
            trading_days_per_year=self.config.trading_days_per_year,
        )

    def drawdown(
        self, actual_data: Sequence[ActualDataPoint], cash_flows: Sequence[CashFlow] = ()
    ) -> DrawdownAnalysis:
        return calculate_drawdown(actual_data, cash_flows)

    def rolling_returns(
        self, actual_data: Sequence[ActualDataPoint], cash_flows: Sequence[CashFlow] = ()
    ) -> Dict[int, List[RollingReturnPoint]]:
        return calculate_rolling_returns(
            actual_data, cash_flows, self.config.rolling_windows
        )

    def volatility(
        self, actual_data: Sequence[ActualDataPoint], cash_flows: Sequence[CashFlow] = ()
    ) -> VolatilityResult:
        return calculate_volatility(
            actual_data,
            cash_flows,
            period_steps=self.config.volatility_period_steps,
            trading_days_per_year=self.config.trading_days_per_year,
        )

    def best_worst(
        self, actual_data: Sequence[ActualDataPoint], cash_flows: Sequence[CashFlow] = ()
    ) -> BestWorstPeriods:
        return get_best_worst_periods(actual_data, cash_flows, self.config.top_n)
