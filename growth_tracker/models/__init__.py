"""Projection and performance-analytics engine for growth trackers."""

from .tracker import (
    ActualDataPoint,
    CashFlow,
    DepositSchedule,
    DrawdownPeriod,
    Milestone,
    PerformancePeriod,
    ProjectedDataPoint,
    ProjectionScenario,
    Tracker,
    TrackerConfig,
    get_latest_actual_value,
    normalize_actual_data,
    upsert_actual_data_point,
)
from .business_calendar import (
    add_business_days,
    count_business_days,
    is_business_day,
    market_holidays,
)
from .projection import (
    ProjectionGenerator,
    build_milestones,
    calculate_projected_values,
    daily_rate_from_interval,
)
from .cash_flows import calculate_projection, cumulative_cash_flow, net_cash_flow
from .actual_performance import (
    ActualGrowthRate,
    calculate_actual_average_increase,
    project_actual_trend,
)
from .analytics import (
    AnalyticsConfig,
    DrawdownAnalysis,
    PerformanceAnalyzer,
    PerformanceSummary,
    calculate_annualized_return,
    calculate_drawdown,
    calculate_performance_summary,
    calculate_return,
    calculate_rolling_returns,
    calculate_sharpe_ratio,
    calculate_variance,
    calculate_volatility,
    calculate_win_rate,
    get_best_worst_periods,
)
from .deposit_schedule import generate_scheduled_cash_flows, merge_scheduled_cash_flows

__all__ = [
    "ActualDataPoint",
    "CashFlow",
    "DepositSchedule",
    "DrawdownPeriod",
    "Milestone",
    "PerformancePeriod",
    "ProjectedDataPoint",
    "ProjectionScenario",
    "Tracker",
    "TrackerConfig",
    "get_latest_actual_value",
    "normalize_actual_data",
    "upsert_actual_data_point",
    "add_business_days",
    "count_business_days",
    "is_business_day",
    "market_holidays",
    "ProjectionGenerator",
    "build_milestones",
    "calculate_projected_values",
    "daily_rate_from_interval",
    "calculate_projection",
    "cumulative_cash_flow",
    "net_cash_flow",
    "ActualGrowthRate",
    "calculate_actual_average_increase",
    "project_actual_trend",
    "AnalyticsConfig",
    "DrawdownAnalysis",
    "PerformanceAnalyzer",
    "PerformanceSummary",
    "calculate_annualized_return",
    "calculate_drawdown",
    "calculate_performance_summary",
    "calculate_return",
    "calculate_rolling_returns",
    "calculate_sharpe_ratio",
    "calculate_variance",
    "calculate_volatility",
    "calculate_win_rate",
    "get_best_worst_periods",
    "generate_scheduled_cash_flows",
    "merge_scheduled_cash_flows",
]
