"""
Tracker report service.

This service composes the projection, compositor, estimator and analytics
engines into a single read-only report for one tracker, handling the flow
from raw tracker records through to the series and metrics a chart needs.
"""

import datetime as dt
import logging
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from growth_tracker.models.actual_performance import (
    ActualGrowthRate,
    calculate_actual_average_increase,
    project_actual_trend,
)
from growth_tracker.models.analytics import (
    AnalyticsConfig,
    BestWorstPeriods,
    DrawdownAnalysis,
    PerformanceAnalyzer,
    PerformanceSummary,
    RollingReturnPoint,
    VarianceResult,
    calculate_variance,
)
from growth_tracker.models.cash_flows import calculate_projection
from growth_tracker.models.deposit_schedule import (
    IdFactory,
    generate_scheduled_cash_flows,
    merge_scheduled_cash_flows,
)
from growth_tracker.models.projection import (
    ProjectionGenerator,
    daily_rate_from_interval,
)
from growth_tracker.models.tracker import (
    ActualDataPoint,
    CashFlow,
    ProjectedDataPoint,
    ProjectionScenario,
    Tracker,
    get_latest_actual_value,
)

logger = logging.getLogger(__name__)


class SeriesPoint(BaseModel):
    """A dated value of a derived series."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    amount: float


class ScenarioReport(BaseModel):
    """Projection and comparison results for one scenario."""

    scenario_id: str
    name: Optional[str] = None
    increase_percent: float
    interval_days: int
    daily_rate: float = Field(..., description="Per-business-day rate of the scenario")
    projected: List[ProjectedDataPoint] = Field(default_factory=list)
    projected_with_cash_flows: List[SeriesPoint] = Field(default_factory=list)
    latest_variance: Optional[VarianceResult] = None
    actual_growth: Optional[ActualGrowthRate] = None
    actual_trend: List[SeriesPoint] = Field(default_factory=list)


class TrackerReport(BaseModel):
    """Everything derived from one tracker."""

    tracker_id: str
    cash_flows: List[CashFlow] = Field(default_factory=list)
    latest_actual: Optional[ActualDataPoint] = None
    scenarios: List[ScenarioReport] = Field(default_factory=list)
    summary: PerformanceSummary
    drawdown: DrawdownAnalysis
    rolling_returns: Dict[int, List[RollingReturnPoint]] = Field(default_factory=dict)
    best_worst: BestWorstPeriods
    days_remaining: Optional[int] = Field(
        None, description="Calendar days from as_of to the tracker end"
    )


def _to_series(values: Dict[date, float]) -> List[SeriesPoint]:
    return [SeriesPoint(date=d, amount=v) for d, v in values.items()]


class TrackerService:
    """Service for building tracker reports."""

    def __init__(
        self,
        analytics_config: Optional[AnalyticsConfig] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        """Initialize the tracker service.

        Args:
            analytics_config: Analytics settings (risk-free rate, windows, ...)
            id_factory: Identifier source for scheduled cash flows
        """
        self.analyzer = PerformanceAnalyzer(analytics_config)
        self.id_factory = id_factory
        self.logger = logging.getLogger(__name__)

    def effective_cash_flows(self, tracker: Tracker) -> List[CashFlow]:
        """Manual cash flows merged with the expanded deposit schedule."""
        schedule = tracker.config.deposit_schedule
        if schedule is None:
            return sorted(tracker.cash_flows, key=lambda cf: cf.date)

        scheduled = generate_scheduled_cash_flows(
            schedule,
            tracker.config.start_date,
            tracker.config.end_date,
            id_factory=self.id_factory,
        )
        return merge_scheduled_cash_flows(tracker.cash_flows, scheduled)

    def build_scenario_report(
        self,
        tracker: Tracker,
        scenario: ProjectionScenario,
        projected: List[ProjectedDataPoint],
        cash_flows: List[CashFlow],
    ) -> ScenarioReport:
        """Compose projections and comparisons for one scenario."""
        daily_rate = daily_rate_from_interval(
            scenario.increase_percent, scenario.interval_days
        )
        with_cash_flows = calculate_projection(
            projected, tracker.config.starting_amount, daily_rate, cash_flows
        )

        latest = get_latest_actual_value(tracker.actual_data)
        latest_variance = None
        if latest is not None:
            base = next((p for p in projected if p.date == latest.date), None)
            if base is not None:
                latest_variance = calculate_variance(
                    base.amount, latest.amount, latest.date, cash_flows
                )

        actual_growth = calculate_actual_average_increase(
            tracker.actual_data, scenario.interval_days, cash_flows
        )
        actual_trend: Dict[date, float] = {}
        if actual_growth is not None:
            actual_trend = project_actual_trend(
                tracker.actual_data, projected, actual_growth.daily_rate, cash_flows
            )

        return ScenarioReport(
            scenario_id=scenario.id,
            name=scenario.name,
            increase_percent=scenario.increase_percent,
            interval_days=scenario.interval_days,
            daily_rate=daily_rate,
            projected=projected,
            projected_with_cash_flows=_to_series(with_cash_flows),
            latest_variance=latest_variance,
            actual_growth=actual_growth,
            actual_trend=_to_series(actual_trend),
        )

    def build_report(self, tracker: Tracker, as_of: Optional[date] = None) -> TrackerReport:
        """Build the full report for a tracker.

        Args:
            tracker: Tracker records
            as_of: Reference date for the days-remaining figure (caller's clock)

        Returns:
            TrackerReport with per-scenario series and summary metrics
        """
        config = tracker.config
        self.logger.info(
            f"Building report for tracker {config.id} with "
            f"{len(tracker.actual_data)} actual points"
        )

        cash_flows = self.effective_cash_flows(tracker)
        generator = ProjectionGenerator(config)
        visible = [s for s in config.projections if s.visible]

        scenario_reports = [
            self.build_scenario_report(
                tracker, scenario, generator.project(scenario), cash_flows
            )
            for scenario in visible
        ]

        comparison: List[ProjectedDataPoint] = []
        if scenario_reports:
            first = scenario_reports[0]
            comparison = [
                ProjectedDataPoint(date=p.date, amount=p.amount, day_number=i)
                for i, p in enumerate(first.projected_with_cash_flows)
            ]

        days_remaining = None
        if as_of is not None:
            days_remaining = max((config.end_date - as_of).days, 0)

        report = TrackerReport(
            tracker_id=config.id,
            cash_flows=cash_flows,
            latest_actual=get_latest_actual_value(tracker.actual_data),
            scenarios=scenario_reports,
            summary=self.analyzer.summary(tracker.actual_data, comparison, cash_flows),
            drawdown=self.analyzer.drawdown(tracker.actual_data, cash_flows),
            rolling_returns=self.analyzer.rolling_returns(
                tracker.actual_data, cash_flows
            ),
            best_worst=self.analyzer.best_worst(tracker.actual_data, cash_flows),
            days_remaining=days_remaining,
        )

        self.logger.info(
            f"Completed report for tracker {config.id}: "
            f"{len(scenario_reports)} scenarios"
        )
        return report
