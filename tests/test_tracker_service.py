"""
Tests for the tracker report service.
"""

import itertools
import logging
from datetime import date

import pytest

from growth_tracker.models.analytics import AnalyticsConfig, PerformanceSummary
from growth_tracker.models.tracker import (
    ActualDataPoint,
    CashFlow,
    DepositSchedule,
    Tracker,
)
from growth_tracker.services.tracker_service import TrackerReport, TrackerService


def _counter_ids():
    counter = itertools.count(1)
    return lambda: f"sched-{next(counter)}"


def _series_by_date(series):
    return {p.date: p.amount for p in series}


@pytest.fixture
def tracker(tracker_config):
    return Tracker(
        config=tracker_config,
        actual_data=[
            ActualDataPoint(date=date(2024, 2, 5), amount=10000),
            ActualDataPoint(date=date(2024, 2, 12), amount=11100),
        ],
    )


class TestTrackerService:
    """Test report composition."""

    def test_report_structure(self, tracker):
        """Test the report covers visible scenarios only."""
        report = TrackerService().build_report(tracker)

        assert isinstance(report, TrackerReport)
        assert report.tracker_id == "tracker-1"
        assert [s.scenario_id for s in report.scenarios] == ["base"]
        assert report.latest_actual.date == date(2024, 2, 12)
        assert report.days_remaining is None

    def test_scenario_series(self, tracker):
        """Test projected series and the cash-flow-inclusive composition."""
        scenario = TrackerService().build_report(tracker).scenarios[0]

        assert len(scenario.projected) == 25
        assert len(scenario.projected_with_cash_flows) == 25
        assert scenario.daily_rate == pytest.approx(0.019245, abs=1e-6)
        composed = _series_by_date(scenario.projected_with_cash_flows)
        assert composed[date(2024, 2, 5)] == 10000.0
        assert composed[date(2024, 2, 12)] == pytest.approx(11000.0)

    def test_variance_and_actual_growth(self, tracker):
        """Test the latest variance and realized rate."""
        scenario = TrackerService().build_report(tracker).scenarios[0]

        assert scenario.latest_variance.absolute == pytest.approx(100.0)
        assert scenario.latest_variance.percentage == pytest.approx(100 / 110)
        assert scenario.actual_growth.interval_percentage == pytest.approx(11.0)
        assert scenario.actual_trend[0].date == date(2024, 2, 12)
        assert scenario.actual_trend[0].amount == pytest.approx(11100.0)
        assert scenario.actual_trend[-1].date == date(2024, 2, 29)

    def test_summary_metrics(self, tracker):
        """Test summary metrics use the composed projection for the win rate."""
        report = TrackerService().build_report(tracker)

        assert report.summary.total_return == pytest.approx(11.0)
        assert report.summary.win_rate == pytest.approx(100.0)
        assert report.drawdown.max_drawdown == 0.0
        assert set(report.rolling_returns) == {30, 60, 90}

    def test_days_remaining(self, tracker):
        """Test the injected reference date drives days remaining."""
        service = TrackerService()

        assert service.build_report(tracker, as_of=date(2024, 2, 19)).days_remaining == 10
        assert service.build_report(tracker, as_of=date(2024, 3, 15)).days_remaining == 0

    def test_deposit_schedule_is_expanded(self, tracker, tracker_config):
        """Test scheduled deposits replace stale ones and flow into projections."""
        config = tracker_config.model_copy(
            update={
                "deposit_schedule": DepositSchedule(
                    enabled=True, frequency="weekly", amount=100.0
                )
            }
        )
        stale = CashFlow(
            id="stale",
            date=date(2024, 2, 7),
            amount=999,
            type="deposit",
            source="scheduled",
        )
        tracker = Tracker(
            config=config, actual_data=tracker.actual_data, cash_flows=[stale]
        )

        report = TrackerService(id_factory=_counter_ids()).build_report(tracker)

        assert [(cf.id, cf.date) for cf in report.cash_flows] == [
            ("sched-1", date(2024, 2, 12)),
            ("sched-2", date(2024, 2, 19)),
            ("sched-3", date(2024, 2, 26)),
        ]
        scenario = report.scenarios[0]
        composed = _series_by_date(scenario.projected_with_cash_flows)
        assert composed[date(2024, 2, 12)] == pytest.approx(11100.0)
        assert scenario.latest_variance.projected_with_cash_flows == pytest.approx(
            11100.0
        )

    def test_empty_actual_data(self, tracker_config):
        """Test a new tracker without snapshots."""
        report = TrackerService().build_report(Tracker(config=tracker_config))

        assert report.latest_actual is None
        assert report.summary == PerformanceSummary()
        scenario = report.scenarios[0]
        assert scenario.latest_variance is None
        assert scenario.actual_growth is None
        assert scenario.actual_trend == []

    def test_analytics_config(self, tracker):
        """Test analytics settings reach the analyzer."""
        service = TrackerService(AnalyticsConfig(rolling_windows=[14]))

        assert set(service.build_report(tracker).rolling_returns) == {14}

    def test_logs_progress(self, tracker, caplog):
        """Test report building is logged."""
        with caplog.at_level(logging.INFO):
            TrackerService().build_report(tracker)

        assert "Building report for tracker tracker-1" in caplog.text
        assert "Completed report for tracker tracker-1" in caplog.text
