"""
Pytest configuration and shared fixtures for the growth tracker tests.
"""

from datetime import date

import pytest

from growth_tracker import create_app
from growth_tracker.config import reset_global_settings
from growth_tracker.models.tracker import (
    ActualDataPoint,
    CashFlow,
    ProjectionScenario,
    TrackerConfig,
)


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Provide a valid SECRET_KEY and a fresh global settings instance."""
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    reset_global_settings()
    yield
    reset_global_settings()


@pytest.fixture
def app():
    """Create a Flask application configured for testing."""
    return create_app("testing")


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def scenario():
    """10% every 5 business days."""
    return ProjectionScenario(
        id="base", name="Base", increase_percent=10.0, interval_days=5
    )


@pytest.fixture
def tracker_config(scenario):
    """Tracker spanning February 2024 (Presidents Day falls on Feb 19)."""
    return TrackerConfig(
        id="tracker-1",
        name="Brokerage",
        starting_amount=10000.0,
        start_date=date(2024, 2, 5),
        end_date=date(2024, 2, 29),
        projections=[
            scenario,
            ProjectionScenario(
                id="hidden",
                name="Hidden",
                increase_percent=5.0,
                interval_days=10,
                visible=False,
            ),
        ],
    )


@pytest.fixture
def make_deposit():
    """Factory for manual deposits."""

    def _make(day, amount, flow_id="dep"):
        return CashFlow(id=flow_id, date=day, amount=amount, type="deposit")

    return _make


@pytest.fixture
def make_withdrawal():
    """Factory for manual withdrawals."""

    def _make(day, amount, flow_id="wd"):
        return CashFlow(id=flow_id, date=day, amount=amount, type="withdrawal")

    return _make


@pytest.fixture
def make_series():
    """Build actual data points from (date, amount) pairs."""

    def _make(pairs):
        return [ActualDataPoint(date=d, amount=a) for d, a in pairs]

    return _make
