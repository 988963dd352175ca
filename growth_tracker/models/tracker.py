"""
Pydantic models for growth trackers.

This module defines the records a tracker is made of (projection scenarios,
actual account snapshots, cash flows and deposit schedules) together with the
derived records the engine produces. All models are frozen: the engine treats
every input as immutable and always returns new objects.
"""

import datetime as dt
from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProjectionScenario(BaseModel):
    """A hand-modeled growth assumption: a percentage per interval of business days."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Scenario identifier")
    name: Optional[str] = Field(None, description="Display name")
    increase_percent: float = Field(
        ..., ge=-100, description="Signed percentage applied once per interval"
    )
    interval_days: int = Field(
        ..., ge=1, description="Business days between compounding events"
    )
    visible: bool = Field(default=True, description="Whether the scenario is shown")


class ActualDataPoint(BaseModel):
    """A realized account value on a given date."""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(..., description="Snapshot date")
    amount: float = Field(..., description="Account value on that date")
    source: Optional[Literal["manual", "brokerage"]] = Field(
        None, description="Where the snapshot came from"
    )


class CashFlow(BaseModel):
    """A deposit into or withdrawal from the tracked account."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Cash flow identifier")
    date: dt.date = Field(..., description="Date the flow takes effect")
    amount: float = Field(..., ge=0, description="Magnitude of the flow")
    type: Literal["deposit", "withdrawal"] = Field(..., description="Flow direction")
    source: Optional[Literal["manual", "scheduled"]] = Field(
        None, description="Manually entered or generated from a schedule"
    )

    @property
    def signed_amount(self) -> float:
        """Deposits count positive, withdrawals negative."""
        return self.amount if self.type == "deposit" else -self.amount


class DepositSchedule(BaseModel):
    """Recurring deposit configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Whether the schedule is active")
    frequency: Literal["daily", "weekly", "biweekly", "monthly"] = Field(
        default="monthly", description="How often a deposit is made"
    )
    amount: float = Field(default=0.0, description="Amount of each deposit")
    start_date: Optional[dt.date] = Field(
        None, description="Schedule start (defaults to the tracker start)"
    )
    end_date: Optional[dt.date] = Field(
        None, description="Schedule end (defaults to the tracker end)"
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "DepositSchedule":
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.end_date < self.start_date
        ):
            raise ValueError("Schedule end date must be >= start date")
        return self


class TrackerConfig(BaseModel):
    """Static configuration of a tracker."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Tracker identifier")
    name: str = Field(default="", description="Tracker name")
    starting_amount: float = Field(..., description="Value on the start date")
    start_date: dt.date = Field(..., description="First day of the tracker")
    end_date: dt.date = Field(..., description="Last day of the tracker (inclusive)")
    projections: List[ProjectionScenario] = Field(
        default_factory=list, description="Projection scenarios"
    )
    deposit_schedule: Optional[DepositSchedule] = Field(
        None, description="Optional recurring deposits"
    )

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v, info):
        start = info.data.get("start_date")
        if start is not None and v < start:
            raise ValueError("End date must be >= start date")
        return v


class Tracker(BaseModel):
    """A tracker with its actual snapshots and cash flows."""

    model_config = ConfigDict(frozen=True)

    config: TrackerConfig
    actual_data: List[ActualDataPoint] = Field(default_factory=list)
    cash_flows: List[CashFlow] = Field(default_factory=list)

    @field_validator("cash_flows", mode="before")
    @classmethod
    def default_cash_flows(cls, v):
        # Older payloads omit cash flows entirely
        return [] if v is None else v

    @field_validator("actual_data", mode="before")
    @classmethod
    def default_actual_data(cls, v):
        return [] if v is None else v

    @field_validator("actual_data")
    @classmethod
    def collapse_duplicate_dates(cls, v: List[ActualDataPoint]) -> List[ActualDataPoint]:
        return normalize_actual_data(v)


class Milestone(BaseModel):
    """A date on which a projection scenario compounds."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    amount: float
    business_day_number: int = Field(..., ge=0)


class ProjectedDataPoint(BaseModel):
    """One point of a dense daily projection."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    amount: float
    day_number: int = Field(..., ge=0, description="Calendar days since start")


class DrawdownPeriod(BaseModel):
    """A decline from a peak, closed once a new peak is set."""

    model_config = ConfigDict(frozen=True)

    start_date: dt.date = Field(..., description="Date of the peak")
    end_date: Optional[dt.date] = Field(None, description="Recovery date, None if ongoing")
    drawdown: float = Field(..., ge=0, description="Deepest decline in percent")
    recovered: bool = Field(default=False)


class PerformancePeriod(BaseModel):
    """Cash-flow-adjusted return over a calendar month."""

    model_config = ConfigDict(frozen=True)

    start_date: dt.date
    end_date: dt.date
    return_pct: float = Field(..., description="Return in percent")
    duration: int = Field(..., ge=0, description="Days between the anchor snapshots")


def sort_by_date(points: Iterable[ActualDataPoint]) -> List[ActualDataPoint]:
    """Return the points ordered by date (stable for equal dates)."""
    return sorted(points, key=lambda p: p.date)


def normalize_actual_data(points: Iterable[ActualDataPoint]) -> List[ActualDataPoint]:
    """Collapse duplicate dates, keeping the last write, and sort ascending."""
    by_date = {}
    for point in points:
        by_date[point.date] = point
    return sort_by_date(by_date.values())


def upsert_actual_data_point(
    points: Iterable[ActualDataPoint], point: ActualDataPoint
) -> List[ActualDataPoint]:
    """
    Insert a snapshot, replacing any existing snapshot on the same date.

    Args:
        points: Existing snapshots
        point: New snapshot

    Returns:
        A new date-sorted list; the input is left untouched
    """
    kept = [p for p in points if p.date != point.date]
    kept.append(point)
    return sort_by_date(kept)


def get_latest_actual_value(
    points: Iterable[ActualDataPoint],
) -> Optional[ActualDataPoint]:
    """Get the snapshot with the latest date, or None when there are none."""
    latest: Optional[ActualDataPoint] = None
    for point in points:
        if latest is None or point.date >= latest.date:
            latest = point
    return latest
