"""
Growth projection generator.

A projection scenario states a percentage gain per interval of business days.
This module turns a scenario into a milestone schedule (the dates on which
compounding actually happens) and a dense, calendar-day projection that
interpolates linearly between milestones on a business-day clock.
"""

from datetime import date
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from .business_calendar import (
    add_business_days,
    count_business_days,
    iter_calendar_days,
)
from .tracker import Milestone, ProjectedDataPoint, ProjectionScenario, TrackerConfig


def daily_rate_from_interval(increase_percent: float, interval_days: int) -> float:
    """
    Convert a per-interval percentage into a per-business-day rate.

    Compounding the returned rate for exactly ``interval_days`` business days
    reproduces ``increase_percent``.

    Args:
        increase_percent: Signed percentage per interval (>= -100)
        interval_days: Business days per interval (>= 1)

    Returns:
        Per-business-day rate as a decimal

    Raises:
        ValueError: If the interval is shorter than a day or the loss exceeds 100%
    """
    if interval_days < 1:
        raise ValueError("Interval days must be >= 1")
    if increase_percent < -100:
        raise ValueError("Increase percent must be >= -100")
    return (1 + increase_percent / 100) ** (1 / interval_days) - 1


def build_milestones(
    scenario: ProjectionScenario,
    start_date: date,
    starting_amount: float,
    end_date: date,
) -> List[Milestone]:
    """
    Build the compounding schedule of a scenario.

    Args:
        scenario: Projection scenario
        start_date: First day of the projection
        starting_amount: Value on the start date
        end_date: Inclusive upper bound for milestone dates

    Returns:
        Milestones ordered by date, starting with ``(start_date, starting_amount, 0)``
    """
    milestones = [
        Milestone(date=start_date, amount=starting_amount, business_day_number=0)
    ]
    growth_factor = 1 + scenario.increase_percent / 100

    while True:
        previous = milestones[-1]
        next_date = add_business_days(previous.date, scenario.interval_days)
        if next_date > end_date:
            break
        milestones.append(
            Milestone(
                date=next_date,
                amount=previous.amount * growth_factor,
                business_day_number=previous.business_day_number
                + scenario.interval_days,
            )
        )

    return milestones


def _interpolate(milestones: List[Milestone], day: date) -> float:
    """Value of the projection on ``day`` given the milestone schedule."""
    index = 0
    for i in range(len(milestones) - 1, -1, -1):
        if day >= milestones[i].date:
            index = i
            break

    current = milestones[index]
    if index + 1 >= len(milestones):
        return current.amount

    following = milestones[index + 1]
    if day == following.date:
        return following.amount

    span = count_business_days(current.date, following.date)
    if span <= 0:
        return current.amount

    progress = count_business_days(current.date, day) / span
    return current.amount + (following.amount - current.amount) * progress


def calculate_projected_values(
    scenario: ProjectionScenario,
    start_date: date,
    starting_amount: float,
    end_date: Optional[date] = None,
) -> List[ProjectedDataPoint]:
    """
    Generate a dense daily projection for a scenario.

    Growth is applied only at milestones; days in between are linearly
    interpolated by business days elapsed since the previous milestone. Days
    after the last reachable milestone stay flat.

    Args:
        scenario: Projection scenario
        start_date: First day of the projection
        starting_amount: Value on the start date
        end_date: Last day of the projection (defaults to one year after start)

    Returns:
        One ProjectedDataPoint per calendar day from start to end inclusive
    """
    end = end_date if end_date is not None else start_date + relativedelta(years=1)
    milestones = build_milestones(scenario, start_date, starting_amount, end)

    return [
        ProjectedDataPoint(
            date=day,
            amount=_interpolate(milestones, day),
            day_number=day_number,
        )
        for day_number, day in enumerate(iter_calendar_days(start_date, end))
    ]


class ProjectionGenerator:
    """Generates projections for every scenario of a tracker."""

    def __init__(self, config: TrackerConfig):
        """Initialize the generator.

        Args:
            config: Tracker configuration holding the scenarios and date span
        """
        self.config = config

    def project(self, scenario: ProjectionScenario) -> List[ProjectedDataPoint]:
        """Project a single scenario over the tracker span."""
        return calculate_projected_values(
            scenario,
            self.config.start_date,
            self.config.starting_amount,
            self.config.end_date,
        )

    def project_all(
        self, visible_only: bool = True
    ) -> Dict[str, List[ProjectedDataPoint]]:
        """Project every (visible) scenario, keyed by scenario id."""
        return {
            scenario.id: self.project(scenario)
            for scenario in self.config.projections
            if scenario.visible or not visible_only
        }
