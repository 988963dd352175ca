"""
Business-day calendar for growth projections.

This module classifies dates as tradeable or not (weekends and recognized
market holidays are not) and provides the business-day counting and stepping
primitives every projection and rate estimate is built on.
"""

from datetime import date, timedelta
from functools import lru_cache
from typing import FrozenSet, Iterator

from dateutil.easter import easter
from dateutil.relativedelta import MO, TH, relativedelta

SATURDAY = 5
SUNDAY = 6


def observed(holiday: date) -> date:
    """Shift a weekend holiday to the weekday it is observed on."""
    if holiday.weekday() == SATURDAY:
        return holiday - timedelta(days=1)
    if holiday.weekday() == SUNDAY:
        return holiday + timedelta(days=1)
    return holiday


@lru_cache(maxsize=None)
def market_holidays(year: int) -> FrozenSet[date]:
    """
    Get the observed market holidays that fall in a calendar year.

    Args:
        year: Calendar year

    Returns:
        Frozen set of holiday dates observed within ``year``
    """
    candidates = [
        observed(date(year, 1, 1)),
        # New Year's Day of the next year can be observed on December 31
        observed(date(year + 1, 1, 1)),
        date(year, 1, 1) + relativedelta(weekday=MO(+3)),  # MLK Day
        date(year, 2, 1) + relativedelta(weekday=MO(+3)),  # Presidents Day
        easter(year) - timedelta(days=2),  # Good Friday
        date(year, 5, 31) + relativedelta(weekday=MO(-1)),  # Memorial Day
        observed(date(year, 6, 19)),
        observed(date(year, 7, 4)),
        date(year, 9, 1) + relativedelta(weekday=MO(+1)),  # Labor Day
        date(year, 11, 1) + relativedelta(weekday=TH(+4)),  # Thanksgiving
        observed(date(year, 12, 25)),
    ]
    return frozenset(d for d in candidates if d.year == year)


def is_market_holiday(d: date) -> bool:
    """Check whether a date is an observed market holiday."""
    return d in market_holidays(d.year)


def is_business_day(d: date) -> bool:
    """Check whether a date is a weekday that is not a market holiday."""
    return d.weekday() < SATURDAY and not is_market_holiday(d)


def count_business_days(start: date, end: date) -> int:
    """
    Count business days strictly after ``start`` up to and including ``end``.

    Args:
        start: Exclusive lower bound
        end: Inclusive upper bound

    Returns:
        Number of business days elapsed, 0 when ``end <= start``
    """
    count = 0
    current = start + timedelta(days=1)
    while current <= end:
        if is_business_day(current):
            count += 1
        current += timedelta(days=1)
    return count


def add_business_days(d: date, business_days: int) -> date:
    """
    Advance a date by a number of business days.

    The starting date is never counted, so starting on a weekend or holiday
    lands on the n-th business day after it.

    Args:
        d: Starting date
        business_days: Number of business days to advance (>= 0)

    Returns:
        The resulting date, ``d`` itself when ``business_days`` is 0

    Raises:
        ValueError: If ``business_days`` is negative
    """
    if business_days < 0:
        raise ValueError("Business days to add must be >= 0")

    result = d
    added = 0
    while added < business_days:
        result += timedelta(days=1)
        if is_business_day(result):
            added += 1
    return result


def iter_calendar_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
