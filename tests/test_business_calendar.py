"""
Tests for the business-day calendar.
"""

from datetime import date, timedelta

import pytest

from growth_tracker.models.business_calendar import (
    add_business_days,
    count_business_days,
    is_business_day,
    is_market_holiday,
    iter_calendar_days,
    market_holidays,
    observed,
)


class TestMarketHolidays:
    """Test the holiday table."""

    def test_holidays_2024(self):
        """Test the full 2024 table, where no holiday needs shifting."""
        assert market_holidays(2024) == frozenset(
            {
                date(2024, 1, 1),
                date(2024, 1, 15),  # MLK Day
                date(2024, 2, 19),  # Presidents Day
                date(2024, 3, 29),  # Good Friday
                date(2024, 5, 27),  # Memorial Day
                date(2024, 6, 19),
                date(2024, 7, 4),
                date(2024, 9, 2),  # Labor Day
                date(2024, 11, 28),  # Thanksgiving
                date(2024, 12, 25),
            }
        )

    def test_floating_holidays_2025(self):
        """Test weekday-rule holidays in a different year."""
        holidays = market_holidays(2025)

        assert date(2025, 1, 20) in holidays
        assert date(2025, 2, 17) in holidays
        assert date(2025, 4, 18) in holidays
        assert date(2025, 5, 26) in holidays
        assert date(2025, 9, 1) in holidays
        assert date(2025, 11, 27) in holidays

    def test_memorial_day_on_may_31(self):
        """Test Memorial Day when May 31 is itself a Monday."""
        assert date(2021, 5, 31) in market_holidays(2021)

    def test_saturday_holiday_observed_friday(self):
        """Test Independence Day 2026 (a Saturday) is observed on Friday."""
        assert is_market_holiday(date(2026, 7, 3))
        assert not is_market_holiday(date(2026, 7, 4))

    def test_sunday_holiday_observed_monday(self):
        """Test Sunday holidays shift to the following Monday."""
        assert is_market_holiday(date(2022, 12, 26))
        assert is_market_holiday(date(2022, 6, 20))

    def test_new_year_observed_in_previous_year(self):
        """Test a Saturday New Year's Day is observed on December 31."""
        assert date(2021, 12, 31) in market_holidays(2021)
        assert date(2021, 12, 31) not in market_holidays(2022)
        assert not is_business_day(date(2021, 12, 31))

    def test_observed(self):
        """Test weekend shifting of a single date."""
        assert observed(date(2026, 7, 4)) == date(2026, 7, 3)
        assert observed(date(2022, 12, 25)) == date(2022, 12, 26)
        assert observed(date(2024, 12, 25)) == date(2024, 12, 25)


class TestIsBusinessDay:
    """Test business day classification."""

    def test_weekdays(self):
        """Test ordinary weekdays are business days."""
        for day in range(5, 10):
            assert is_business_day(date(2024, 2, day))

    def test_weekend(self):
        """Test weekends are not business days."""
        assert not is_business_day(date(2024, 2, 10))
        assert not is_business_day(date(2024, 2, 11))

    def test_holiday(self):
        """Test a weekday holiday is not a business day."""
        assert not is_business_day(date(2024, 2, 19))
        assert not is_business_day(date(2024, 3, 29))


class TestCountBusinessDays:
    """Test business day counting."""

    def test_same_day(self):
        """Test counting from a day to itself."""
        d = date(2024, 2, 7)
        assert count_business_days(d, d) == 0

    def test_end_before_start(self):
        """Test a reversed range counts zero."""
        assert count_business_days(date(2024, 2, 9), date(2024, 2, 5)) == 0

    def test_start_exclusive_end_inclusive(self):
        """Test the start is excluded and the end included."""
        assert count_business_days(date(2024, 2, 5), date(2024, 2, 6)) == 1
        assert count_business_days(date(2024, 2, 4), date(2024, 2, 10)) == 5

    def test_over_weekend(self):
        """Test Friday to Monday is a single business day."""
        assert count_business_days(date(2024, 1, 5), date(2024, 1, 8)) == 1

    def test_over_holiday_and_weekend(self):
        """Test New Year 2024 plus the preceding weekend are skipped."""
        assert count_business_days(date(2023, 12, 29), date(2024, 1, 2)) == 1

    def test_full_year(self):
        """Test 2024 has 252 business days."""
        assert count_business_days(date(2023, 12, 31), date(2024, 12, 31)) == 252


class TestAddBusinessDays:
    """Test business day stepping."""

    def test_zero(self):
        """Test adding zero returns the input unchanged, even on a weekend."""
        saturday = date(2024, 2, 10)
        assert add_business_days(saturday, 0) == saturday

    def test_from_weekend(self):
        """Test the starting weekend day is not counted."""
        assert add_business_days(date(2024, 1, 6), 1) == date(2024, 1, 8)

    def test_skips_holiday(self):
        """Test MLK Day is skipped."""
        assert add_business_days(date(2024, 1, 12), 1) == date(2024, 1, 16)

    def test_five_days_across_presidents_day(self):
        """Test five business days from Feb 12, 2024 land on Feb 20."""
        assert add_business_days(date(2024, 2, 12), 5) == date(2024, 2, 20)

    def test_negative_raises(self):
        """Test negative counts are rejected."""
        with pytest.raises(ValueError):
            add_business_days(date(2024, 2, 5), -1)

    def test_never_lands_on_non_business_day(self):
        """Test results are always business days."""
        start = date(2024, 11, 20)
        for offset in range(14):
            for n in range(1, 12):
                result = add_business_days(start + timedelta(days=offset), n)
                assert is_business_day(result)

    def test_inverse_of_count(self):
        """Test counting back over the added span gives n."""
        start = date(2024, 12, 20)
        for n in range(0, 15):
            assert count_business_days(start, add_business_days(start, n)) == n


class TestIterCalendarDays:
    """Test calendar day iteration."""

    def test_inclusive(self):
        """Test both bounds are included."""
        days = list(iter_calendar_days(date(2024, 2, 27), date(2024, 3, 1)))

        assert days == [
            date(2024, 2, 27),
            date(2024, 2, 28),
            date(2024, 2, 29),
            date(2024, 3, 1),
        ]

    def test_empty_when_reversed(self):
        """Test a reversed range yields nothing."""
        assert list(iter_calendar_days(date(2024, 3, 1), date(2024, 2, 1))) == []
