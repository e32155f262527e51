"""
Tests for holiday utilities and the public holiday provider.
"""

from datetime import date

import pytest

from school_calendar.core.exceptions import InvalidRangeError, PolicyOverlapError
from school_calendar.core.holiday_provider import (
    HolidayProvider,
    expand_holiday_range,
    generate_weekend_holidays,
    ongoing_holidays,
    upcoming_holidays,
)
from school_calendar.data.schemas import Holiday, HolidayType, SaturdayPattern, WeeklyOffPolicy


@pytest.fixture
def policy():
    return WeeklyOffPolicy(
        saturday_pattern=SaturdayPattern.SECOND_AND_FOURTH, effective_from=date(2024, 1, 1)
    )


@pytest.fixture
def holiday_provider():
    """Create a holiday provider for India."""
    return HolidayProvider(country="IN")


class TestWeekendGeneration:
    """Tests for generate_weekend_holidays."""

    def test_march_2024(self, policy):
        """Five Sundays and the 2nd and 4th Saturdays."""
        weekends = generate_weekend_holidays("2024-03-01", "2024-03-31", [policy])
        sundays = [h.holiday_date.day for h in weekends if h.type == HolidayType.SUNDAY]
        saturdays = [h.holiday_date.day for h in weekends if h.type == HolidayType.SATURDAY]
        assert sundays == [3, 10, 17, 24, 31]
        assert saturdays == [9, 23]
        assert [h.holiday_date for h in weekends] == sorted(h.holiday_date for h in weekends)

    def test_uncovered_days_generate_nothing(self, policy):
        assert generate_weekend_holidays("2023-12-01", "2023-12-31", [policy]) == []

    def test_reversed_range(self, policy):
        with pytest.raises(InvalidRangeError):
            generate_weekend_holidays("2024-03-31", "2024-03-01", [policy])

    def test_overlapping_policies(self, policy):
        with pytest.raises(PolicyOverlapError):
            generate_weekend_holidays(
                "2024-03-01", "2024-03-31",
                [policy, WeeklyOffPolicy(effective_from=date(2024, 2, 1))],
            )


class TestHolidayRanges:
    """Tests for range expansion and holiday listings."""

    def test_expand_range(self):
        expanded = expand_holiday_range(
            "2024-10-10", "2024-10-12", holiday_type=HolidayType.FESTIVAL, name="Dussehra"
        )
        assert [h.holiday_date.day for h in expanded] == [10, 11, 12]
        assert all(h.name == "Dussehra" for h in expanded)

    def test_single_day_default(self):
        assert len(expand_holiday_range(date(2024, 1, 26))) == 1

    def test_reversed_holiday_range(self):
        with pytest.raises(InvalidRangeError):
            expand_holiday_range("2024-10-12", "2024-10-10")

    def test_upcoming_skips_weekends(self, policy):
        holiday_list = generate_weekend_holidays("2024-03-01", "2024-03-31", [policy]) + [
            Holiday(holiday_date=date(2024, 3, 26), name="Holi day 2"),
            Holiday(holiday_date=date(2024, 3, 25), name="Holi"),
            Holiday(holiday_date=date(2024, 3, 8), name="Maha Shivaratri"),
        ]
        upcoming = upcoming_holidays(holiday_list, "2024-03-10", limit=1)
        assert [h.name for h in upcoming] == ["Holi"]
        assert len(upcoming_holidays(holiday_list, "2024-03-01")) == 3

    def test_ongoing(self):
        holiday_list = [
            Holiday(holiday_date=date(2024, 3, 25), name="Holi"),
            Holiday(holiday_date=date(2024, 3, 24), type=HolidayType.SUNDAY, name="Sunday"),
        ]
        assert [h.name for h in ongoing_holidays(holiday_list, "2024-03-25")] == ["Holi"]
        assert ongoing_holidays(holiday_list, "2024-03-24") == []


class TestHolidayProvider:
    """Tests for public holidays from the holidays library."""

    def test_india_2024(self, holiday_provider):
        """National holidays are included."""
        public = holiday_provider.get_holidays_for_year(2024)
        dates = {h.holiday_date for h in public}
        assert date(2024, 1, 26) in dates   # Republic Day
        assert date(2024, 8, 15) in dates   # Independence Day
        assert date(2024, 10, 2) in dates   # Gandhi Jayanti
        assert all(h.type == HolidayType.NATIONAL_HOLIDAY for h in public)

    def test_cached(self, holiday_provider):
        first = holiday_provider.get_holidays_for_year(2024)
        assert holiday_provider.get_holidays_for_year(2024) is first
        holiday_provider.clear_cache()
        assert holiday_provider.get_holidays_for_year(2024) is not first

    def test_range_spans_years(self, holiday_provider):
        public = holiday_provider.get_holidays_for_range("2024-12-01", "2025-01-31")
        dates = {h.holiday_date for h in public}
        assert date(2025, 1, 26) in dates
        assert all(date(2024, 12, 1) <= d <= date(2025, 1, 31) for d in dates)

    def test_unknown_country(self, holiday_provider):
        with pytest.raises(ValueError):
            holiday_provider.get_holidays_for_year(2024, country="XX")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
