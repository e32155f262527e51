"""
Core business logic for working-day calculation.
"""

from school_calendar.core.exceptions import (
    AllocationNotFoundError,
    AmbiguousScopeError,
    CalendarError,
    InvalidDateError,
    InvalidRangeError,
    PolicyOverlapError,
    SnapshotError,
)
from school_calendar.core.holiday_provider import HolidayProvider, generate_weekend_holidays
from school_calendar.core.leave import LeaveCalculator, carry_forward, find_allocation
from school_calendar.core.working_days import (
    WorkingDayCalendar,
    count_working_days,
    is_working_day,
    nth_weekday_of_month,
)

__all__ = [
    "AllocationNotFoundError",
    "AmbiguousScopeError",
    "CalendarError",
    "HolidayProvider",
    "InvalidDateError",
    "InvalidRangeError",
    "LeaveCalculator",
    "PolicyOverlapError",
    "SnapshotError",
    "WorkingDayCalendar",
    "carry_forward",
    "count_working_days",
    "find_allocation",
    "generate_weekend_holidays",
    "is_working_day",
    "nth_weekday_of_month",
]
