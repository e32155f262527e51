"""
Data models and schemas for the school calendar.
"""

from school_calendar.data.schemas import (
    CalendarException,
    CalendarSnapshot,
    Config,
    DayReason,
    DayStatus,
    Holiday,
    HolidayType,
    LeaveAllocation,
    LeaveQuote,
    OverrideType,
    SaturdayPattern,
    WeeklyOffPolicy,
    WorkingDayResult,
)

__all__ = [
    "CalendarException",
    "CalendarSnapshot",
    "Config",
    "DayReason",
    "DayStatus",
    "Holiday",
    "HolidayType",
    "LeaveAllocation",
    "LeaveQuote",
    "OverrideType",
    "SaturdayPattern",
    "WeeklyOffPolicy",
    "WorkingDayResult",
]
