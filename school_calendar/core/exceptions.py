"""
Typed errors raised by the school calendar.
"""


class CalendarError(ValueError):
    """Base exception for calendar rule violations and bad inputs."""

    code = "calendar_error"


class InvalidDateError(CalendarError):
    """Raised when a date value cannot be parsed or does not exist."""

    code = "invalid_date"


class InvalidRangeError(CalendarError):
    """Raised when a range ends before it starts."""

    code = "invalid_range"


class PolicyOverlapError(CalendarError):
    """Raised when two weekly-off policies claim overlapping intervals."""

    code = "policy_overlap"


class AmbiguousScopeError(CalendarError):
    """Raised when records of the same scope disagree about a date."""

    code = "ambiguous_scope"


class AllocationNotFoundError(CalendarError):
    """Raised when no leave allocation matches a request."""

    code = "allocation_not_found"


class SnapshotError(CalendarError):
    """Raised when calendar data cannot be loaded."""

    code = "invalid_snapshot"
