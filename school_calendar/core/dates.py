"""
Date parsing and iteration helpers.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Union

from school_calendar.core.exceptions import InvalidDateError

DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y"]

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    """
    Parse a date from a date, datetime or string in one of DATE_FORMATS.

    Raises:
        InvalidDateError: If the value is not a date or names a day that does not exist.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        raise InvalidDateError(
            f"Invalid date: {value!r}. Use YYYY-MM-DD, DD-MM-YYYY, or DD/MM/YYYY"
        )
    raise InvalidDateError(f"Unsupported date value: {value!r}")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
