"""
Holiday utilities: weekend generation, upcoming holidays and public holiday seeding.
"""

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional

import holidays

from school_calendar.core.dates import DateLike, iter_days, parse_date
from school_calendar.core.exceptions import InvalidRangeError
from school_calendar.core.working_days import check_policy_overlaps, weekly_off_reason
from school_calendar.data.schemas import DayReason, Holiday, HolidayType, WeeklyOffPolicy

logger = logging.getLogger(__name__)

WEEKEND_TYPES = frozenset({HolidayType.SUNDAY, HolidayType.SATURDAY})


def is_weekend_holiday(holiday: Holiday) -> bool:
    """Whether the holiday is an auto-generated weekend day."""
    return holiday.type in WEEKEND_TYPES


def sort_holidays(holidays_list: Iterable[Holiday]) -> List[Holiday]:
    return sorted(holidays_list, key=lambda h: h.holiday_date)


def generate_weekend_holidays(
    start: DateLike, end: DateLike, policies: Iterable[WeeklyOffPolicy]
) -> List[Holiday]:
    """
    Generate one holiday record per weekly-off day in a range.

    Days not covered by any policy produce nothing.

    Args:
        start: First day of the range.
        end: Last day of the range.
        policies: Weekly-off policies of the organization.

    Returns:
        SUNDAY and SATURDAY holidays, sorted by date.

    Raises:
        InvalidRangeError: If end precedes start.
        PolicyOverlapError: If two policies overlap.
    """
    start_date, end_date = parse_date(start), parse_date(end)
    if start_date > end_date:
        raise InvalidRangeError(
            f"End date {end_date.isoformat()} precedes start date {start_date.isoformat()}"
        )
    ordered = check_policy_overlaps(policies)

    result = []
    for day in iter_days(start_date, end_date):
        policy = next((p for p in ordered if p.covers(day)), None)
        if policy is None:
            continue
        reason = weekly_off_reason(day, policy)
        if reason == DayReason.SUNDAY_OFF:
            result.append(Holiday(holiday_date=day, type=HolidayType.SUNDAY, name="Sunday"))
        elif reason == DayReason.SATURDAY_OFF:
            result.append(Holiday(holiday_date=day, type=HolidayType.SATURDAY, name="Saturday"))
    return result


def expand_holiday_range(
    start: DateLike,
    end: Optional[DateLike] = None,
    holiday_type: HolidayType = HolidayType.ORGANIZATION_HOLIDAY,
    name: str = "",
    applies_to_all_classes: bool = True,
    class_ids: FrozenSet[str] = frozenset(),
) -> List[Holiday]:
    """
    Expand a multi-day holiday into one record per day.

    The end date defaults to the start date.
    """
    start_date = parse_date(start)
    end_date = parse_date(end) if end is not None else start_date
    if start_date > end_date:
        raise InvalidRangeError(
            f"Holiday end date {end_date.isoformat()} precedes start date {start_date.isoformat()}"
        )
    return [
        Holiday(
            holiday_date=day,
            type=holiday_type,
            name=name,
            applies_to_all_classes=applies_to_all_classes,
            class_ids=class_ids,
        )
        for day in iter_days(start_date, end_date)
    ]


def ongoing_holidays(holidays_list: Iterable[Holiday], on: DateLike) -> List[Holiday]:
    """Non-weekend holidays falling on the given day."""
    day = parse_date(on)
    return sort_holidays(
        h for h in holidays_list if not is_weekend_holiday(h) and h.holiday_date == day
    )


def upcoming_holidays(
    holidays_list: Iterable[Holiday], from_date: DateLike, limit: int = 5
) -> List[Holiday]:
    """The next non-weekend holidays on or after from_date, at most limit of them."""
    start = parse_date(from_date)
    upcoming = [h for h in holidays_list if not is_weekend_holiday(h) and h.holiday_date >= start]
    return sort_holidays(upcoming)[:limit]


class HolidayProvider:
    """Provides public holidays from the holidays library for seeding a calendar."""

    def __init__(
        self,
        country: str = "IN",
        subdivision: Optional[str] = None,
        language: Optional[str] = None,
    ):
        """
        Initialize the holiday provider.

        Args:
            country: ISO country code (e.g., 'IN').
            subdivision: Optional state or province code.
            language: Optional language for holiday names.
        """
        self.country = country
        self.subdivision = subdivision
        self.language = language
        self._cache: Dict[tuple, List[Holiday]] = {}

    def get_holidays_for_year(
        self,
        year: int,
        country: Optional[str] = None,
        subdivision: Optional[str] = None,
    ) -> List[Holiday]:
        """
        Get all public holidays for a year as NATIONAL_HOLIDAY records.

        Args:
            year: Year to get holidays for.
            country: Country code overriding the provider default.
            subdivision: Subdivision code overriding the provider default.

        Returns:
            Holidays sorted by date.

        Raises:
            ValueError: If the country or subdivision is not supported.
        """
        country = (country or self.country).upper()
        subdivision = subdivision or self.subdivision

        cache_key = (country, subdivision, year, self.language)
        if cache_key in self._cache:
            return self._cache[cache_key]

        try:
            public = holidays.country_holidays(
                country, subdiv=subdivision, years=year, language=self.language
            )
        except NotImplementedError as e:
            raise ValueError(f"Public holidays not available for {country}/{subdivision}: {e}") from e

        result = [
            Holiday(holiday_date=day, type=HolidayType.NATIONAL_HOLIDAY, name=name)
            for day, name in sorted(public.items())
        ]
        logger.debug(f"Loaded {len(result)} public holidays for {country} {year}")

        self._cache[cache_key] = result
        return result

    def get_holidays_for_range(
        self,
        start: DateLike,
        end: DateLike,
        country: Optional[str] = None,
        subdivision: Optional[str] = None,
    ) -> List[Holiday]:
        """Get public holidays within a date range, both ends inclusive."""
        start_date, end_date = parse_date(start), parse_date(end)
        if start_date > end_date:
            raise InvalidRangeError(
                f"End date {end_date.isoformat()} precedes start date {start_date.isoformat()}"
            )

        result = []
        for year in range(start_date.year, end_date.year + 1):
            result.extend(
                h
                for h in self.get_holidays_for_year(year, country, subdivision)
                if start_date <= h.holiday_date <= end_date
            )
        return result

    def clear_cache(self) -> None:
        """Clear the holiday cache."""
        self._cache.clear()
