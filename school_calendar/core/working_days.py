"""
Working-day calendar logic.

A day is classified by the first rule that decides it:

1. a calendar exception (class-specific before organization-wide),
2. a holiday,
3. the weekly-off policy effective on that day,
4. no policy at all, which falls back to ``uncovered_is_working``.
"""

import logging
from collections import Counter
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from school_calendar.core.dates import DateLike, iter_days, parse_date
from school_calendar.core.exceptions import (
    AmbiguousScopeError,
    InvalidRangeError,
    PolicyOverlapError,
)
from school_calendar.data.schemas import (
    CalendarException,
    CalendarSnapshot,
    DayReason,
    DayStatus,
    Holiday,
    OverrideType,
    SaturdayPattern,
    WeeklyOffPolicy,
    WorkingDayResult,
)

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6

# Ordinals (1-based, within the month) of the Saturdays that are off.
OFF_SATURDAYS = {
    SaturdayPattern.NONE: frozenset(),
    SaturdayPattern.SECOND_ONLY: frozenset({2}),
    SaturdayPattern.SECOND_AND_FOURTH: frozenset({2, 4}),
    SaturdayPattern.ALL: frozenset({1, 2, 3, 4, 5}),
}


def nth_weekday_of_month(day: DateLike) -> int:
    """
    Return the 1-based ordinal of the day's weekday within its month.

    The 9th of March 2024 is the second Saturday of the month, so it returns 2.
    """
    day = parse_date(day)
    return (day.day - 1) // 7 + 1


def weekly_off_reason(day: date, policy: WeeklyOffPolicy) -> Optional[DayReason]:
    """Return why the policy makes the day a weekly off, or None if it does not."""
    weekday = day.weekday()
    if weekday == SUNDAY and policy.sunday_off:
        return DayReason.SUNDAY_OFF
    if weekday == SATURDAY and nth_weekday_of_month(day) in OFF_SATURDAYS[policy.saturday_pattern]:
        return DayReason.SATURDAY_OFF
    return None


def _format_interval(policy: WeeklyOffPolicy) -> str:
    end = policy.effective_to.isoformat() if policy.effective_to else "open"
    return f"[{policy.effective_from.isoformat()}, {end})"


def check_policy_overlaps(policies: Iterable[WeeklyOffPolicy]) -> List[WeeklyOffPolicy]:
    """
    Verify that no two policies share a day.

    Policies with effective_to equal to effective_from cover no day; they are dropped.

    Args:
        policies: Weekly-off policies of a single organization.

    Returns:
        The remaining policies ordered by effective_from.

    Raises:
        PolicyOverlapError: If two effective intervals overlap.
    """
    ordered = sorted(
        (p for p in policies if p.effective_to != p.effective_from),
        key=lambda p: p.effective_from,
    )
    for previous, current in zip(ordered, ordered[1:]):
        if previous.effective_to is None or previous.effective_to > current.effective_from:
            raise PolicyOverlapError(
                f"Weekly-off policies overlap: {_format_interval(previous)} "
                f"and {_format_interval(current)}"
            )
    return ordered


class WorkingDayCalendar:
    """Answers working-day questions over a read-only calendar snapshot."""

    def __init__(
        self,
        policies: Iterable[WeeklyOffPolicy] = (),
        holidays: Iterable[Holiday] = (),
        exceptions: Iterable[CalendarException] = (),
        uncovered_is_working: bool = True,
        organization_id: Optional[str] = None,
    ):
        """
        Initialize the calendar.

        Args:
            policies: Weekly-off policies of the organization.
            holidays: Holiday records of the organization.
            exceptions: Calendar exceptions of the organization.
            uncovered_is_working: Verdict for days no policy covers.
            organization_id: Organization the data belongs to.

        Raises:
            PolicyOverlapError: If two policies overlap.
        """
        self.policies = check_policy_overlaps(policies)
        self.uncovered_is_working = uncovered_is_working
        self.organization_id = organization_id

        self._holidays: Dict[date, List[Holiday]] = {}
        for holiday in holidays:
            self._holidays.setdefault(holiday.holiday_date, []).append(holiday)

        self._exceptions: Dict[date, List[CalendarException]] = {}
        for exception in exceptions:
            self._exceptions.setdefault(exception.exception_date, []).append(exception)

        logger.debug(
            f"Calendar for {organization_id or 'organization'}: {len(self.policies)} policies, "
            f"{sum(map(len, self._holidays.values()))} holidays, "
            f"{sum(map(len, self._exceptions.values()))} exceptions"
        )

    @classmethod
    def from_snapshot(
        cls, snapshot: CalendarSnapshot, uncovered_is_working: bool = True
    ) -> "WorkingDayCalendar":
        """Build a calendar from an organization snapshot."""
        return cls(
            policies=snapshot.policies,
            holidays=snapshot.holidays,
            exceptions=snapshot.exceptions,
            uncovered_is_working=uncovered_is_working,
            organization_id=snapshot.organization_id,
        )

    def effective_policy(self, day: DateLike) -> Optional[WeeklyOffPolicy]:
        """Return the policy effective on the day, if any."""
        day = parse_date(day)
        for policy in self.policies:
            if policy.covers(day):
                return policy
        return None

    def _exception_for(self, day: date, class_id: Optional[str]) -> Optional[CalendarException]:
        candidates = self._exceptions.get(day, [])
        class_specific = [
            e for e in candidates if not e.applies_to_all_classes and e.applies_to(class_id)
        ]
        organization_wide = [e for e in candidates if e.applies_to_all_classes]

        for scoped in (class_specific, organization_wide):
            if not scoped:
                continue
            if len({e.override_type for e in scoped}) > 1:
                scope = f"class {class_id}" if scoped is class_specific else "all classes"
                raise AmbiguousScopeError(
                    f"Conflicting calendar exceptions on {day.isoformat()} for {scope}"
                )
            return scoped[0]
        return None

    def _holiday_for(self, day: date, class_id: Optional[str]) -> Optional[Holiday]:
        for holiday in self._holidays.get(day, []):
            if holiday.applies_to(class_id):
                return holiday
        return None

    def classify(self, day: DateLike, class_id: Optional[str] = None) -> DayStatus:
        """
        Classify a day for the organization or for one class.

        Args:
            day: Day to classify.
            class_id: Class to scope the query to; None for organization-wide records only.

        Returns:
            DayStatus with the verdict and the rule that produced it.
        """
        day = parse_date(day)

        exception = self._exception_for(day, class_id)
        if exception is not None:
            if exception.override_type == OverrideType.FORCE_WORKING:
                return DayStatus(
                    day=day, is_working=True, reason=DayReason.FORCE_WORKING,
                    label=exception.reason or None,
                )
            return DayStatus(
                day=day, is_working=False, reason=DayReason.FORCE_HOLIDAY,
                label=exception.reason or None,
            )

        holiday = self._holiday_for(day, class_id)
        if holiday is not None:
            return DayStatus(
                day=day, is_working=False, reason=DayReason.HOLIDAY,
                label=holiday.name or holiday.type.value,
            )

        policy = self.effective_policy(day)
        if policy is None:
            return DayStatus(day=day, is_working=self.uncovered_is_working, reason=DayReason.NO_POLICY)

        off_reason = weekly_off_reason(day, policy)
        if off_reason is not None:
            return DayStatus(day=day, is_working=False, reason=off_reason)
        return DayStatus(day=day, is_working=True, reason=DayReason.WORKING_DAY)

    def is_working_day(self, day: DateLike, class_id: Optional[str] = None) -> bool:
        """Whether the day is a working day."""
        return self.classify(day, class_id).is_working

    def _parse_range(self, start: DateLike, end: DateLike) -> Tuple[date, date]:
        start_date = parse_date(start)
        end_date = parse_date(end)
        if start_date > end_date:
            raise InvalidRangeError(
                f"End date {end_date.isoformat()} precedes start date {start_date.isoformat()}"
            )
        return start_date, end_date

    def count_working_days(
        self, start: DateLike, end: DateLike, class_id: Optional[str] = None
    ) -> int:
        """
        Count working days from start to end, both inclusive.

        Raises:
            InvalidRangeError: If end precedes start.
        """
        start_date, end_date = self._parse_range(start, end)
        return sum(1 for day in iter_days(start_date, end_date) if self.is_working_day(day, class_id))

    def summarize(
        self, start: DateLike, end: DateLike, class_id: Optional[str] = None
    ) -> WorkingDayResult:
        """
        Classify every day of a range and summarize the result.

        Args:
            start: First day of the range.
            end: Last day of the range.
            class_id: Optional class scope.

        Returns:
            WorkingDayResult with per-day statuses and a count per reason.
        """
        start_date, end_date = self._parse_range(start, end)
        days = [self.classify(day, class_id) for day in iter_days(start_date, end_date)]

        working_days = sum(1 for status in days if status.is_working)
        breakdown = Counter(status.reason.value for status in days)

        warnings = []
        uncovered = [status.day for status in days if status.reason == DayReason.NO_POLICY]
        if uncovered:
            treatment = "working" if self.uncovered_is_working else "non-working"
            warnings.append(
                f"{len(uncovered)} day(s) between {uncovered[0].isoformat()} and "
                f"{uncovered[-1].isoformat()} have no weekly-off policy and were treated as {treatment}."
            )

        return WorkingDayResult(
            organization_id=self.organization_id,
            class_id=class_id,
            start_date=start_date,
            end_date=end_date,
            calendar_days=len(days),
            working_days=working_days,
            non_working_days=len(days) - working_days,
            breakdown=dict(breakdown),
            days=days,
            warnings=warnings,
        )


def is_working_day(
    day: DateLike,
    policies: Iterable[WeeklyOffPolicy],
    holidays: Iterable[Holiday] = (),
    exceptions: Iterable[CalendarException] = (),
    class_id: Optional[str] = None,
    uncovered_is_working: bool = True,
) -> bool:
    """Whether the day is a working day under the given calendar data."""
    calendar = WorkingDayCalendar(policies, holidays, exceptions, uncovered_is_working)
    return calendar.is_working_day(day, class_id)


def count_working_days(
    start: DateLike,
    end: DateLike,
    policies: Iterable[WeeklyOffPolicy],
    holidays: Iterable[Holiday] = (),
    exceptions: Iterable[CalendarException] = (),
    class_id: Optional[str] = None,
    uncovered_is_working: bool = True,
) -> int:
    """Count working days from start to end, both inclusive, under the given calendar data."""
    calendar = WorkingDayCalendar(policies, holidays, exceptions, uncovered_is_working)
    return calendar.count_working_days(start, end, class_id)
