"""
Leave allocation rules and chargeable leave days.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from school_calendar.core.dates import DateLike, parse_date
from school_calendar.core.exceptions import (
    AllocationNotFoundError,
    AmbiguousScopeError,
    InvalidRangeError,
)
from school_calendar.core.working_days import WorkingDayCalendar
from school_calendar.data.schemas import LeaveAllocation, LeaveQuote

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

HALF_DAY = Decimal("0.5")


def _to_decimal(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def find_allocation(
    allocations: Iterable[LeaveAllocation],
    leave_type: str,
    role_id: str,
    on: DateLike,
) -> LeaveAllocation:
    """
    Find the allocation of a leave type that applies to a role on a day.

    A role-specific allocation wins over one that applies to all roles.

    Raises:
        AllocationNotFoundError: If nothing matches.
        AmbiguousScopeError: If two allocations of the same scope match.
    """
    day = parse_date(on)
    matching = [
        a for a in allocations
        if a.leave_type == leave_type and a.covers(day) and a.applies_to_role(role_id)
    ]
    role_specific = [a for a in matching if not a.applies_to_all_roles]
    all_roles = [a for a in matching if a.applies_to_all_roles]

    for scoped in (role_specific, all_roles):
        if len(scoped) > 1:
            raise AmbiguousScopeError(
                f"{len(scoped)} '{leave_type}' allocations apply to role {role_id} on {day.isoformat()}"
            )
        if scoped:
            return scoped[0]

    raise AllocationNotFoundError(
        f"No '{leave_type}' allocation applies to role {role_id} on {day.isoformat()}"
    )


def carry_forward(allocation: LeaveAllocation, unused_days: Number) -> Decimal:
    """Days carried into the next period: unused days capped at max_carry_forward_days."""
    unused = max(_to_decimal(unused_days), Decimal("0"))
    return min(unused, allocation.max_carry_forward_days)


class LeaveCalculator:
    """Computes the chargeable duration of leave requests."""

    def __init__(self, calendar: WorkingDayCalendar):
        self.calendar = calendar

    def chargeable_days(
        self,
        start: DateLike,
        end: DateLike,
        class_id: Optional[str] = None,
        is_half_day: bool = False,
    ) -> Decimal:
        """
        Working days a leave request from start to end would consume.

        A half-day request charges 0.5 and must cover a single working day.

        Raises:
            InvalidRangeError: If a half-day request spans several days or a non-working day.
        """
        start_date, end_date = parse_date(start), parse_date(end)
        if not is_half_day:
            return Decimal(self.calendar.count_working_days(start_date, end_date, class_id))

        if start_date != end_date:
            raise InvalidRangeError(
                f"Half-day leave must start and end on the same day, "
                f"got {start_date.isoformat()} to {end_date.isoformat()}"
            )
        if not self.calendar.is_working_day(start_date, class_id):
            raise InvalidRangeError(f"Half-day leave on {start_date.isoformat()}, which is not a working day")
        return HALF_DAY

    def quote(
        self,
        allocations: Iterable[LeaveAllocation],
        leave_type: str,
        role_id: str,
        start: DateLike,
        end: DateLike,
        used_days: Number = 0,
        carried_forward_days: Number = 0,
        class_id: Optional[str] = None,
        pending_days: Number = 0,
        is_half_day: bool = False,
    ) -> LeaveQuote:
        """
        Price a leave request against the allocation effective on its start date.

        Args:
            allocations: Leave allocations of the organization.
            leave_type: Requested leave type.
            role_id: Role of the applicant.
            start: First day of leave.
            end: Last day of leave.
            used_days: Days of this leave type already taken in the period.
            carried_forward_days: Days carried in from the previous period.
            class_id: Optional class scope for the working-day count.
            pending_days: Days requested but not yet approved.
            is_half_day: Whether the request is for half of a single working day.

        Returns:
            LeaveQuote with chargeable and remaining days.
        """
        start_date, end_date = parse_date(start), parse_date(end)
        chargeable = self.chargeable_days(start_date, end_date, class_id, is_half_day)
        allocation = find_allocation(allocations, leave_type, role_id, start_date)

        carried = carry_forward(allocation, carried_forward_days)
        used = _to_decimal(used_days)
        pending = _to_decimal(pending_days)
        available = allocation.total_days + carried - used - pending
        remaining = available - chargeable

        logger.debug(
            f"Leave quote {leave_type}/{role_id} {start_date}..{end_date}: "
            f"{chargeable} chargeable, {available} available"
        )

        return LeaveQuote(
            leave_type=leave_type,
            role_id=role_id,
            start_date=start_date,
            end_date=end_date,
            is_half_day=is_half_day,
            chargeable_days=chargeable,
            allocated_days=allocation.total_days,
            carried_forward_days=carried,
            used_days=used,
            pending_days=pending,
            available_days=available,
            remaining_days=remaining,
            sufficient=remaining >= 0,
        )
