"""
Data models for the school calendar using Pydantic.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class SaturdayPattern(str, Enum):
    """Which Saturdays of a month are off."""

    NONE = "NONE"
    SECOND_ONLY = "SECOND_ONLY"
    SECOND_AND_FOURTH = "SECOND_AND_FOURTH"
    ALL = "ALL"


class HolidayType(str, Enum):
    """Holiday categories used by the organization calendar."""

    SUNDAY = "SUNDAY"
    SATURDAY = "SATURDAY"
    SECOND_SATURDAY = "SECOND_SATURDAY"
    NATIONAL_HOLIDAY = "NATIONAL_HOLIDAY"
    FESTIVAL = "FESTIVAL"
    ORGANIZATION_HOLIDAY = "ORGANIZATION_HOLIDAY"
    OTHER = "OTHER"


class OverrideType(str, Enum):
    """Direction of a calendar exception."""

    FORCE_WORKING = "FORCE_WORKING"
    FORCE_HOLIDAY = "FORCE_HOLIDAY"


class DayReason(str, Enum):
    """Rule that decided a day's classification."""

    FORCE_WORKING = "FORCE_WORKING"
    FORCE_HOLIDAY = "FORCE_HOLIDAY"
    HOLIDAY = "HOLIDAY"
    SUNDAY_OFF = "SUNDAY_OFF"
    SATURDAY_OFF = "SATURDAY_OFF"
    WORKING_DAY = "WORKING_DAY"
    NO_POLICY = "NO_POLICY"


class WeeklyOffPolicy(BaseModel):
    """Recurring weekly-off rule, effective over [effective_from, effective_to)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sunday_off: bool = Field(default=True, description="Whether Sundays are off")
    saturday_pattern: SaturdayPattern = Field(
        default=SaturdayPattern.NONE,
        validation_alias=AliasChoices("saturday_pattern", "saturday_off_pattern"),
        description="Which Saturdays are off",
    )
    effective_from: date = Field(..., description="First day the policy applies")
    effective_to: Optional[date] = Field(
        default=None, description="First day the policy no longer applies (open-ended if None)"
    )

    @field_validator("effective_to")
    @classmethod
    def validate_interval(cls, v: Optional[date], info) -> Optional[date]:
        """Ensure effective_to is not before effective_from; equal dates cover no day."""
        if v is not None and "effective_from" in info.data and v < info.data["effective_from"]:
            raise ValueError("effective_to must not be before effective_from")
        return v

    def covers(self, day: date) -> bool:
        """Whether the policy is effective on the given day."""
        if day < self.effective_from:
            return False
        return self.effective_to is None or day < self.effective_to


class ClassScoped(BaseModel):
    """Base for records that apply to all classes or to a set of classes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    applies_to_all_classes: bool = Field(
        default=True,
        validation_alias=AliasChoices("applies_to_all_classes", "is_applicable_to_all_classes"),
        description="Whether the record applies to every class",
    )
    class_ids: FrozenSet[str] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("class_ids", "classes"),
        description="Classes the record applies to when not organization-wide",
    )

    @model_validator(mode="after")
    def validate_scope(self):
        if not self.applies_to_all_classes and not self.class_ids:
            raise ValueError("Either apply to all classes or select at least one class")
        return self

    def applies_to(self, class_id: Optional[str]) -> bool:
        """Whether the record is in scope for a class (None means organization-level)."""
        if self.applies_to_all_classes:
            return True
        return class_id is not None and class_id in self.class_ids


class Holiday(ClassScoped):
    """A named non-working date."""

    holiday_date: date = Field(
        ...,
        validation_alias=AliasChoices("holiday_date", "date"),
        description="Date of the holiday",
    )
    type: HolidayType = Field(
        default=HolidayType.ORGANIZATION_HOLIDAY,
        validation_alias=AliasChoices("type", "holiday_type"),
        description="Holiday category",
    )
    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "description"),
        description="Display name of the holiday",
    )


class CalendarException(ClassScoped):
    """Per-date override forcing a day to be working or non-working."""

    exception_date: date = Field(
        ...,
        validation_alias=AliasChoices("exception_date", "date"),
        description="Date the override applies to",
    )
    override_type: OverrideType = Field(..., description="FORCE_WORKING or FORCE_HOLIDAY")
    reason: str = Field(default="", description="Why the override exists")


class LeaveAllocation(BaseModel):
    """Days of one leave type a role is entitled to per period."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    leave_type: str = Field(..., min_length=1, description="Leave type identifier")
    name: Optional[str] = Field(default=None, max_length=100, description="Display name")
    total_days: Decimal = Field(..., ge=Decimal("0.5"), le=Decimal("365"), description="Allocated days")
    max_carry_forward_days: Decimal = Field(
        default=Decimal("0"), ge=Decimal("0"), le=Decimal("365"), description="Carry-forward cap"
    )
    applies_to_all_roles: bool = Field(default=False, description="Whether every role is entitled")
    role_ids: FrozenSet[str] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("role_ids", "roles"),
        description="Roles entitled when not applying to all roles",
    )
    effective_from: Optional[date] = Field(default=None, description="First effective day")
    effective_to: Optional[date] = Field(default=None, description="First day no longer effective")

    @model_validator(mode="after")
    def validate_rules(self):
        if not self.applies_to_all_roles and not self.role_ids:
            raise ValueError("Either enable 'applies to all roles' or select at least one role")
        if self.max_carry_forward_days > self.total_days:
            raise ValueError("Carry forward days cannot exceed total allocated days")
        if self.effective_from and self.effective_to and self.effective_to <= self.effective_from:
            raise ValueError("effective_to must be after effective_from")
        return self

    def covers(self, day: date) -> bool:
        """Whether the allocation is effective on the given day."""
        if self.effective_from is not None and day < self.effective_from:
            return False
        return self.effective_to is None or day < self.effective_to

    def applies_to_role(self, role_id: str) -> bool:
        return self.applies_to_all_roles or role_id in self.role_ids


class CalendarSnapshot(BaseModel):
    """Read-only calendar data of one organization."""

    model_config = ConfigDict(frozen=True)

    organization_id: Optional[str] = Field(default=None, description="Organization the data belongs to")
    policies: List[WeeklyOffPolicy] = Field(default_factory=list)
    holidays: List[Holiday] = Field(default_factory=list)
    exceptions: List[CalendarException] = Field(default_factory=list)
    leave_allocations: List[LeaveAllocation] = Field(default_factory=list)


class DayStatus(BaseModel):
    """Classification of a single day."""

    day: date
    is_working: bool
    reason: DayReason
    label: Optional[str] = Field(default=None, description="Holiday name or exception reason")


class WorkingDayResult(BaseModel):
    """Complete result of a working-day range query."""

    organization_id: Optional[str] = Field(default=None)
    class_id: Optional[str] = Field(default=None)
    start_date: date = Field(..., description="Start date of the period")
    end_date: date = Field(..., description="End date of the period")
    calendar_days: int = Field(..., ge=1, description="Total calendar days in range")
    working_days: int = Field(..., ge=0, description="Working days in range")
    non_working_days: int = Field(..., ge=0, description="Non-working days in range")
    breakdown: Dict[str, int] = Field(default_factory=dict, description="Day count per reason")
    days: List[DayStatus] = Field(default_factory=list)
    calculation_timestamp: datetime = Field(
        default_factory=datetime.now, description="When the calculation was performed"
    )
    warnings: List[str] = Field(default_factory=list, description="Any warnings generated")


class LeaveQuote(BaseModel):
    """Chargeable duration of a leave request against an allocation."""

    leave_type: str
    role_id: str
    start_date: date
    end_date: date
    is_half_day: bool = False
    chargeable_days: Decimal = Field(..., ge=0)
    allocated_days: Decimal
    carried_forward_days: Decimal
    used_days: Decimal
    pending_days: Decimal = Decimal("0")
    available_days: Decimal
    remaining_days: Decimal
    sufficient: bool


class Config(BaseModel):
    """Configuration for the school calendar."""

    uncovered_day_is_working: bool = Field(
        default=True, description="Treat days without a weekly-off policy as working"
    )
    holiday_country: str = Field(default="IN", description="Country code for public holidays")
    holiday_subdivision: Optional[str] = Field(default=None, description="Subdivision code for public holidays")
    holiday_language: Optional[str] = Field(default=None, description="Language for holiday names")
    output_format: str = Field(default="json", description="Default output format: json or csv")
    output_directory: str = Field(default="results", description="Directory for output files")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API server port")
    log_level: str = Field(default="INFO", description="Logging level")
