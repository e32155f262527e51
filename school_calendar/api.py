"""
FastAPI REST API for the school calendar.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from school_calendar import __version__
from school_calendar.config.manager import ConfigManager
from school_calendar.core.exceptions import (
    AllocationNotFoundError,
    AmbiguousScopeError,
    CalendarError,
    InvalidDateError,
    InvalidRangeError,
    PolicyOverlapError,
    SnapshotError,
)
from school_calendar.core.holiday_provider import HolidayProvider
from school_calendar.core.leave import LeaveCalculator
from school_calendar.core.working_days import WorkingDayCalendar
from school_calendar.data.loader import SnapshotLoader
from school_calendar.data.schemas import DayStatus, Holiday, LeaveQuote, WorkingDayResult

logger = logging.getLogger(__name__)

# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()

# Initialize components
holiday_provider = HolidayProvider(
    country=config.holiday_country,
    subdivision=config.holiday_subdivision,
    language=config.holiday_language,
)

ERROR_STATUS = {
    InvalidDateError: 400,
    InvalidRangeError: 400,
    PolicyOverlapError: 409,
    AmbiguousScopeError: 409,
    AllocationNotFoundError: 404,
    SnapshotError: 422,
}


# API Models
class WorkingDayRequest(BaseModel):
    """Request model for classifying a single day."""

    calendar: Dict[str, Any] = Field(..., description="Organization calendar snapshot")
    day: str = Field(..., alias="date", description="Date to classify")
    class_id: Optional[str] = Field(None, description="Class scope (default: organization-wide)")


class CountRequest(BaseModel):
    """Request model for counting working days."""

    calendar: Dict[str, Any] = Field(..., description="Organization calendar snapshot")
    start_date: str = Field(..., description="Start date of the period")
    end_date: str = Field(..., description="End date of the period")
    class_id: Optional[str] = Field(None, description="Class scope (default: organization-wide)")
    include_days: bool = Field(False, description="Include the per-day classification")


class LeaveQuoteRequest(BaseModel):
    """Request model for quoting a leave request."""

    calendar: Dict[str, Any] = Field(..., description="Organization calendar snapshot with leave allocations")
    leave_type: str
    role_id: str
    start_date: str
    end_date: str
    used_days: Decimal = Field(Decimal("0"), ge=0)
    carried_forward_days: Decimal = Field(Decimal("0"), ge=0)
    pending_days: Decimal = Field(Decimal("0"), ge=0, description="Days awaiting approval")
    is_half_day: bool = Field(False, description="Half of a single working day")
    class_id: Optional[str] = None


def build_calendar(calendar_data: Dict[str, Any]) -> WorkingDayCalendar:
    snapshot = SnapshotLoader.from_dict(calendar_data)
    return WorkingDayCalendar.from_snapshot(
        snapshot, uncovered_is_working=config.uncovered_day_is_working
    )


# FastAPI app
app = FastAPI(
    title="School Calendar API",
    description="Working days from weekly-off policies, holidays and calendar exceptions",
    version=__version__,
)


@app.exception_handler(CalendarError)
async def calendar_error_handler(request: Request, exc: CalendarError):
    """Map calendar errors to a fixed error body."""
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)), 400
    )
    logger.info(f"{request.url.path} rejected ({exc.code}): {exc}")
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": str(exc)})


@app.get("/")
async def root():
    """Service name, version and endpoint overview."""
    return {
        "name": "School Calendar API",
        "version": __version__,
        "endpoints": {
            "POST /working-day": "Classify a single day",
            "POST /working-days/count": "Count working days in a range",
            "POST /leave/quote": "Quote a leave request",
            "GET /public-holidays/{year}": "Public holidays for seeding a calendar",
        },
    }


@app.post("/working-day", response_model=DayStatus)
async def classify_day(request: WorkingDayRequest):
    """Classify a day as working or non-working, with the rule that decided it."""
    calendar = build_calendar(request.calendar)
    return calendar.classify(request.day, request.class_id)


@app.post("/working-days/count", response_model=WorkingDayResult)
async def count_working_days(request: CountRequest):
    """
    Count working days between two dates, both inclusive.

    The per-day classification is only returned when include_days is set.
    """
    calendar = build_calendar(request.calendar)
    result = calendar.summarize(request.start_date, request.end_date, request.class_id)
    if not request.include_days:
        result = result.model_copy(update={"days": []})
    return result


@app.post("/leave/quote", response_model=LeaveQuote)
async def quote_leave(request: LeaveQuoteRequest):
    """Compute the chargeable days of a leave request and the remaining balance."""
    snapshot = SnapshotLoader.from_dict(request.calendar)
    calendar = WorkingDayCalendar.from_snapshot(
        snapshot, uncovered_is_working=config.uncovered_day_is_working
    )
    return LeaveCalculator(calendar).quote(
        snapshot.leave_allocations,
        request.leave_type,
        request.role_id,
        request.start_date,
        request.end_date,
        used_days=request.used_days,
        carried_forward_days=request.carried_forward_days,
        class_id=request.class_id,
        pending_days=request.pending_days,
        is_half_day=request.is_half_day,
    )


@app.get("/public-holidays/{year}", response_model=List[Holiday])
async def get_public_holidays(
    year: int,
    country: Optional[str] = Query(None, description="Country code (default: from config)"),
    subdivision: Optional[str] = Query(None, description="Subdivision code"),
):
    """
    Get public holidays for a year, as records ready to seed an organization calendar.

    Args:
        year: Year (e.g., 2024, 2025)
        country: ISO country code
        subdivision: State or province code
    """
    if year < 1900 or year > 2100:
        raise HTTPException(
            status_code=400,
            detail="Year must be between 1900 and 2100",
        )

    try:
        return holiday_provider.get_holidays_for_year(year, country, subdivision)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "healthy", "version": __version__}
