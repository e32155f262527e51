"""
MCP Server for the School Calendar.

Exposes working-day checks, counts and public holidays as Model Context
Protocol tools. Runs over stdio for desktop clients or SSE for remote ones.
"""

import argparse
import logging
import os
from typing import Optional

from mcp.server.fastmcp import FastMCP

from school_calendar.config.manager import ConfigManager
from school_calendar.core.holiday_provider import HolidayProvider
from school_calendar.core.working_days import WorkingDayCalendar
from school_calendar.data.loader import SnapshotLoader

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


def _load_calendar(calendar_file: str) -> WorkingDayCalendar:
    snapshot = SnapshotLoader.load(calendar_file)
    return WorkingDayCalendar.from_snapshot(
        snapshot, uncovered_is_working=config.uncovered_day_is_working
    )


def check_working_day(calendar_file: str, date: str, class_id: Optional[str] = None) -> dict:
    """
    Check whether a date is a working day for a school.

    Exceptions (forced working / forced holiday) win over holidays, and
    holidays win over the weekly-off policy (Sundays and the Saturday pattern).

    Args:
        calendar_file: Path to the organization calendar file (JSON or YAML)
        date: Date in format YYYY-MM-DD (e.g., "2024-03-09")
        class_id: Optional class to scope the check to

    Returns:
        Dictionary with:
        - date: The checked date
        - is_working: Whether it is a working day
        - reason: Rule that decided it (e.g., SATURDAY_OFF, HOLIDAY, FORCE_WORKING)
        - note: Holiday name or exception reason, if any

    Example:
        >>> check_working_day("calendar.yaml", "2024-03-09")
    """
    try:
        status = _load_calendar(calendar_file).classify(date, class_id)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"check_working_day failed: {e}")
        return {"error": str(e)}

    return {
        "date": status.day.isoformat(),
        "is_working": status.is_working,
        "reason": status.reason.value,
        "note": status.label,
    }


def count_working_days(
    calendar_file: str,
    start_date: str,
    end_date: str,
    class_id: Optional[str] = None,
) -> dict:
    """
    Count the working days between two dates (both inclusive) for a school.

    Args:
        calendar_file: Path to the organization calendar file (JSON or YAML)
        start_date: Start date in format YYYY-MM-DD (e.g., "2024-03-01")
        end_date: End date in format YYYY-MM-DD (e.g., "2024-03-31")
        class_id: Optional class to scope the count to

    Returns:
        Dictionary with:
        - working_days: Number of working days
        - calendar_days: Total calendar days in the period
        - non_working_days: Number of non-working days
        - breakdown: Day count per deciding rule
        - warnings: e.g., days with no weekly-off policy

    Example:
        >>> count_working_days("calendar.yaml", "2024-03-01", "2024-03-31")
    """
    try:
        result = _load_calendar(calendar_file).summarize(start_date, end_date, class_id)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"count_working_days failed: {e}")
        return {"error": str(e)}

    return {
        "start_date": result.start_date.isoformat(),
        "end_date": result.end_date.isoformat(),
        "class_id": result.class_id,
        "calendar_days": result.calendar_days,
        "working_days": result.working_days,
        "non_working_days": result.non_working_days,
        "breakdown": result.breakdown,
        "warnings": result.warnings,
    }


def list_public_holidays(
    year: int,
    country: Optional[str] = None,
    subdivision: Optional[str] = None,
) -> dict:
    """
    List public holidays of a country for a year.

    Args:
        year: Year to get holidays for (e.g., 2024)
        country: ISO country code (default from configuration, e.g., "IN")
        subdivision: Optional state code

    Returns:
        Dictionary with the year, country and the holidays (date and name).
    """
    if year < 1900 or year > 2100:
        return {"error": "Year must be between 1900 and 2100"}

    try:
        holiday_list = holiday_provider.get_holidays_for_year(year, country, subdivision)
    except ValueError as e:
        logger.error(f"list_public_holidays failed: {e}")
        return {"error": str(e)}

    return {
        "year": year,
        "country": (country or holiday_provider.country).upper(),
        "holiday_count": len(holiday_list),
        "holidays": [
            {"date": h.holiday_date.isoformat(), "name": h.name} for h in holiday_list
        ],
    }


def create_mcp_server(host: str = "127.0.0.1", port: int = 8000) -> FastMCP:
    """Build a FastMCP server with the calendar tools registered."""
    mcp = FastMCP("School Calendar", host=host, port=port)
    mcp.tool()(check_working_day)
    mcp.tool()(count_working_days)
    mcp.tool()(list_public_holidays)
    return mcp


def main():
    """Entry point for school-calendar-mcp. Flags win over MCP_TRANSPORT, MCP_HOST and MCP_PORT."""
    parser = argparse.ArgumentParser(description="School Calendar MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="stdio (default) or sse",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", os.environ.get("FASTMCP_HOST", "0.0.0.0")),
        help="Bind address for sse",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", os.environ.get("FASTMCP_PORT", "8080"))),
        help="Port for sse",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting School Calendar MCP server ({args.transport})")

    mcp = create_mcp_server(host=args.host, port=args.port)

    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()
