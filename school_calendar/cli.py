"""
CLI interface for the school calendar.
"""

import logging
import sys
from datetime import date
from typing import Optional

import click

from school_calendar import __version__
from school_calendar.config.manager import ConfigManager
from school_calendar.core.holiday_provider import HolidayProvider, generate_weekend_holidays
from school_calendar.core.leave import LeaveCalculator
from school_calendar.core.working_days import WorkingDayCalendar
from school_calendar.data.loader import SnapshotLoader
from school_calendar.data.schemas import CalendarSnapshot, Config
from school_calendar.output.exporter import ResultExporter
from school_calendar.output.formatter import ConsoleFormatter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_settings(config_path: Optional[str], verbose: bool = False) -> Config:
    """Load configuration and apply its log level."""
    cfg = ConfigManager(config_path).load_config()
    logging.getLogger().setLevel(logging.DEBUG if verbose else cfg.log_level.upper())
    return cfg


def build_calendar(calendar_file: str, cfg: Config) -> WorkingDayCalendar:
    """Load a calendar file into a WorkingDayCalendar."""
    snapshot = SnapshotLoader.load(calendar_file)
    return WorkingDayCalendar.from_snapshot(
        snapshot, uncovered_is_working=cfg.uncovered_day_is_working
    )


def calendar_option(f):
    return click.option(
        "--calendar",
        "calendar_file",
        required=True,
        type=click.Path(exists=True, dir_okay=False),
        help="Calendar file (JSON or YAML) with policies, holidays and exceptions",
    )(f)


def config_option(f):
    return click.option(
        "--config", "-c",
        type=click.Path(exists=True),
        help="Path to config file (optional)",
    )(f)


def fail(formatter: ConsoleFormatter, message: str, verbose: bool = False) -> None:
    formatter.print_error(message)
    if verbose:
        logger.exception("Detailed error:")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="school-calendar")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def main(ctx, verbose):
    """School Calendar - Working days from weekly-off policies, holidays and exceptions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@calendar_option
@click.option("--date", "-d", "day", required=True, help="Date (YYYY-MM-DD, DD-MM-YYYY, or DD/MM/YYYY)")
@click.option("--class-id", help="Class to scope the check to (default: organization-wide)")
@config_option
@click.pass_context
def check(ctx, calendar_file, day, class_id, config):
    """Check whether a date is a working day."""
    formatter = ConsoleFormatter()
    verbose = ctx.obj["verbose"]

    try:
        cfg = load_settings(config, verbose)
        calendar = build_calendar(calendar_file, cfg)
        formatter.print_day_status(calendar.classify(day, class_id))
    except (FileNotFoundError, ValueError) as e:
        fail(formatter, str(e), verbose)
    except Exception as e:
        fail(formatter, f"Unexpected error: {e}", verbose)


@main.command()
@calendar_option
@click.option("--start", "-s", required=True, help="Start date (YYYY-MM-DD, DD-MM-YYYY, or DD/MM/YYYY)")
@click.option("--end", "-e", required=True, help="End date (YYYY-MM-DD, DD-MM-YYYY, or DD/MM/YYYY)")
@click.option("--class-id", help="Class to scope the count to (default: organization-wide)")
@click.option("--show-days", is_flag=True, default=False, help="List the non-working days")
@click.option("--output", "-o", type=click.Path(), help="Output file path (optional)")
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "csv", "both", "console"]),
    default="console",
    help="Output format (default: console)",
)
@config_option
@click.pass_context
def count(ctx, calendar_file, start, end, class_id, show_days, output, format, config):
    """Count working days between two dates (both inclusive)."""
    formatter = ConsoleFormatter()
    verbose = ctx.obj["verbose"]

    try:
        cfg = load_settings(config, verbose)
        calendar = build_calendar(calendar_file, cfg)
        result = calendar.summarize(start, end, class_id)

        if format in ("console", "both"):
            formatter.print_result(result, show_days=show_days)

        if format in ("json", "csv", "both"):
            exporter = ResultExporter(output_directory=cfg.output_directory)

            if format == "json":
                path = exporter.export_json(result, output)
                formatter.print_success(f"Result saved to {path}")
            elif format == "csv":
                path = exporter.export_csv(result, output)
                formatter.print_success(f"Result saved to {path}")
            else:
                json_path, csv_path = exporter.export_both(result, output)
                formatter.print_success(f"Results saved to:\n  - {json_path}\n  - {csv_path}")

    except (FileNotFoundError, ValueError) as e:
        fail(formatter, str(e), verbose)
    except Exception as e:
        fail(formatter, f"Unexpected error: {e}", verbose)


@main.command()
@calendar_option
@click.option("--start", "-s", required=True, help="Start date")
@click.option("--end", "-e", required=True, help="End date")
@click.option("--output", "-o", type=click.Path(), help="Output CSV file path (optional)")
@config_option
@click.pass_context
def weekends(ctx, calendar_file, start, end, output, config):
    """List the weekly-off days the policies generate in a range."""
    formatter = ConsoleFormatter()
    verbose = ctx.obj["verbose"]

    try:
        cfg = load_settings(config, verbose)
        snapshot = SnapshotLoader.load(calendar_file)
        weekend_list = generate_weekend_holidays(start, end, snapshot.policies)

        formatter.print_holidays(weekend_list, title="Weekly-off Days")

        if output:
            exporter = ResultExporter(output_directory=cfg.output_directory)
            path = exporter.export_holidays_csv(weekend_list, output)
            formatter.print_success(f"Weekly-off days saved to {path}")

    except (FileNotFoundError, ValueError) as e:
        fail(formatter, str(e), verbose)
    except Exception as e:
        fail(formatter, f"Unexpected error: {e}", verbose)


@main.command()
@calendar_option
@click.option("--leave-type", "-t", required=True, help="Leave type identifier")
@click.option("--role", "-r", "role_id", required=True, help="Role of the applicant")
@click.option("--start", "-s", required=True, help="First day of leave")
@click.option("--end", "-e", required=True, help="Last day of leave")
@click.option("--used", default="0", show_default=True, help="Days of this type already used")
@click.option("--carried", default="0", show_default=True, help="Days carried forward from last period")
@click.option("--pending", default="0", show_default=True, help="Days requested but not yet approved")
@click.option("--half-day", is_flag=True, default=False, help="Half of a single working day")
@click.option("--class-id", help="Class to scope the working-day count to")
@config_option
@click.pass_context
def leave(ctx, calendar_file, leave_type, role_id, start, end, used, carried, pending, half_day, class_id, config):
    """Quote a leave request against the role's allocation."""
    formatter = ConsoleFormatter()
    verbose = ctx.obj["verbose"]

    try:
        cfg = load_settings(config, verbose)
        snapshot: CalendarSnapshot = SnapshotLoader.load(calendar_file)
        calendar = WorkingDayCalendar.from_snapshot(
            snapshot, uncovered_is_working=cfg.uncovered_day_is_working
        )
        quote = LeaveCalculator(calendar).quote(
            snapshot.leave_allocations,
            leave_type,
            role_id,
            start,
            end,
            used_days=used,
            carried_forward_days=carried,
            class_id=class_id,
            pending_days=pending,
            is_half_day=half_day,
        )
        formatter.print_leave_quote(quote)

    except (FileNotFoundError, ValueError, ArithmeticError) as e:
        fail(formatter, str(e), verbose)
    except Exception as e:
        fail(formatter, f"Unexpected error: {e}", verbose)


@main.command("public-holidays")
@click.option("--year", "-y", type=int, default=None, help="Year (default: current year)")
@click.option("--country", help="Country code (default: from config)")
@click.option("--subdivision", help="State or province code (default: from config)")
@click.option("--output", "-o", type=click.Path(), help="Output CSV file path (optional)")
@config_option
@click.pass_context
def public_holidays(ctx, year, country, subdivision, output, config):
    """List public holidays to seed an organization calendar."""
    formatter = ConsoleFormatter()
    verbose = ctx.obj["verbose"]

    try:
        if year is None:
            year = date.today().year

        cfg = load_settings(config, verbose)
        provider = HolidayProvider(
            country=cfg.holiday_country,
            subdivision=cfg.holiday_subdivision,
            language=cfg.holiday_language,
        )
        holiday_list = provider.get_holidays_for_year(year, country, subdivision)

        formatter.print_holidays(
            holiday_list, title=f"Public Holidays {year} - {(country or cfg.holiday_country).upper()}"
        )

        if output:
            exporter = ResultExporter(output_directory=cfg.output_directory)
            path = exporter.export_holidays_csv(holiday_list, output)
            formatter.print_success(f"Holidays saved to {path}")

    except ValueError as e:
        fail(formatter, str(e), verbose)
    except Exception as e:
        fail(formatter, f"Error: {e}", verbose)


@main.command()
@click.option("--host", "-h", default=None, help="Host to bind to (default: from config or 0.0.0.0)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to (default: from config or 8000)")
@config_option
def serve(host, port, config):
    """Start the FastAPI server."""
    formatter = ConsoleFormatter()

    try:
        import uvicorn

        cfg = load_settings(config)

        api_host = host or cfg.api_host
        api_port = port or cfg.api_port

        formatter.console.print(f"Starting API server at http://{api_host}:{api_port}")
        formatter.console.print("Press Ctrl+C to stop")
        formatter.console.print()

        uvicorn.run(
            "school_calendar.api:app",
            host=api_host,
            port=api_port,
            reload=False,
        )

    except ImportError:
        formatter.print_error("uvicorn is required for the API server. Install it with: pip install uvicorn")
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
