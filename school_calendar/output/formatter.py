"""
Terminal rendering of calendar results with rich.
"""

from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from school_calendar.data.schemas import DayStatus, Holiday, LeaveQuote, WorkingDayResult

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

REASON_LABELS = {
    "FORCE_WORKING": "Forced working (exception)",
    "FORCE_HOLIDAY": "Forced holiday (exception)",
    "HOLIDAY": "Holiday",
    "SUNDAY_OFF": "Sunday off",
    "SATURDAY_OFF": "Saturday off",
    "WORKING_DAY": "Regular working day",
    "NO_POLICY": "No weekly-off policy",
}


class ConsoleFormatter:
    """Renders calendar results in the terminal."""

    def __init__(self):
        self.console = Console()

    def print_day_status(self, status: DayStatus) -> None:
        """
        Print the classification of a single day.

        Args:
            status: DayStatus to display.
        """
        verdict = Text("Working day", style="bold green") if status.is_working else Text(
            "Non-working day", style="bold red"
        )

        table = Table(show_header=False, box=None)
        table.add_column("Label", style="cyan", width=12)
        table.add_column("Value", style="white")
        table.add_row("Date:", f"{status.day.strftime('%d/%m/%Y')} ({WEEKDAY_NAMES[status.day.weekday()]})")
        table.add_row("Verdict:", verdict)
        table.add_row("Rule:", REASON_LABELS[status.reason.value])
        if status.label:
            table.add_row("Note:", status.label)

        self.console.print(Panel(table, title="[bold]Day Classification[/bold]"))

    def print_result(self, result: WorkingDayResult, show_days: bool = False) -> None:
        """
        Print a working-day range result.

        Args:
            result: WorkingDayResult to display.
            show_days: Also print the non-working days of the range.
        """
        self.console.print()
        self.console.rule("[bold blue]Working Day Calculation[/bold blue]")
        self.console.print()

        summary_table = Table(show_header=False, box=None)
        summary_table.add_column("Label", style="cyan", width=20)
        summary_table.add_column("Value", style="white")
        summary_table.add_row(
            "Period:",
            f"{result.start_date.strftime('%d/%m/%Y')} - {result.end_date.strftime('%d/%m/%Y')}",
        )
        if result.organization_id:
            summary_table.add_row("Organization:", result.organization_id)
        summary_table.add_row("Class:", result.class_id or "All classes")
        self.console.print(Panel(summary_table, title="[bold]Scope & Period[/bold]"))

        calc_table = Table(show_header=False, box=None)
        calc_table.add_column("Label", style="cyan", width=28)
        calc_table.add_column("Value", style="white", justify="right", width=10)
        calc_table.add_row("Calendar Days:", str(result.calendar_days))
        for reason, count in sorted(result.breakdown.items()):
            calc_table.add_row(f"{REASON_LABELS.get(reason, reason)}:", str(count))
        calc_table.add_row("", "─" * 10)
        calc_table.add_row(
            Text("Working Days:", style="bold green"),
            Text(str(result.working_days), style="bold green"),
        )
        self.console.print(Panel(calc_table, title="[bold]Calculation[/bold]"))

        if show_days:
            off_days = [status for status in result.days if not status.is_working]
            if off_days:
                self.print_days(off_days, title="Non-working Days")

        for warning in result.warnings:
            self.console.print(f"[yellow]Warning:[/yellow] {warning}")

        self.console.print()

    def print_days(self, days: List[DayStatus], title: str = "Days") -> None:
        """Print a table of classified days."""
        table = Table(title=f"[bold]{title}[/bold]")
        table.add_column("Date", style="cyan", width=12)
        table.add_column("Day", style="dim", width=10)
        table.add_column("Rule", style="white")
        table.add_column("Note", style="white")

        for status in days:
            table.add_row(
                status.day.strftime("%d/%m/%Y"),
                WEEKDAY_NAMES[status.day.weekday()],
                REASON_LABELS[status.reason.value],
                status.label or "",
            )

        self.console.print(table)

    def print_holidays(self, holidays: List[Holiday], title: str = "Holidays") -> None:
        """
        Print a table of holidays.

        Args:
            holidays: List of holidays to display.
            title: Table title.
        """
        if not holidays:
            self.console.print("[dim]No holidays found for this period.[/dim]")
            return

        holiday_table = Table(title=f"[bold]{title}[/bold]")
        holiday_table.add_column("Date", style="cyan", width=12)
        holiday_table.add_column("Day", style="dim", width=10)
        holiday_table.add_column("Type", style="magenta")
        holiday_table.add_column("Name", style="white")

        for holiday in holidays:
            holiday_table.add_row(
                holiday.holiday_date.strftime("%d/%m/%Y"),
                WEEKDAY_NAMES[holiday.holiday_date.weekday()],
                holiday.type.value,
                holiday.name,
            )

        self.console.print(holiday_table)

    def print_leave_quote(self, quote: LeaveQuote) -> None:
        """Print a leave quote."""
        table = Table(show_header=False, box=None)
        table.add_column("Label", style="cyan", width=20)
        table.add_column("Value", style="white", justify="right", width=10)
        table.add_row("Leave Type:", quote.leave_type)
        table.add_row("Role:", quote.role_id)
        table.add_row(
            "Period:",
            f"{quote.start_date.strftime('%d/%m/%Y')} - {quote.end_date.strftime('%d/%m/%Y')}",
        )
        table.add_row("Allocated:", str(quote.allocated_days))
        table.add_row("Carried Forward:", f"+ {quote.carried_forward_days}")
        table.add_row("Used:", f"- {quote.used_days}")
        if quote.pending_days:
            table.add_row("Pending:", f"- {quote.pending_days}")
        table.add_row("Available:", str(quote.available_days))
        if quote.is_half_day:
            table.add_row("Half Day:", "yes")
        table.add_row("Chargeable Days:", f"- {quote.chargeable_days}")
        style = "bold green" if quote.sufficient else "bold red"
        table.add_row(Text("Remaining:", style=style), Text(str(quote.remaining_days), style=style))

        self.console.print(Panel(table, title="[bold]Leave Quote[/bold]"))
        if not quote.sufficient:
            self.console.print("[yellow]Warning:[/yellow] Insufficient leave balance for this request.")

    def print_error(self, message: str) -> None:
        """Print a red error line."""
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def print_success(self, message: str) -> None:
        """Print a green confirmation line."""
        self.console.print(f"[bold green]Success:[/bold green] {message}")
