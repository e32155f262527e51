"""
Writes working-day results and holiday lists to JSON and CSV files.
"""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from school_calendar.data.schemas import Holiday, WorkingDayResult

DAY_COLUMNS = ["Date", "Weekday", "Is Working", "Reason", "Note"]
HOLIDAY_COLUMNS = ["Date", "Type", "Name", "All Classes", "Classes"]


class ResultExporter:
    """Saves results under an output directory or at explicit paths."""

    def __init__(self, output_directory: str = "results", timestamp_format: str = "%Y%m%d_%H%M%S"):
        """
        Args:
            output_directory: Where files go when no explicit path is given.
            timestamp_format: strftime pattern used in generated file names.
        """
        self.output_directory = output_directory
        self.timestamp_format = timestamp_format

    def _resolve_path(self, prefix: str, extension: str, output_path: Optional[str]) -> Path:
        """Use the given path, or a timestamped file in the output directory."""
        if output_path:
            target = Path(output_path)
        else:
            stamp = datetime.now().strftime(self.timestamp_format)
            target = Path(self.output_directory) / f"{prefix}_{stamp}.{extension}"
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def export_json(self, result: WorkingDayResult, output_path: Optional[str] = None) -> str:
        """Write the summary and the non-working days as JSON; returns the file path."""
        target = self._resolve_path("working_days", "json", output_path)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self._result_to_dict(result), f, indent=2, ensure_ascii=False)
        return str(target)

    def export_csv(self, result: WorkingDayResult, output_path: Optional[str] = None) -> str:
        """Write one CSV row per classified day; returns the file path."""
        target = self._resolve_path("working_days", "csv", output_path)
        with open(target, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(DAY_COLUMNS)
            writer.writerows(
                [
                    status.day.isoformat(),
                    status.day.strftime("%A"),
                    status.is_working,
                    status.reason.value,
                    status.label or "",
                ]
                for status in result.days
            )
        return str(target)

    def export_holidays_csv(self, holidays: List[Holiday], output_path: Optional[str] = None) -> str:
        """Write holiday records as CSV, class ids joined with ';'."""
        target = self._resolve_path("holidays", "csv", output_path)
        with open(target, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HOLIDAY_COLUMNS)
            writer.writerows(
                [
                    h.holiday_date.isoformat(),
                    h.type.value,
                    h.name,
                    h.applies_to_all_classes,
                    ";".join(sorted(h.class_ids)),
                ]
                for h in holidays
            )
        return str(target)

    def export_both(self, result: WorkingDayResult, output_path: Optional[str] = None) -> Tuple[str, str]:
        """
        Returns (json_path, csv_path).

        Given output_path, both files share its name with .json and .csv suffixes.
        """
        if not output_path:
            return self.export_json(result), self.export_csv(result)
        base = Path(output_path)
        return (
            self.export_json(result, str(base.with_suffix(".json"))),
            self.export_csv(result, str(base.with_suffix(".csv"))),
        )

    @staticmethod
    def _result_to_dict(result: WorkingDayResult) -> dict:
        off_days = [
            {"date": s.day.isoformat(), "reason": s.reason.value, "note": s.label}
            for s in result.days
            if not s.is_working
        ]
        return {
            "organization_id": result.organization_id,
            "class_id": result.class_id,
            "start_date": result.start_date.isoformat(),
            "end_date": result.end_date.isoformat(),
            "calculation": {
                "calendar_days": result.calendar_days,
                "working_days": result.working_days,
                "non_working_days": result.non_working_days,
                "breakdown": result.breakdown,
            },
            "off_days": off_days,
            "metadata": {
                "calculation_timestamp": result.calculation_timestamp.isoformat(),
                "warnings": result.warnings,
            },
        }
