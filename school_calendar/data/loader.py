"""
Loads organization calendar snapshots from JSON or YAML files.

Backend payloads use different field names (``holiday_type``,
``is_applicable_to_all_classes``, ``classes``, ``start_date``/``end_date``
holiday ranges, numeric ids, ``{"data": [...]}`` envelopes). They are
decoded here once so the rest of the package only sees the schema models.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from school_calendar.core.exceptions import CalendarError, SnapshotError
from school_calendar.core.holiday_provider import expand_holiday_range
from school_calendar.data.schemas import (
    CalendarException,
    CalendarSnapshot,
    Holiday,
    LeaveAllocation,
    WeeklyOffPolicy,
)

logger = logging.getLogger(__name__)

ID_LIST_KEYS = ("class_ids", "classes", "role_ids", "roles")


def _unwrap(section: Any) -> List[Dict[str, Any]]:
    """Accept a plain list or an API envelope with a ``data`` list."""
    if section is None:
        return []
    if isinstance(section, dict) and "data" in section:
        section = section["data"]
    if not isinstance(section, list):
        raise SnapshotError(f"Expected a list of records, got {type(section).__name__}")
    return section


def _id_of(value: Any, key: str) -> str:
    """An id given as a scalar or as an object with an ``id`` key."""
    if isinstance(value, dict):
        if "id" not in value:
            raise SnapshotError(f"'{key}' entry has no id: {value!r}")
        value = value["id"]
    if isinstance(value, (dict, list, tuple, set)) or value is None:
        raise SnapshotError(f"Invalid id in '{key}': {value!r}")
    return str(value)


def _normalize(record: Dict[str, Any]) -> Dict[str, Any]:
    """Turn numeric and nested ids into strings."""
    if not isinstance(record, dict):
        raise SnapshotError(f"Expected a record mapping, got {type(record).__name__}")

    fields = dict(record)
    for key in ID_LIST_KEYS:
        if key in fields and fields[key] is not None:
            if not isinstance(fields[key], (list, tuple)):
                raise SnapshotError(f"'{key}' must be a list, got {type(fields[key]).__name__}")
            fields[key] = [_id_of(item, key) for item in fields[key]]
    if fields.get("leave_type") is not None:
        fields["leave_type"] = _id_of(fields["leave_type"], "leave_type")
    return fields


def _parse_holidays(record: Dict[str, Any]) -> List[Holiday]:
    fields = _normalize(record)
    start = fields.pop("start_date", None)
    end = fields.pop("end_date", None)
    if start is None:
        return [Holiday.model_validate(fields)]

    template = Holiday.model_validate({**fields, "holiday_date": start})
    return expand_holiday_range(
        template.holiday_date,
        end,
        holiday_type=template.type,
        name=template.name,
        applies_to_all_classes=template.applies_to_all_classes,
        class_ids=template.class_ids,
    )


class SnapshotLoader:
    """Loads calendar snapshots from files or dictionaries."""

    @staticmethod
    def load(file_path: str) -> CalendarSnapshot:
        """
        Load a calendar snapshot from a JSON or YAML file.

        Args:
            file_path: Path to a .json, .yaml or .yml file.

        Returns:
            CalendarSnapshot object.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            SnapshotError: If the file cannot be parsed or holds invalid records.
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Calendar file not found: {file_path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Invalid JSON in {file_path}: {e}") from e
        except yaml.YAMLError as e:
            raise SnapshotError(f"Invalid YAML in {file_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise SnapshotError(f"{file_path} is not valid UTF-8: {e}") from e

        snapshot = SnapshotLoader.from_dict(data)
        logger.info(
            f"Loaded calendar from {file_path}: {len(snapshot.policies)} policies, "
            f"{len(snapshot.holidays)} holidays, {len(snapshot.exceptions)} exceptions"
        )
        return snapshot

    @staticmethod
    def from_dict(data: Any) -> CalendarSnapshot:
        """
        Build a snapshot from already-parsed data.

        Raises:
            SnapshotError: If the data does not describe a valid snapshot.
        """
        if not isinstance(data, dict):
            raise SnapshotError("Calendar data must be a mapping")

        try:
            holidays = []
            for record in _unwrap(data.get("holidays")):
                holidays.extend(_parse_holidays(record))

            organization_id = data.get("organization_id", data.get("organization"))

            return CalendarSnapshot(
                organization_id=str(organization_id) if organization_id is not None else None,
                policies=[
                    WeeklyOffPolicy.model_validate(_normalize(p))
                    for p in _unwrap(data.get("policies"))
                ],
                holidays=holidays,
                exceptions=[
                    CalendarException.model_validate(_normalize(e))
                    for e in _unwrap(data.get("exceptions"))
                ],
                leave_allocations=[
                    LeaveAllocation.model_validate(_normalize(a))
                    for a in _unwrap(data.get("leave_allocations"))
                ],
            )
        except SnapshotError:
            raise
        except (ValidationError, CalendarError) as e:
            raise SnapshotError(f"Invalid calendar data: {e}") from e
