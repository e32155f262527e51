"""
Shared fixtures: an organization calendar in the backend's field names.

March 2024 under the policy below: Saturdays 2, 9, 16, 23, 30 (9 and 23 off),
Sundays 3, 10, 17, 24, 31, Holi on Monday 25 and Tuesday 26, and Sunday 24
forced working for class 10 only.
"""

import pytest
import yaml


@pytest.fixture
def calendar_data():
    """Calendar snapshot as the backend API returns it."""
    return {
        "organization_id": "org-1",
        "policies": [
            {
                "sunday_off": True,
                "saturday_off_pattern": "SECOND_AND_FOURTH",
                "effective_from": "2024-01-01",
                "effective_to": None,
            }
        ],
        "holidays": [
            {
                "start_date": "2024-03-25",
                "end_date": "2024-03-26",
                "holiday_type": "FESTIVAL",
                "description": "Holi",
            }
        ],
        "exceptions": [
            {
                "date": "2024-03-24",
                "override_type": "FORCE_WORKING",
                "reason": "Annual day rehearsal",
                "is_applicable_to_all_classes": False,
                "classes": [10],
            }
        ],
        "leave_allocations": [
            {
                "leave_type": 1,
                "name": "Casual Leave",
                "total_days": "12",
                "max_carry_forward_days": "5",
                "applies_to_all_roles": True,
                "roles": [],
                "effective_from": "2024-01-01",
            }
        ],
    }


@pytest.fixture
def calendar_file(tmp_path, calendar_data):
    """The calendar snapshot written to a YAML file."""
    path = tmp_path / "calendar.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(calendar_data, f)
    return str(path)
