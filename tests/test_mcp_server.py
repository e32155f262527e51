"""
Tests for the MCP server tools.
"""

import pytest
from mcp.server.fastmcp import FastMCP

from school_calendar.mcp_server import (
    check_working_day,
    count_working_days,
    create_mcp_server,
    list_public_holidays,
)


class TestTools:
    def test_check_working_day(self, calendar_file):
        result = check_working_day(calendar_file, "2024-03-25")
        assert result == {
            "date": "2024-03-25",
            "is_working": False,
            "reason": "HOLIDAY",
            "note": "Holi",
        }

    def test_count_working_days(self, calendar_file):
        result = count_working_days(calendar_file, "2024-03-01", "2024-03-31", class_id="10")
        assert result["working_days"] == 23
        assert result["breakdown"]["FORCE_WORKING"] == 1
        assert result["warnings"] == []

    def test_errors_are_returned(self, calendar_file, tmp_path):
        assert "error" in check_working_day(str(tmp_path / "missing.yaml"), "2024-03-09")
        assert "error" in check_working_day(calendar_file, "09.03.2024")
        assert "error" in count_working_days(calendar_file, "2024-03-31", "2024-03-01")

    def test_list_public_holidays(self):
        result = list_public_holidays(2024, country="in")
        assert result["country"] == "IN"
        assert result["holiday_count"] == len(result["holidays"])
        assert "2024-01-26" in [h["date"] for h in result["holidays"]]

    def test_year_out_of_range(self):
        assert "error" in list_public_holidays(3000)

    def test_server_creation(self):
        assert isinstance(create_mcp_server(), FastMCP)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
