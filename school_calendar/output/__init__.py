"""
Output formatting and export functionality.
"""

from school_calendar.output.formatter import ConsoleFormatter
from school_calendar.output.exporter import ResultExporter

__all__ = ["ConsoleFormatter", "ResultExporter"]
