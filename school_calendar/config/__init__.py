"""
Configuration loading.
"""

from school_calendar.config.manager import ConfigManager

__all__ = ["ConfigManager"]
