"""
School calendar: working days from weekly-off policies, holidays and calendar exceptions.
"""

__version__ = "0.1.0"
