"""
Adapters layer - External busy-calendar sources.
"""

from .json_calendar import JsonCalendarSource

__all__ = ["JsonCalendarSource"]
