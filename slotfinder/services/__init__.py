"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .timeslot_finder import CalendarSourceProtocol, TimeSlotsFinderService

__all__ = ["CalendarSourceProtocol", "TimeSlotsFinderService"]
