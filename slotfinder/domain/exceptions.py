"""
Domain-specific exception hierarchy for the slot finder.
"""


class TimeSlotsFinderError(Exception):
    """Base class for all application-level errors."""


class InvalidWindowError(TimeSlotsFinderError):
    """Raised when the requested search window is missing or inverted."""


class ConfigurationError(TimeSlotsFinderError):
    """Raised when a configuration fails semantic validation."""


class SlotSearchError(TimeSlotsFinderError):
    """Raised when slot generation stops making progress."""


class CalendarDataError(TimeSlotsFinderError):
    """Raised when busy calendar data cannot be read or parsed."""
