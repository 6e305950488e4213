"""
slotfinder - find bookable appointment slots from weekly availability.
"""

from .config import AvailablePeriod, Period, PeriodMoment, Shift, TimeSlotsConfiguration
from .domain import SlotCalculator, TimeSlot, get_available_time_slots, validate_configuration
from .domain.exceptions import InvalidWindowError, TimeSlotsFinderError

__version__ = "0.1.0"

__all__ = [
    "AvailablePeriod",
    "Period",
    "PeriodMoment",
    "Shift",
    "TimeSlotsConfiguration",
    "SlotCalculator",
    "TimeSlot",
    "get_available_time_slots",
    "validate_configuration",
    "InvalidWindowError",
    "TimeSlotsFinderError",
]
