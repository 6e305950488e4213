"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import merge_overlapping_shifts, validate_configuration
from .boundaries import resolve_boundaries
from .models import (
    Boundaries,
    BusyPeriod,
    FixedMoment,
    RecurringMoment,
    SlotSearchResult,
    TimeSlot,
    UnavailabilityIndex,
)
from .slot_calculator import SlotCalculator, get_available_time_slots
from .unavailability import index_unavailable_periods

__all__ = [
    "Boundaries",
    "BusyPeriod",
    "FixedMoment",
    "RecurringMoment",
    "SlotSearchResult",
    "TimeSlot",
    "UnavailabilityIndex",
    "SlotCalculator",
    "get_available_time_slots",
    "index_unavailable_periods",
    "merge_overlapping_shifts",
    "resolve_boundaries",
    "validate_configuration",
]
