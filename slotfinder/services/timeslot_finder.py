"""
Application services for finding bookable slots.

The service coordinates fetching busy periods via a calendar source adapter
and delegates the actual slot search to the domain-level
``SlotCalculator``. This keeps the CLI thin and improves testability by
allowing the calendar dependency to be stubbed via a simple protocol.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Protocol

from ..config import Period, TimeSlotsConfiguration
from ..domain.models import SlotSearchResult
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)


class CalendarSourceProtocol(Protocol):
    """Protocol describing the calendar source behaviour needed by the service."""

    def get_unavailable_periods(self, time_zone: str) -> List[Period]:
        """Return busy periods of the resource."""


class TimeSlotsFinderService:
    """
    Orchestrates busy-period retrieval and slot calculation.

    Dependency inversion toward a protocol makes it easy to plug in the JSON
    calendar adapter or a stub in tests.
    """

    def __init__(self, calendar_source: Optional[CalendarSourceProtocol] = None) -> None:
        self._calendar_source = calendar_source

    def fetch_unavailable_periods(self, configuration: TimeSlotsConfiguration) -> List[Period]:
        """Fetch busy periods from the calendar source, if any."""
        if self._calendar_source is None:
            return []
        return list(self._calendar_source.get_unavailable_periods(configuration.time_zone))

    def find_slots(
        self,
        *,
        configuration: TimeSlotsConfiguration,
        from_: Optional[datetime],
        to: Optional[datetime],
        now: Optional[datetime] = None,
    ) -> SlotSearchResult:
        """
        Retrieve busy data, combine it with the configured periods, and
        compute bookable slots.
        """
        fetched = self.fetch_unavailable_periods(configuration)

        effective_configuration = self._with_unavailable_periods(configuration, fetched)

        return SlotCalculator(effective_configuration).find_available_slots(from_, to, now)

    @staticmethod
    def _with_unavailable_periods(
        configuration: TimeSlotsConfiguration,
        fetched: List[Period],
    ) -> TimeSlotsConfiguration:
        """
        Return a copy of the configuration whose busy periods also include
        the fetched ones; the caller's configuration is left untouched.
        """
        if not fetched:
            return configuration

        logger.debug("Adding %d busy period(s) from the calendar source", len(fetched))
        return configuration.model_copy(
            update={"unavailable_periods": [*configuration.unavailable_periods, *fetched]}
        )
