"""
Core business logic for calculating bookable time slots.

Walks the search window day by day and shift by shift. Reads nothing
but the configuration it is given.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pendulum import DateTime

from ..config import AvailablePeriod, TimeSlotsConfiguration
from .availability import find_weekday_entry, merge_overlapping_shifts
from .boundaries import resolve_boundaries
from .exceptions import ConfigurationError, SlotSearchError
from .models import Boundaries, BusyPeriod, SlotSearchResult, TimeSlot, UnavailabilityIndex
from .timeutils import (
    add_minutes,
    at_time_of_day,
    day_key,
    earliest,
    floor_to_minute,
    latest,
    local_date,
    minutes_between,
    next_day,
    parse_hhmm,
    subtract_minutes,
    to_utc,
    to_zone,
)
from .unavailability import index_unavailable_periods

logger = logging.getLogger(__name__)


class SlotCalculator:
    """
    Calculates bookable slots from weekly availability and busy periods.

    Algorithm:
    1. Resolve the effective search window (lead time, days-ahead cap)
    2. Index busy periods per local calendar day
    3. Walk every day of the window and clip each shift of its weekday
    4. Inside each clipped shift, move a search cursor forward, jumping
       over busy periods and emitting aligned slots with their buffers
    """

    def __init__(self, configuration: TimeSlotsConfiguration):
        self.configuration = configuration
        self.available_periods = self._prepare_available_periods(configuration)

    @staticmethod
    def _prepare_available_periods(configuration: TimeSlotsConfiguration) -> List[AvailablePeriod]:
        """Merge overlapping shifts, keeping the configured ones if that fails."""
        try:
            return merge_overlapping_shifts(configuration.available_periods)
        except ConfigurationError as exc:
            logger.warning("Could not merge available periods, using them as configured: %s", exc)
            return list(configuration.available_periods)

    def find_available_slots(
        self,
        from_: Optional[datetime],
        to: Optional[datetime],
        now: Optional[datetime] = None,
    ) -> SlotSearchResult:
        """
        Find all bookable slots between from_ and to.

        Args:
            from_: Start of the search period
            to: End of the search period
            now: Current instant; read from the clock when omitted

        Returns:
            SlotSearchResult with the ordered slots, the effective window
            and the busy-period index used

        Raises:
            InvalidWindowError: If from_/to is missing or from_ is after to
            SlotSearchError: If the search stops making progress
        """
        boundaries = resolve_boundaries(self.configuration, from_, to, now)
        index = index_unavailable_periods(self.configuration, boundaries)

        slots: List[TimeSlot] = []
        if not boundaries.is_empty():
            slots = self._walk_days(boundaries, index)

        logger.debug("Found %d slot(s) between %s and %s", len(slots), boundaries.first_from, boundaries.last_to)

        return SlotSearchResult(slots=slots, boundaries=boundaries, index=index)

    def _walk_days(self, boundaries: Boundaries, index: UnavailabilityIndex) -> List[TimeSlot]:
        """
        Generate slots for every shift of every day in the window.

        Days advance by calendar date, so 23 or 25 hour days around DST
        changes are each visited exactly once.
        """
        slots: List[TimeSlot] = []
        time_zone = self.configuration.time_zone

        day = local_date(boundaries.first_from)
        last_day = local_date(boundaries.last_to)

        while day <= last_day:
            weekday_entry = find_weekday_entry(self.available_periods, day.isoweekday())

            if weekday_entry:
                busy_periods = index.for_day(day_key(day))
                shifts = sorted(weekday_entry.shifts, key=lambda s: parse_hhmm(s.start_time))
                for shift in shifts:
                    shift_start = at_time_of_day(day, shift.start_time, time_zone)
                    shift_end = at_time_of_day(day, shift.end_time, time_zone)

                    # Clip to the search range
                    window_start = latest(boundaries.first_from, shift_start)
                    window_end = earliest(boundaries.last_to, shift_end)
                    if to_utc(window_start) >= to_utc(window_end):
                        continue

                    slots.extend(self._slots_for_window(busy_periods, window_start, window_end))

            day = next_day(day)

        return slots

    def _next_search_moment(self, moment: DateTime) -> DateTime:
        """
        Align the cursor so the slot it leads to starts on a step boundary.

        A cursor carrying seconds is rounded up to the next whole minute;
        then minutes are added until cursor + buffer before lands on a
        multiple of ``slot_start_minute_step`` in the configured zone.
        """
        aligned = floor_to_minute(moment)
        if moment.second:
            aligned = add_minutes(aligned, 1)

        step = self.configuration.slot_start_minute_step
        slot_start = to_zone(add_minutes(aligned, self.configuration.buffer_before), self.configuration.time_zone)
        return add_minutes(aligned, (step - slot_start.minute % step) % step)

    def _slots_for_window(
        self,
        busy_periods: List[BusyPeriod],
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[TimeSlot]:
        """
        Generate slots inside one clipped shift.

        The cursor stands ``buffer before`` minutes ahead of the slot it
        would produce. A busy period starting before the cursor plus the
        full footprint (buffer before, duration, buffer after) pushes the
        cursor to that period's end; otherwise a slot is emitted and the
        cursor moves past it and its trailing buffer.

        The loop runs on UTC instants; slots are handed back in the
        configured zone.
        """
        config = self.configuration
        duration = config.time_slot_duration
        before = config.buffer_before
        after = config.buffer_after
        footprint = before + duration + after

        busy = [(to_utc(period.start_at), to_utc(period.end_at)) for period in busy_periods]
        slots: List[TimeSlot] = []

        search_moment = subtract_minutes(to_utc(window_start), before)
        search_end_moment = subtract_minutes(to_utc(window_end), config.trailing_reach)

        # First busy period not yet ended at the cursor
        busy_index = next(
            (i for i, (_, busy_end) in enumerate(busy) if busy_end > search_moment),
            len(busy),
        )

        max_iterations = minutes_between(window_start, window_end) // duration + len(busy) + 2
        iterations = 0

        while search_moment <= search_end_moment:
            iterations += 1
            if iterations > max_iterations:
                raise SlotSearchError(
                    f"Slot search between {window_start} and {window_end} did not terminate "
                    f"after {max_iterations} iterations"
                )

            search_moment = self._next_search_moment(search_moment)
            if search_moment > search_end_moment:
                break

            if busy_index < len(busy) and busy[busy_index][0] < add_minutes(search_moment, footprint):
                # Too close to the next busy period: resume at its end
                search_moment = max(search_moment, busy[busy_index][1])
                busy_index += 1
                continue

            start_at = add_minutes(search_moment, before)
            end_at = add_minutes(start_at, duration)
            slots.append(TimeSlot(
                start_at=to_zone(start_at, config.time_zone),
                end_at=to_zone(end_at, config.time_zone),
                duration=duration,
            ))

            # The next slot's buffer before is counted from its own cursor
            next_moment = add_minutes(end_at, max(after - before, 0))
            if next_moment <= search_moment:
                raise SlotSearchError(f"Slot search cursor stalled at {search_moment}")
            search_moment = next_moment

        return slots


def get_available_time_slots(
    configuration: TimeSlotsConfiguration,
    from_: Optional[datetime],
    to: Optional[datetime],
    now: Optional[datetime] = None,
) -> List[TimeSlot]:
    """
    Return the bookable slots between from_ and to, ordered by start.

    Raises:
        InvalidWindowError: If from_/to is missing or from_ is after to
    """
    return SlotCalculator(configuration).find_available_slots(from_, to, now).slots
