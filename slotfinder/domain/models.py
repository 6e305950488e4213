"""
Domain models for busy periods, search boundaries and bookable slots.
"""

from dataclasses import dataclass, field
from typing import Dict, List

import pendulum
from pendulum import DateTime

from ..config import PeriodMoment
from .timeutils import to_utc


@dataclass(frozen=True)
class FixedMoment:
    """
    A busy-period bound pinned to one absolute year.

    ``month`` is zero-indexed (0 = January), like every month value the
    configuration carries.
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0

    @property
    def is_recurring(self) -> bool:
        return False

    def resolve(self, year: int, time_zone: str) -> DateTime:
        """Return the absolute moment; ``year`` is ignored."""
        return pendulum.datetime(
            self.year, self.month + 1, self.day, self.hour, self.minute, tz=time_zone
        )


@dataclass(frozen=True)
class RecurringMoment:
    """
    A busy-period bound repeating every year on the same date and time.

    ``month`` is zero-indexed (0 = January).
    """
    month: int
    day: int
    hour: int = 0
    minute: int = 0

    @property
    def is_recurring(self) -> bool:
        return True

    def resolve(self, year: int, time_zone: str) -> DateTime:
        """
        Return the occurrence in ``year``.

        Raises ValueError when the date does not exist that year
        (29 February outside leap years).
        """
        return pendulum.datetime(
            year, self.month + 1, self.day, self.hour, self.minute, tz=time_zone
        )


def to_moment(moment: PeriodMoment) -> FixedMoment | RecurringMoment:
    """Turn a configured moment into its fixed or recurring variant; missing hour or minute mean 0."""
    hour = moment.hour or 0
    minute = moment.minute or 0
    if moment.year is None:
        return RecurringMoment(month=moment.month, day=moment.day, hour=hour, minute=minute)
    return FixedMoment(year=moment.year, month=moment.month, day=moment.day, hour=hour, minute=minute)


@dataclass(frozen=True)
class BusyPeriod:
    """A resolved busy interval in the configured timezone."""
    start_at: DateTime
    end_at: DateTime

    def overlaps(self, start: DateTime, end: DateTime) -> bool:
        """Check if this period intersects [start, end] (bounds included)."""
        return to_utc(self.start_at) <= to_utc(end) and to_utc(self.end_at) >= to_utc(start)

    def __str__(self) -> str:
        return f"{self.start_at.format('YYYY-MM-DD HH:mm')} - {self.end_at.format('YYYY-MM-DD HH:mm')}"


@dataclass(frozen=True)
class Boundaries:
    """
    Effective search window.

    ``first_from`` may be after ``last_to`` when the lead time or the
    days-ahead cap leave nothing to search; such a window yields no slots.
    """
    first_from: DateTime
    last_to: DateTime

    def is_empty(self) -> bool:
        return to_utc(self.first_from) > to_utc(self.last_to)


@dataclass
class UnavailabilityIndex:
    """Busy periods grouped per local calendar day, sorted by start."""
    per_day: Dict[str, List[BusyPeriod]] = field(default_factory=dict)
    malformed: int = 0
    out_of_window: int = 0

    @property
    def dropped(self) -> int:
        return self.malformed + self.out_of_window

    def for_day(self, key: str) -> List[BusyPeriod]:
        return self.per_day.get(key, [])


@dataclass(frozen=True)
class TimeSlot:
    """
    A bookable slot.

    Invariant: ``end_at - start_at`` equals ``duration`` minutes.
    """
    start_at: DateTime
    end_at: DateTime
    duration: int

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | HH:mm - HH:mm
        """
        return (
            f"{self.start_at.format('dddd, YYYY-MM-DD')} | "
            f"{self.start_at.format('HH:mm')} - {self.end_at.format('HH:mm')} "
            f"({self.duration} min)"
        )


@dataclass
class SlotSearchResult:
    """Slots found by one search, with the data that shaped them."""
    slots: List[TimeSlot]
    boundaries: Boundaries
    index: UnavailabilityIndex
