"""
Weekly availability helpers: shift merging and configuration validation.
"""

from typing import List, Optional

from ..config import AvailablePeriod, Shift, TimeSlotsConfiguration
from .exceptions import ConfigurationError
from .models import to_moment
from .timeutils import parse_hhmm


def _minutes(hhmm: str) -> int:
    hour, minute = parse_hhmm(hhmm)
    return hour * 60 + minute


def find_weekday_entry(
    available_periods: List[AvailablePeriod],
    iso_week_day: int,
) -> Optional[AvailablePeriod]:
    """Return the first entry for an ISO weekday, or None."""
    for period in available_periods:
        if period.iso_week_day == iso_week_day:
            return period
    return None


def merge_overlapping_shifts(available_periods: List[AvailablePeriod]) -> List[AvailablePeriod]:
    """
    Merge overlapping or touching shifts inside each weekday entry.

    Example: [09:00-12:00, 11:00-13:00, 13:00-14:00] -> [09:00-14:00]

    Raises:
        ConfigurationError: If a shift does not start before it ends
    """
    merged_periods: List[AvailablePeriod] = []

    for period in available_periods:
        for shift in period.shifts:
            if _minutes(shift.start_time) >= _minutes(shift.end_time):
                raise ConfigurationError(
                    f"Shift {shift.start_time}-{shift.end_time} on weekday "
                    f"{period.iso_week_day} must start before it ends"
                )

        sorted_shifts = sorted(period.shifts, key=lambda s: _minutes(s.start_time))
        merged: List[Shift] = []

        for current in sorted_shifts:
            if merged and _minutes(current.start_time) <= _minutes(merged[-1].end_time):
                last = merged[-1]
                end_time = max(last.end_time, current.end_time, key=_minutes)
                merged[-1] = Shift(start_time=last.start_time, end_time=end_time)
            else:
                merged.append(current)

        merged_periods.append(AvailablePeriod(iso_week_day=period.iso_week_day, shifts=merged))

    return merged_periods


def _shift_problems(period: AvailablePeriod) -> List[str]:
    problems: List[str] = []
    for shift in period.shifts:
        if _minutes(shift.start_time) >= _minutes(shift.end_time):
            problems.append(
                f"weekday {period.iso_week_day}: shift {shift.start_time}-{shift.end_time} "
                f"must start before it ends"
            )

    ordered = sorted(period.shifts, key=lambda s: _minutes(s.start_time))
    for previous, current in zip(ordered, ordered[1:]):
        if _minutes(current.start_time) < _minutes(previous.end_time):
            problems.append(
                f"weekday {period.iso_week_day}: shifts {previous.start_time}-{previous.end_time} "
                f"and {current.start_time}-{current.end_time} overlap"
            )
    return problems


def validate_configuration(configuration: TimeSlotsConfiguration) -> bool:
    """
    Check a configuration for semantic problems pydantic cannot see.

    The slot search itself tolerates all of these; callers run this
    beforehand when they want strict input.

    Returns:
        True when the configuration is valid

    Raises:
        ConfigurationError: Listing every problem found
    """
    problems: List[str] = []

    seen_weekdays: set[int] = set()
    for period in configuration.available_periods:
        if period.iso_week_day in seen_weekdays:
            problems.append(f"weekday {period.iso_week_day} is configured more than once")
        seen_weekdays.add(period.iso_week_day)
        problems.extend(_shift_problems(period))

    for position, busy in enumerate(configuration.unavailable_periods):
        if busy.is_mixed:
            problems.append(
                f"unavailable period #{position}: startAt and endAt must both "
                f"have a year or both omit it"
            )
            continue
        if busy.start_at.year is None:
            continue
        try:
            start_at = to_moment(busy.start_at).resolve(busy.start_at.year, configuration.time_zone)
            end_at = to_moment(busy.end_at).resolve(busy.end_at.year, configuration.time_zone)
        except ValueError as exc:
            problems.append(f"unavailable period #{position}: {exc}")
            continue
        if start_at > end_at:
            problems.append(f"unavailable period #{position}: startAt is after endAt")

    if problems:
        raise ConfigurationError("Invalid configuration:\n  - " + "\n  - ".join(problems))

    return True
