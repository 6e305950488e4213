"""
Indexing of busy periods per calendar day.

Busy periods come in with fixed or recurring (yearless) bounds. They are
resolved in the configured timezone, filtered against the search window
and grouped by local date so that each shift only scans its own day.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from pendulum import DateTime

from ..config import Period, TimeSlotsConfiguration
from .models import Boundaries, BusyPeriod, UnavailabilityIndex, to_moment
from .timeutils import add_minutes, day_key, local_date, next_day, subtract_minutes, to_utc

logger = logging.getLogger(__name__)


def _wraps_year(period: Period) -> bool:
    """True when a yearless period ends earlier in the calendar than it starts (31 Dec -> 1 Jan)."""
    return (period.end_at.month, period.end_at.day) < (period.start_at.month, period.start_at.day)


def _resolve_occurrences(
    period: Period,
    years: Iterable[int],
    time_zone: str,
) -> Iterator[Tuple[DateTime, DateTime]]:
    """
    Yield (start, end) for every occurrence of a period.

    Fixed periods yield once; recurring ones once per year in ``years``.
    Raises ValueError for a fixed period on a date that does not exist.
    """
    start_moment = to_moment(period.start_at)
    end_moment = to_moment(period.end_at)

    if not start_moment.is_recurring:
        yield (
            start_moment.resolve(period.start_at.year, time_zone),
            end_moment.resolve(period.end_at.year, time_zone),
        )
        return

    end_year_offset = 1 if _wraps_year(period) else 0
    for year in years:
        try:
            start_at = start_moment.resolve(year, time_zone)
            end_at = end_moment.resolve(year + end_year_offset, time_zone)
        except ValueError:
            # e.g. 29 February outside leap years
            logger.debug("Skipping %s occurrence of recurring period %s", year, period)
            continue
        yield start_at, end_at


def _bucket(
    index: UnavailabilityIndex,
    busy: BusyPeriod,
    boundaries: Boundaries,
    configuration: TimeSlotsConfiguration,
) -> None:
    """
    File a busy period under every window date whose slots it can reach.

    A slot of day D keeps its buffers inside
    [D 00:00 - buffer before, D 24:00 + buffer after], so a period counts
    for the dates from ``start - buffer after`` to ``end + buffer before``.
    """
    day = max(
        local_date(subtract_minutes(busy.start_at, configuration.buffer_after)),
        local_date(boundaries.first_from),
    )
    last_day = min(
        local_date(add_minutes(busy.end_at, configuration.buffer_before)),
        local_date(boundaries.last_to),
    )
    while day <= last_day:
        index.per_day.setdefault(day_key(day), []).append(busy)
        day = next_day(day)


def index_unavailable_periods(
    configuration: TimeSlotsConfiguration,
    boundaries: Boundaries,
    periods: Optional[List[Period]] = None,
) -> UnavailabilityIndex:
    """
    Resolve busy periods and group them per local calendar day.

    Periods that are malformed (start after end, fixed and recurring bounds
    mixed, impossible dates) or that do not touch
    [first_from - buffer before, last_to + duration + buffer before]
    are dropped and counted instead of failing the search.

    Args:
        configuration: Search rules (timezone, buffers, busy periods)
        boundaries: Effective search window
        periods: Busy periods to index; defaults to the configured ones

    Returns:
        UnavailabilityIndex with sorted per-day buckets and drop counters
    """
    if periods is None:
        periods = configuration.unavailable_periods

    time_zone = configuration.time_zone
    filtering_min = to_utc(subtract_minutes(boundaries.first_from, configuration.buffer_before))
    filtering_max = to_utc(add_minutes(boundaries.last_to, configuration.trailing_reach))
    years = range(boundaries.first_from.year - 1, boundaries.last_to.year + 1)

    index = UnavailabilityIndex()

    for period in periods:
        if period.is_mixed:
            logger.debug("Dropping busy period mixing fixed and recurring bounds: %s", period)
            index.malformed += 1
            continue

        resolved = retained = inverted = 0
        try:
            for start_at, end_at in _resolve_occurrences(period, years, time_zone):
                resolved += 1
                if to_utc(start_at) > to_utc(end_at):
                    logger.debug("Dropping busy period starting after its end: %s - %s", start_at, end_at)
                    inverted += 1
                    continue
                if to_utc(start_at) > filtering_max or to_utc(end_at) < filtering_min:
                    continue
                _bucket(index, BusyPeriod(start_at=start_at, end_at=end_at), boundaries, configuration)
                retained += 1
        except ValueError as exc:
            logger.debug("Dropping busy period with an impossible date (%s): %s", exc, period)
            index.malformed += 1
            continue

        if retained:
            continue
        if not resolved or inverted == resolved:
            index.malformed += 1
        else:
            index.out_of_window += 1

    for bucket in index.per_day.values():
        bucket.sort(key=lambda busy: to_utc(busy.start_at))

    if index.dropped:
        logger.debug(
            "Dropped %d busy period(s): %d malformed, %d outside the search window",
            index.dropped, index.malformed, index.out_of_window,
        )

    return index
