"""
Resolution of the effective search window.
"""

import logging
from datetime import datetime
from typing import Optional

from ..config import TimeSlotsConfiguration
from .exceptions import InvalidWindowError
from .models import Boundaries
from .timeutils import (
    add_days,
    add_minutes,
    earliest,
    end_of_day,
    floor_to_minute,
    latest,
    now_in,
    to_utc,
    to_zone,
)

logger = logging.getLogger(__name__)


def resolve_boundaries(
    configuration: TimeSlotsConfiguration,
    from_: Optional[datetime],
    to: Optional[datetime],
    now: Optional[datetime] = None,
) -> Boundaries:
    """
    Compute the window slots may be searched in.

    The start is pushed past ``now`` plus the buffer before a slot and the
    minimum booking lead time, then floored to the minute. The end is capped
    at the end of the day ``max_days_before_last_slot`` days from now.

    Args:
        configuration: Search rules
        from_: Requested start of the search
        to: Requested end of the search
        now: Current instant; read from the clock when omitted

    Returns:
        Boundaries in the configured timezone

    Raises:
        InvalidWindowError: If from_/to is missing or from_ is after to
    """
    if from_ is None or to is None:
        raise InvalidWindowError("Invalid boundaries for the search: from and to are required")

    time_zone = configuration.time_zone
    requested_from = to_zone(from_, time_zone)
    requested_to = to_zone(to, time_zone)

    if to_utc(requested_from) > to_utc(requested_to):
        raise InvalidWindowError(
            f"Invalid boundaries for the search: {requested_from} is after {requested_to}"
        )

    current = to_zone(now, time_zone) if now is not None else now_in(time_zone)

    earliest_start = add_minutes(
        current,
        configuration.min_available_time_before_slot + configuration.min_time_before_first_slot,
    )
    first_from = floor_to_minute(latest(requested_from, earliest_start))

    last_to = requested_to
    if configuration.max_days_before_last_slot is not None:
        search_limit = end_of_day(add_days(current, configuration.max_days_before_last_slot))
        last_to = earliest(requested_to, search_limit)

    logger.debug("Search boundaries resolved to %s - %s", first_from, last_to)

    return Boundaries(first_from=first_from, last_to=last_to)
