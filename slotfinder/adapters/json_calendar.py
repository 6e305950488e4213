"""
Busy-calendar adapter reading unavailable periods from a JSON export.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime
from pydantic import ValidationError

from ..config import Period, PeriodMoment
from ..domain.exceptions import CalendarDataError

logger = logging.getLogger(__name__)


class JsonCalendarSource:
    """
    Loads busy periods from a JSON file.

    The file holds an array of events, each in one of two shapes:

        {"startAt": {"year": 2020, "month": 9, "day": 16, "hour": 12},
         "endAt": {"year": 2020, "month": 9, "day": 16, "hour": 14}}

        {"start": "2020-10-16T12:00:00+02:00", "end": "2020-10-16T14:00:00+02:00"}

    Moments keep the zero-indexed month; ISO strings are converted to fixed
    moments in the requested timezone.
    """

    def __init__(self, path: Path):
        self.path = path

    def _load_events(self) -> List[Dict[str, Any]]:
        """Load the raw event list from the JSON file."""
        if not self.path.exists():
            raise CalendarDataError(f"Calendar file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                events = json.load(f)
        except json.JSONDecodeError as exc:
            raise CalendarDataError(f"Invalid JSON in {self.path}: {exc}") from exc

        if not isinstance(events, list):
            raise CalendarDataError("Calendar file must contain a list of events.")

        return events

    @staticmethod
    def _moment_from_iso(value: str, time_zone: str) -> PeriodMoment:
        parsed = pendulum.parse(value, tz=time_zone)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"'{value}' is not a date and time")
        moment = parsed.in_timezone(time_zone)
        return PeriodMoment(
            year=moment.year,
            month=moment.month - 1,
            day=moment.day,
            hour=moment.hour,
            minute=moment.minute,
        )

    def _parse_event(self, event: Dict[str, Any], time_zone: str) -> Period:
        if "start" in event and "end" in event:
            return Period(
                start_at=self._moment_from_iso(event["start"], time_zone),
                end_at=self._moment_from_iso(event["end"], time_zone),
            )
        return Period.model_validate(event)

    def get_unavailable_periods(self, time_zone: str) -> List[Period]:
        """
        Read busy periods from the calendar file.

        Args:
            time_zone: IANA timezone ISO strings are converted to

        Returns:
            List of Period objects; unreadable events are skipped

        Raises:
            CalendarDataError: If the file is missing or is not a JSON list
        """
        periods: List[Period] = []

        for position, event in enumerate(self._load_events()):
            if not isinstance(event, dict):
                logger.warning("Skipping calendar event #%d: not an object", position)
                continue
            try:
                periods.append(self._parse_event(event, time_zone))
            except (ValidationError, ValueError, TypeError) as exc:
                logger.warning("Skipping calendar event #%d: %s", position, exc)

        logger.debug("Loaded %d busy period(s) from %s", len(periods), self.path)
        return periods
