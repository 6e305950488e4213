"""
Date and time primitives used by the slot search.

Every zone conversion and minute-level calculation the domain needs goes
through these helpers. Minute arithmetic uses pendulum's absolute (UTC
based) units. Two moments sharing a zone compare by wall-clock time and
ignore the DST fold, so ordering is always decided on UTC instants
(`to_utc`, `earliest`, `latest`).
"""

from datetime import datetime

import pendulum
from pendulum import Date, DateTime


def to_zone(moment: datetime, time_zone: str) -> DateTime:
    """
    Convert any datetime into a pendulum DateTime in the given zone.

    Naive datetimes are read as wall-clock time in that zone.
    """
    if moment.tzinfo is None:
        return pendulum.instance(moment, tz=time_zone)
    return pendulum.instance(moment).in_timezone(time_zone)


def to_utc(moment: DateTime) -> DateTime:
    """Same instant in UTC."""
    return moment.in_timezone("UTC")


def earliest(*moments: DateTime) -> DateTime:
    """Earliest of several instants, whatever their zone or fold."""
    return min(moments, key=to_utc)


def latest(*moments: DateTime) -> DateTime:
    return max(moments, key=to_utc)


def now_in(time_zone: str) -> DateTime:
    """Current instant in the given zone."""
    return pendulum.now(time_zone)


def floor_to_minute(moment: DateTime) -> DateTime:
    """Drop seconds and microseconds without re-resolving local time."""
    return moment.subtract(seconds=moment.second, microseconds=moment.microsecond)


def add_minutes(moment: DateTime, minutes: int) -> DateTime:
    return moment.add(minutes=minutes)


def add_days(moment: DateTime, days: int) -> DateTime:
    """Move by calendar days, keeping the local time of day."""
    return moment.add(days=days)


def subtract_minutes(moment: DateTime, minutes: int) -> DateTime:
    return moment.subtract(minutes=minutes)


def end_of_day(moment: DateTime) -> DateTime:
    return moment.end_of("day")


def at_time_of_day(day: Date, hhmm: str, time_zone: str) -> DateTime:
    """Combine a calendar date with an ``HH:mm`` time of day."""
    hour, minute = parse_hhmm(hhmm)
    return pendulum.datetime(day.year, day.month, day.day, hour, minute, tz=time_zone)


def parse_hhmm(hhmm: str) -> tuple[int, int]:
    """Split an ``HH:mm`` string into hour and minute."""
    hour, minute = hhmm.split(":")
    return int(hour), int(minute)


def local_date(moment: DateTime) -> Date:
    """Calendar date of a moment in its own zone."""
    return moment.date()


def next_day(day: Date) -> Date:
    return day.add(days=1)


def day_key(day: Date) -> str:
    """Bucket key of a calendar date, ``YYYY-MM-DD``."""
    return day.isoformat()


def minutes_between(start: DateTime, end: DateTime) -> int:
    """Whole minutes elapsed from start to end."""
    return int((to_utc(end) - to_utc(start)).total_seconds() // 60)
