"""
Tests for the per-day busy period index.
"""

import pendulum

from slotfinder.config import TimeSlotsConfiguration
from slotfinder.domain.models import Boundaries
from slotfinder.domain.unavailability import index_unavailable_periods

TZ = "Europe/Paris"


def _config(unavailable_periods, **overrides) -> TimeSlotsConfiguration:
    data = {
        "time_slot_duration": 15,
        "time_zone": TZ,
        "unavailable_periods": unavailable_periods,
    }
    data.update(overrides)
    return TimeSlotsConfiguration(**data)


def _period(start: dict, end: dict) -> dict:
    return {"startAt": start, "endAt": end}


def _window(first: str, last: str) -> Boundaries:
    return Boundaries(first_from=pendulum.parse(first, tz=TZ), last_to=pendulum.parse(last, tz=TZ))


OCTOBER_16 = _window("2020-10-16T00:00:00", "2020-10-16T23:59:00")


class TestIndexUnavailablePeriods:
    """Tests for index_unavailable_periods."""

    def test_buckets_are_sorted_by_start(self):
        config = _config([
            _period({"year": 2020, "month": 9, "day": 16, "hour": 14}, {"year": 2020, "month": 9, "day": 16, "hour": 15}),
            _period({"year": 2020, "month": 9, "day": 16, "hour": 11}, {"year": 2020, "month": 9, "day": 16, "hour": 12}),
        ])

        index = index_unavailable_periods(config, OCTOBER_16)

        assert [busy.start_at.hour for busy in index.for_day("2020-10-16")] == [11, 14]
        assert index.dropped == 0

    def test_recurring_period_is_resolved_in_window_year(self):
        config = _config([_period({"month": 9, "day": 16, "hour": 12}, {"month": 9, "day": 16, "hour": 13})])

        index = index_unavailable_periods(config, OCTOBER_16)

        bucket = index.for_day("2020-10-16")
        assert len(bucket) == 1
        assert bucket[0].start_at == pendulum.datetime(2020, 10, 16, 12, tz=TZ)
        assert bucket[0].start_at.timezone_name == TZ
        assert index.dropped == 0

    def test_recurring_period_over_new_year_ends_next_year(self):
        config = _config([_period({"month": 11, "day": 31, "hour": 22}, {"month": 0, "day": 1, "hour": 2})])

        index = index_unavailable_periods(config, _window("2020-12-31T00:00:00", "2021-01-01T23:59:00"))

        bucket = index.for_day("2020-12-31")
        assert len(bucket) == 1
        assert bucket[0].end_at == pendulum.datetime(2021, 1, 1, 2, tz=TZ)
        assert index.for_day("2021-01-01") == bucket

    def test_period_spanning_days_is_filed_under_each_day(self):
        config = _config([
            _period({"year": 2020, "month": 9, "day": 16, "hour": 20}, {"year": 2020, "month": 9, "day": 18, "hour": 2}),
        ])

        index = index_unavailable_periods(config, _window("2020-10-16T00:00:00", "2020-10-18T23:59:00"))

        for key in ("2020-10-16", "2020-10-17", "2020-10-18"):
            assert len(index.for_day(key)) == 1
        assert index.for_day("2020-10-19") == []

    def test_mixed_period_is_malformed(self):
        config = _config([_period({"year": 2020, "month": 9, "day": 16, "hour": 12}, {"month": 9, "day": 16, "hour": 13})])

        index = index_unavailable_periods(config, OCTOBER_16)

        assert index.malformed == 1
        assert index.per_day == {}

    def test_inverted_period_is_malformed(self):
        config = _config([
            _period({"year": 2020, "month": 9, "day": 16, "hour": 14}, {"year": 2020, "month": 9, "day": 16, "hour": 12}),
        ])

        index = index_unavailable_periods(config, OCTOBER_16)

        assert index.malformed == 1
        assert index.out_of_window == 0

    def test_impossible_fixed_date_is_malformed(self):
        config = _config([
            _period({"year": 2020, "month": 1, "day": 30}, {"year": 2020, "month": 2, "day": 1}),
        ])

        index = index_unavailable_periods(config, OCTOBER_16)

        assert index.malformed == 1

    def test_leap_day_without_any_leap_year_is_malformed(self):
        config = _config([_period({"month": 1, "day": 29, "hour": 9}, {"month": 1, "day": 29, "hour": 10})])

        index = index_unavailable_periods(config, _window("2023-02-27T00:00:00", "2023-03-01T23:59:00"))

        assert index.malformed == 1
        assert index.per_day == {}

    def test_period_outside_window_is_counted(self):
        config = _config([
            _period({"year": 2019, "month": 9, "day": 16, "hour": 12}, {"year": 2019, "month": 9, "day": 16, "hour": 13}),
        ])

        index = index_unavailable_periods(config, OCTOBER_16)

        assert index.out_of_window == 1
        assert index.malformed == 0
        assert index.dropped == 1

    def test_filter_extends_by_buffer_before(self):
        """Periods ending within the buffer before the window start are kept."""
        window = _window("2020-10-16T10:00:00", "2020-10-16T18:00:00")
        config = _config(
            [
                _period({"year": 2020, "month": 9, "day": 16, "hour": 8}, {"year": 2020, "month": 9, "day": 16, "hour": 9, "minute": 50}),
                _period({"year": 2020, "month": 9, "day": 16, "hour": 8}, {"year": 2020, "month": 9, "day": 16, "hour": 9, "minute": 49}),
            ],
            min_available_time_before_slot=10,
        )

        index = index_unavailable_periods(config, window)

        assert [busy.end_at.minute for busy in index.for_day("2020-10-16")] == [50]
        assert index.out_of_window == 1

    def test_filter_extends_by_duration_and_buffer_after_window_end(self):
        """Periods starting up to duration + buffer before past the window end are kept."""
        window = _window("2020-10-16T10:00:00", "2020-10-16T18:00:00")
        config = _config(
            [
                _period({"year": 2020, "month": 9, "day": 16, "hour": 18, "minute": 25}, {"year": 2020, "month": 9, "day": 16, "hour": 19}),
                _period({"year": 2020, "month": 9, "day": 16, "hour": 18, "minute": 26}, {"year": 2020, "month": 9, "day": 16, "hour": 19}),
            ],
            min_available_time_before_slot=10,
        )

        index = index_unavailable_periods(config, window)

        assert [busy.start_at.minute for busy in index.for_day("2020-10-16")] == [25]
        assert index.out_of_window == 1

    def test_explicit_periods_replace_configured_ones(self):
        config = _config([
            _period({"year": 2020, "month": 9, "day": 16, "hour": 12}, {"year": 2020, "month": 9, "day": 16, "hour": 13}),
        ])

        index = index_unavailable_periods(config, OCTOBER_16, periods=[])

        assert index.per_day == {}
        assert index.dropped == 0

    def test_period_is_filed_under_dates_its_buffers_reach(self):
        """A period ending before midnight still counts for the next day within the buffer before."""
        window = _window("2020-10-17T00:00:00", "2020-10-19T23:59:00")
        config = _config(
            [_period({"year": 2020, "month": 9, "day": 17, "hour": 23, "minute": 50}, {"year": 2020, "month": 9, "day": 17, "hour": 23, "minute": 58})],
            min_available_time_before_slot=10,
        )

        index = index_unavailable_periods(config, window)

        assert len(index.for_day("2020-10-17")) == 1
        assert len(index.for_day("2020-10-18")) == 1
        assert index.for_day("2020-10-19") == []

    def test_period_is_filed_under_previous_date_within_buffer_after(self):
        window = _window("2020-10-17T00:00:00", "2020-10-19T23:59:00")
        config = _config(
            [_period({"year": 2020, "month": 9, "day": 18, "hour": 0, "minute": 5}, {"year": 2020, "month": 9, "day": 18, "hour": 1})],
            min_available_time_after_slot=15,
        )

        index = index_unavailable_periods(config, window)

        assert len(index.for_day("2020-10-17")) == 1
        assert len(index.for_day("2020-10-18")) == 1

