"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from slotfinder.config import Period, PeriodMoment, Shift, TimeSlotsConfiguration

CONFIG_YAML = """\
timeSlotDuration: 30
slotStartMinuteStep: 15
minAvailableTimeBeforeSlot: 10
timeZone: Europe/Paris
availablePeriods:
  - isoWeekDay: 1
    shifts:
      - startTime: "09:00"
        endTime: "12:00"
unavailablePeriods:
  - startAt: {year: 2020, month: 9, day: 16, hour: 12}
    endAt: {year: 2020, month: 9, day: 16, hour: 14}
  - startAt: {month: 11, day: 25}
    endAt: {month: 11, day: 26}
"""


class TestLoadFromYaml:
    """Tests for TimeSlotsConfiguration.load_from_yaml."""

    def test_load_camel_case_keys(self, tmp_path):
        config_path = tmp_path / "slotfinder.yaml"
        config_path.write_text(CONFIG_YAML, encoding="utf-8")

        config = TimeSlotsConfiguration.load_from_yaml(config_path)

        assert config.time_slot_duration == 30
        assert config.slot_start_minute_step == 15
        assert config.min_available_time_before_slot == 10
        assert config.time_zone == "Europe/Paris"
        assert config.available_periods[0].shifts[0].start_time == "09:00"
        assert config.unavailable_periods[0].start_at.month == 9
        assert config.unavailable_periods[1].start_at.year is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            TimeSlotsConfiguration.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("timeSlotDuration: [30\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            TimeSlotsConfiguration.load_from_yaml(config_path)

    def test_root_must_be_mapping(self, tmp_path):
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping at the root"):
            TimeSlotsConfiguration.load_from_yaml(config_path)

    def test_missing_required_fields(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("", encoding="utf-8")

        with pytest.raises(ValidationError):
            TimeSlotsConfiguration.load_from_yaml(config_path)


class TestTimeSlotsConfiguration:
    """Tests for field validation and derived values."""

    def test_defaults(self):
        config = TimeSlotsConfiguration(time_slot_duration=15, time_zone="UTC")

        assert config.slot_start_minute_step == 5
        assert config.available_periods == []
        assert config.unavailable_periods == []
        assert config.min_available_time_after_slot is None
        assert config.max_days_before_last_slot is None
        assert config.buffer_after == 0

    def test_trailing_reach(self):
        config = TimeSlotsConfiguration(
            time_slot_duration=30,
            min_available_time_before_slot=10,
            min_available_time_after_slot=20,
            time_zone="UTC",
        )

        assert config.buffer_before == 10
        assert config.buffer_after == 20
        assert config.trailing_reach == 40

    @pytest.mark.parametrize(
        "overrides",
        [
            {"time_slot_duration": 0},
            {"slot_start_minute_step": 0},
            {"slot_start_minute_step": 61},
            {"min_available_time_before_slot": -1},
            {"min_available_time_after_slot": -5},
            {"max_days_before_last_slot": -1},
            {"time_zone": "Mars/Olympus_Mons"},
        ],
    )
    def test_invalid_values(self, overrides):
        data = {"time_slot_duration": 15, "time_zone": "Europe/Paris"}
        data.update(overrides)

        with pytest.raises(ValidationError):
            TimeSlotsConfiguration(**data)

    def test_zero_max_days_is_kept(self):
        config = TimeSlotsConfiguration(time_slot_duration=15, time_zone="UTC", max_days_before_last_slot=0)

        assert config.max_days_before_last_slot == 0


class TestPeriodModels:
    """Tests for busy period and shift models."""

    @pytest.mark.parametrize("month", [-1, 12])
    def test_month_is_zero_indexed(self, month):
        with pytest.raises(ValidationError):
            PeriodMoment(month=month, day=1)

    def test_december_is_eleven(self):
        assert PeriodMoment(month=11, day=31).month == 11

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon"])
    def test_shift_time_format(self, value):
        with pytest.raises(ValidationError):
            Shift(start_time=value, end_time="23:00")

    def test_mixed_period(self):
        period = Period.model_validate({
            "startAt": {"year": 2020, "month": 9, "day": 16},
            "endAt": {"month": 9, "day": 17},
        })

        assert period.is_mixed
