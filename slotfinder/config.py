"""
Configuration management using Pydantic.

Field names are snake_case; every model also accepts the camelCase keys
(``timeSlotDuration``, ``isoWeekDay``, ``startAt``...) so configuration
files keep their historical spelling.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class PeriodMoment(_ConfigModel):
    """
    A possibly partial moment bounding a busy period.

    ``month`` is zero-indexed: 0 is January, 11 is December.
    Without ``year`` the moment repeats every year.
    """
    year: Optional[int] = None
    month: int = Field(ge=0, le=11)
    day: int = Field(ge=1, le=31)
    hour: Optional[int] = Field(default=None, ge=0, le=23)
    minute: Optional[int] = Field(default=None, ge=0, le=59)


class Period(_ConfigModel):
    """
    A busy period. When ``start_at`` has a year, ``end_at`` must have one too;
    mixed pairs are tolerated here and discarded during the search.
    """
    start_at: PeriodMoment
    end_at: PeriodMoment

    @property
    def is_mixed(self) -> bool:
        return (self.start_at.year is None) != (self.end_at.year is None)


class Shift(_ConfigModel):
    """A bookable time-of-day window inside one calendar day."""
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)


class AvailablePeriod(_ConfigModel):
    """Shifts for one ISO weekday (1 = Monday, 7 = Sunday)."""
    iso_week_day: int = Field(ge=1, le=7)
    shifts: List[Shift] = Field(default_factory=list)


class TimeSlotsConfiguration(_ConfigModel):
    """Rules used to search bookable slots."""
    time_slot_duration: int
    available_periods: List[AvailablePeriod] = Field(default_factory=list)
    slot_start_minute_step: int = 5
    unavailable_periods: List[Period] = Field(default_factory=list)
    min_available_time_before_slot: int = 0
    min_available_time_after_slot: Optional[int] = None
    min_time_before_first_slot: int = 0
    max_days_before_last_slot: Optional[int] = None
    time_zone: str

    @field_validator("time_slot_duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("timeSlotDuration must be greater than zero")
        return value

    @field_validator("slot_start_minute_step")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Validate step is between 1 and 60 minutes."""
        if not 1 <= value <= 60:
            raise ValueError(f"slotStartMinuteStep must be between 1 and 60, got {value}")
        return value

    @field_validator(
        "min_available_time_before_slot",
        "min_available_time_after_slot",
        "min_time_before_first_slot",
        "max_days_before_last_slot",
    )
    @classmethod
    def validate_not_negative(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError(f"Value must not be negative, got {value}")
        return value

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: '{value}'") from exc
        return value

    @property
    def buffer_before(self) -> int:
        return self.min_available_time_before_slot

    @property
    def buffer_after(self) -> int:
        """Idle time required after a slot; unset means none."""
        return self.min_available_time_after_slot or 0

    @property
    def trailing_reach(self) -> int:
        """Minutes a slot occupies past its search cursor: buffer before plus duration."""
        return self.time_slot_duration + self.min_available_time_before_slot

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "TimeSlotsConfiguration":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            TimeSlotsConfiguration instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a slotfinder.yaml file. See slotfinder.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for slotfinder.yaml in current directory
    config_path = Path.cwd() / "slotfinder.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "slotfinder.yaml"

    return config_path
