"""
Configuration management using Pydantic models loaded from YAML.
"""

import datetime
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.formatting import TimeFormat
from .domain.holidays import CustomHoliday, CustomHolidayStore
from .domain.models import SlotFit
from .domain.timezones import is_valid_timezone


class DefaultsConfig(BaseModel):
    """Default settings for meeting searches."""
    duration_minutes: int = 60
    start_hour: int = 9
    end_hour: int = 17
    slot_fit: SlotFit = SlotFit.CONTAIN

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure meeting duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the configured window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self


class CustomHolidayConfig(BaseModel):
    """Custom holiday declared in the config file."""
    name: str
    date: datetime.date
    recurring: bool = False

    def to_domain(self) -> CustomHoliday:
        return CustomHoliday(
            name=self.name,
            date=pendulum.date(self.date.year, self.date.month, self.date.day),
            recurring=self.recurring,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    locale: str = "en"
    format: TimeFormat = TimeFormat.MEDIUM
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    custom_holidays: List[CustomHolidayConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the default timezone is a known IANA identifier."""
        if not is_valid_timezone(value):
            raise ValueError(f"Unknown timezone: {value}")
        return value.strip()

    @field_validator("custom_holidays")
    @classmethod
    def validate_custom_holidays(cls, value: List[CustomHolidayConfig]) -> List[CustomHolidayConfig]:
        """Ensure holiday names are not blank."""
        for holiday in value:
            if not holiday.name.strip():
                raise ValueError(f"Custom holiday on {holiday.date} has an empty name")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load an explicit config file, or the default one if it exists.

        An explicitly given path must exist; a missing default file yields
        the built-in defaults.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()

    def build_holiday_store(self) -> CustomHolidayStore:
        """Holiday store seeded with the configured custom holidays."""
        return CustomHolidayStore(holiday.to_domain() for holiday in self.custom_holidays)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
