"""
Sunrise/sunset and moon phase reporting.

The ephemeris maths is delegated to a provider implementing
``EphemerisProtocol``; this service validates inputs, anchors the date in the
requested timezone and shapes the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.exceptions import ValidationError
from ..domain.formatting import TIME_WITH_SECONDS, format_duration
from ..domain.parser import parse_time
from ..domain.timezones import validate_timezone


@dataclass(frozen=True)
class SunTimes:
    """
    Solar events for one date and location; all values timezone-aware.

    Twilight events are None when the sun never reaches that depression.
    """
    sunrise: datetime
    sunset: datetime
    dawn: Optional[datetime]
    dusk: Optional[datetime]
    nautical_dawn: Optional[datetime]
    nautical_dusk: Optional[datetime]
    astronomical_dawn: Optional[datetime]
    astronomical_dusk: Optional[datetime]


@dataclass(frozen=True)
class MoonIllumination:
    """Moon phase in [0, 1) (0 = new, 0.5 = full) and illuminated fraction."""
    phase: float
    fraction: float


class EphemerisProtocol(Protocol):
    """Protocol describing the astronomical calculations the service needs."""

    def sun_times(self, date: DateTime, latitude: float, longitude: float) -> SunTimes:
        """Return solar events for the day starting at ``date``."""

    def moon_illumination(self, date: DateTime) -> MoonIllumination:
        """Return the moon's phase and illumination at ``date``."""


def moon_phase_name(phase: float) -> str:
    """Name the lunar phase for a phase fraction in [0, 1)."""
    if phase < 0.025 or phase >= 0.975:
        return "New Moon"
    if phase < 0.225:
        return "Waxing Crescent"
    if phase < 0.275:
        return "First Quarter"
    if phase < 0.475:
        return "Waxing Gibbous"
    if phase < 0.525:
        return "Full Moon"
    if phase < 0.725:
        return "Waning Gibbous"
    if phase < 0.775:
        return "Last Quarter"
    return "Waning Crescent"


def validate_coordinates(latitude: float, longitude: float) -> None:
    """
    Raises:
        ValidationError: If latitude or longitude is out of range
    """
    if not -90 <= latitude <= 90:
        raise ValidationError("latitude", "Latitude must be between -90 and 90 degrees")
    if not -180 <= longitude <= 180:
        raise ValidationError("longitude", "Longitude must be between -180 and 180 degrees")


class AstronomyService:
    """Validates requests and formats results from an ephemeris provider."""

    def __init__(self, ephemeris: EphemerisProtocol) -> None:
        self._ephemeris = ephemeris

    def sunrise_sunset(
        self,
        date: Optional[str],
        latitude: float,
        longitude: float,
        zone: str = "UTC",
    ) -> Dict[str, Any]:
        validate_coordinates(latitude, longitude)
        zone = validate_timezone(zone)

        day = parse_time(date, zone).start_of("day")
        times = self._ephemeris.sun_times(day, latitude, longitude)

        def local(value: Optional[datetime]) -> Optional[str]:
            if value is None:
                return None
            return pendulum.instance(value).in_timezone(zone).format(TIME_WITH_SECONDS)

        day_length = (times.sunset - times.sunrise).total_seconds() / 60

        return {
            "date": day.to_date_string(),
            "sunrise": local(times.sunrise),
            "sunset": local(times.sunset),
            "civil_twilight": {"dawn": local(times.dawn), "dusk": local(times.dusk)},
            "nautical_twilight": {
                "dawn": local(times.nautical_dawn),
                "dusk": local(times.nautical_dusk),
            },
            "astronomical_twilight": {
                "dawn": local(times.astronomical_dawn),
                "dusk": local(times.astronomical_dusk),
            },
            "day_length": format_duration(day_length),
            "timezone": zone,
        }

    def moon_phase(self, date: Optional[str], zone: str = "UTC") -> Dict[str, Any]:
        zone = validate_timezone(zone)

        day = parse_time(date, zone).start_of("day")
        illumination = self._ephemeris.moon_illumination(day)

        return {
            "date": day.to_date_string(),
            "phase": illumination.phase,
            "name": moon_phase_name(illumination.phase),
            "illumination": illumination.fraction,
            "timezone": zone,
        }
