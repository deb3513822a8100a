"""
Ephemeris provider backed by the astral package.
"""

import math
from datetime import datetime
from typing import Callable, Optional

from astral import Observer, moon
from astral.sun import dawn, dusk, sunrise, sunset
from pendulum import DateTime

from ..domain.exceptions import EphemerisError
from ..services.astronomy import MoonIllumination, SunTimes

# astral reports the lunar phase on a 0 to 28 scale (0 new, 14 full).
ASTRAL_PHASE_SCALE = 28.0

# Solar depression angles (degrees below the horizon) for each twilight.
CIVIL_DEPRESSION = 6
NAUTICAL_DEPRESSION = 12
ASTRONOMICAL_DEPRESSION = 18


class AstralEphemeris:
    """
    Solar and lunar calculations for ``AstronomyService``.

    Events are computed for the calendar date of ``date`` in its own timezone
    and returned in that timezone.
    """

    def sun_times(self, date: DateTime, latitude: float, longitude: float) -> SunTimes:
        """
        Get sunrise, sunset and the three twilights for one day.

        A twilight the sun never reaches that day (e.g. astronomical twilight
        around midsummer at high latitudes) is reported as None.

        Args:
            date: Start of the day, carrying the requested timezone
            latitude: Degrees north
            longitude: Degrees east

        Returns:
            SunTimes with timezone-aware values

        Raises:
            EphemerisError: If the sun does not rise or set that day
        """
        observer = Observer(latitude=latitude, longitude=longitude)
        day = date.date()
        tz = date.tzinfo

        try:
            rise = sunrise(observer, day, tzinfo=tz)
            set_ = sunset(observer, day, tzinfo=tz)
        except ValueError as exc:
            raise EphemerisError(
                f"The sun does not rise and set at ({latitude}, {longitude}) on {day}: {exc}"
            ) from exc

        def twilight(event: Callable, depression: int) -> Optional[datetime]:
            try:
                return event(observer, day, depression=depression, tzinfo=tz)
            except ValueError:
                return None

        return SunTimes(
            sunrise=rise,
            sunset=set_,
            dawn=twilight(dawn, CIVIL_DEPRESSION),
            dusk=twilight(dusk, CIVIL_DEPRESSION),
            nautical_dawn=twilight(dawn, NAUTICAL_DEPRESSION),
            nautical_dusk=twilight(dusk, NAUTICAL_DEPRESSION),
            astronomical_dawn=twilight(dawn, ASTRONOMICAL_DEPRESSION),
            astronomical_dusk=twilight(dusk, ASTRONOMICAL_DEPRESSION),
        )

    def moon_illumination(self, date: DateTime) -> MoonIllumination:
        phase = (moon.phase(date.date()) / ASTRAL_PHASE_SCALE) % 1.0
        fraction = (1 - math.cos(2 * math.pi * phase)) / 2

        return MoonIllumination(phase=round(phase, 4), fraction=round(fraction, 4))
