"""
IANA timezone validation and offset helpers.
"""

from functools import lru_cache
from typing import List, Optional

import pendulum
from pendulum import DateTime
from pendulum.tz.timezone import Timezone

from .exceptions import ValidationError


COMMON_TIMEZONES: List[str] = [
    "Africa/Cairo",
    "Africa/Johannesburg",
    "Africa/Lagos",
    "America/Anchorage",
    "America/Bogota",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "America/Mexico_City",
    "America/New_York",
    "America/Phoenix",
    "America/Sao_Paulo",
    "America/Toronto",
    "Asia/Bangkok",
    "Asia/Dubai",
    "Asia/Hong_Kong",
    "Asia/Jakarta",
    "Asia/Kolkata",
    "Asia/Seoul",
    "Asia/Shanghai",
    "Asia/Singapore",
    "Asia/Tokyo",
    "Australia/Melbourne",
    "Australia/Sydney",
    "Europe/Amsterdam",
    "Europe/Berlin",
    "Europe/Istanbul",
    "Europe/London",
    "Europe/Madrid",
    "Europe/Moscow",
    "Europe/Paris",
    "Europe/Rome",
    "Pacific/Auckland",
    "Pacific/Honolulu",
    "UTC",
]


@lru_cache(maxsize=256)
def _load_timezone(name: str) -> Timezone:
    return pendulum.timezone(name)


def get_timezone(name: str, field: str = "timezone") -> Timezone:
    """
    Resolve an IANA identifier to a timezone object.

    Lookups are memoised per identifier; the cached rules are never mutated.

    Raises:
        ValidationError: If the identifier is empty or unknown
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(field, f"{field} is required")

    try:
        return _load_timezone(name.strip())
    except (ValueError, KeyError) as exc:
        raise ValidationError(field, f"Invalid {field}: {name}") from exc


def validate_timezone(name: str, field: str = "timezone") -> str:
    """Validate an IANA identifier and return it stripped."""
    get_timezone(name, field)
    return name.strip()


def is_valid_timezone(name: str) -> bool:
    """Check whether an identifier resolves to a known timezone."""
    try:
        get_timezone(name)
    except ValidationError:
        return False
    return True


def offset_minutes(zone: str, at: Optional[DateTime] = None) -> int:
    """UTC offset of ``zone`` in minutes at the given instant (default: now)."""
    instant = at or pendulum.now("UTC")
    return instant.in_timezone(get_timezone(zone)).offset // 60


def format_offset(minutes: int, pad_hours: bool = True) -> str:
    """
    Render an offset in minutes as ``+HH:MM``.

    With ``pad_hours=False`` the hour part is not zero-padded (``+5:30``).
    """
    sign = "+" if minutes >= 0 else "-"
    hours, remainder = divmod(abs(minutes), 60)
    if pad_hours:
        return f"{sign}{hours:02d}:{remainder:02d}"
    return f"{sign}{hours}:{remainder:02d}"


def timezone_difference(from_zone: str, to_zone: str, at: Optional[DateTime] = None) -> int:
    """Minutes that ``to_zone`` is ahead of ``from_zone`` (negative when behind)."""
    instant = at or pendulum.now("UTC")
    return offset_minutes(to_zone, instant) - offset_minutes(from_zone, instant)


def filter_timezones(region: Optional[str] = None) -> List[str]:
    """Return the curated timezone list, optionally limited to a region prefix."""
    if not region:
        return list(COMMON_TIMEZONES)
    return [name for name in COMMON_TIMEZONES if name.startswith(region)]
