"""
Rendering of timestamps and durations for display.
"""

from enum import Enum
from typing import Dict

import pendulum
from pendulum import DateTime


class TimeFormat(str, Enum):
    """Output styles for a single timestamp."""
    SHORT = "short"
    MEDIUM = "medium"
    FULL = "full"
    DRIVE = "drive"
    APPOINTMENT = "appointment"


class DateStyle(str, Enum):
    """Styles offered by the date formatting tool."""
    SHORT = "short"
    MEDIUM = "medium"
    FULL = "full"
    ISO = "iso"
    RELATIVE = "relative"


# Canonical round-trip format; carries no zone.
DRIVE_FORMAT = "YYYY-MM-DD HH:mm:ss"

DATETIME_PATTERNS: Dict[TimeFormat, str] = {
    TimeFormat.SHORT: "M/D/YYYY, h:mm A",
    TimeFormat.MEDIUM: "MMM D, YYYY, h:mm A",
    TimeFormat.FULL: "MMMM D, YYYY [at] h:mm A zz",
    TimeFormat.DRIVE: DRIVE_FORMAT,
}

# (date, time, date-time) patterns per style.
DATE_STYLE_PATTERNS: Dict[DateStyle, tuple] = {
    DateStyle.SHORT: ("M/D/YYYY", "h:mm A", "M/D/YYYY, h:mm A"),
    DateStyle.MEDIUM: ("MMM D, YYYY", "h:mm:ss A", "MMM D, YYYY, h:mm A"),
    DateStyle.FULL: ("MMMM D, YYYY", "h:mm:ss A", "MMMM D, YYYY [at] h:mm A zz"),
}

TIME_SIMPLE = "h:mm A"
TIME_WITH_SECONDS = "h:mm:ss A"

DEFAULT_LOCALE = "en"


def resolve_locale(locale: str | None) -> str:
    """
    Map a BCP-47 style tag (``en-US``, ``pt_BR``, ``fr``) to a pendulum locale.

    Falls back to the language part, then to English.
    """
    if not locale:
        return DEFAULT_LOCALE

    normalized = locale.replace("-", "_").lower()
    candidates = [normalized, normalized.split("_")[0]]
    sample = pendulum.datetime(2000, 1, 1)

    for candidate in candidates:
        try:
            sample.format("MMMM", locale=candidate)
        except (ValueError, ModuleNotFoundError):
            continue
        return candidate

    return DEFAULT_LOCALE


def format_datetime(dt: DateTime, fmt: TimeFormat | str = TimeFormat.MEDIUM, locale: str = DEFAULT_LOCALE) -> str:
    """
    Format a timestamp in one of the supported output styles.

    ``drive`` yields ``YYYY-MM-DD HH:mm:ss`` in the timestamp's own zone and is
    the one style the parser re-ingests losslessly; ``appointment`` is strict
    ISO-8601 with offset.
    """
    style = TimeFormat(fmt)

    if style is TimeFormat.APPOINTMENT:
        return dt.isoformat()

    return dt.format(DATETIME_PATTERNS[style], locale=resolve_locale(locale))


def format_time_simple(dt: DateTime) -> str:
    """Clock time like ``9:30 AM``."""
    return dt.format(TIME_SIMPLE, locale=DEFAULT_LOCALE)


def format_duration(minutes: float) -> str:
    """
    Format a duration in minutes to a human-readable string.

    Example: 150 -> "2 hours 30 minutes"
    """
    total = int(minutes)
    hours, remaining = divmod(total, 60)

    def plural(value: int, unit: str) -> str:
        return f"{value} {unit}{'' if value == 1 else 's'}"

    if hours == 0:
        return plural(remaining, "minute")
    if remaining == 0:
        return plural(hours, "hour")
    return f"{plural(hours, 'hour')} {plural(remaining, 'minute')}"
