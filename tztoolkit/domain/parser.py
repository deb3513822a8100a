"""
Format-tolerant time parsing.

Inputs come from heterogeneous upstream systems that do not agree on a date
convention, so parsing walks an ordered chain of interpretations and takes the
first that succeeds:

1. absent input -> now
2. strict ISO-8601
3. relative keywords (today / tomorrow / yesterday)
4. a fixed table of date and date-time formats
5. time-only formats, placed on today's date
6. fallback -> now, with a warning

Steps 4 and 5 are driven by ``pendulum.from_format`` token strings. A string
whose trailing UTC offset is out of range (hours above 23 or minutes above 59)
is not a real timestamp and goes straight to the fallback.

The parser never raises for unparseable text. An invalid timezone, however,
is rejected with ``ValidationError``.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Callable, Dict, List, Optional

import pendulum
from pendulum import DateTime

from .timezones import get_timezone

logger = logging.getLogger(__name__)


class ParseSource(str, Enum):
    """Which step of the chain produced the timestamp."""
    NOW = "now"
    ISO = "iso"
    RELATIVE = "relative"
    FORMAT = "format"
    TIME_ONLY = "time_only"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ParsedTime:
    """A parsed timestamp together with how it was obtained."""
    value: DateTime
    source: ParseSource
    pattern: Optional[str] = None

    @property
    def degraded(self) -> bool:
        """True when nothing matched and the value is a stand-in for "now"."""
        return self.source is ParseSource.FALLBACK


RELATIVE_KEYWORDS: Dict[str, int] = {
    "today": 0,
    "tomorrow": 1,
    "yesterday": -1,
}

# pendulum token strings, tried in order. A trailing ``Z`` token carries the
# embedded offset, which beats the requested zone.
DATE_FORMATS: List[str] = [
    "YYYY-MM-DD HH:mm:ssZ",
    "YYYY-MM-DD HH:mm:ss",
    "YYYY-MM-DD HH:mmZ",
    "YYYY-MM-DD HH:mm",
    "YYYY-MM-DD",
    "MM/DD/YYYY HH:mm:ss",
    "MM/DD/YYYY HH:mm",
    "MM/DD/YYYY",
    "DD/MM/YYYY HH:mm:ss",
    "DD/MM/YYYY HH:mm",
    "DD/MM/YYYY",
    "YYYY/MM/DD",
    "MMMM D, YYYY",
    "D MMMM YYYY",
]

TIME_FORMATS: List[str] = [
    "H:mm:ss",
    "H:mm",
    "h:mm A",
    "h A",
]

_OFFSET_SUFFIX = re.compile(r"[+-]\d{2}:?\d{2}$")
_VALID_OFFSET = re.compile(r"[+-](?:[01]\d|2[0-3]):?[0-5]\d$")


def parse_time(text: Optional[str] = None, zone: str = "UTC") -> DateTime:
    """
    Parse ``text`` into a timezone-aware timestamp.

    Args:
        text: ISO-8601 string, relative keyword, or one of the supported
            date/time formats. ``None`` or blank means "now".
        zone: IANA timezone used for inputs that carry no offset

    Returns:
        Pendulum DateTime; never naive
    """
    return parse_time_detailed(text, zone).value


def parse_time_detailed(text: Optional[str] = None, zone: str = "UTC") -> ParsedTime:
    """Parse like ``parse_time`` but also report which step matched."""
    tz = get_timezone(zone, "timezone")
    raw = (text or "").strip()

    if not raw:
        return ParsedTime(pendulum.now(tz), ParseSource.NOW)

    if not has_invalid_offset(raw):
        steps: List[Callable[[str, object], Optional[ParsedTime]]] = [
            _parse_iso,
            _parse_relative,
            _parse_date_formats,
            _parse_time_formats,
        ]
        for step in steps:
            parsed = step(raw, tz)
            if parsed is not None:
                return parsed

    logger.warning("Unable to parse time string %r, using current time in %s instead", raw, zone)
    return ParsedTime(pendulum.now(tz), ParseSource.FALLBACK)


def has_invalid_offset(text: str) -> bool:
    """True when ``text`` ends in a ``±HH:MM`` offset that no clock can have."""
    return bool(_OFFSET_SUFFIX.search(text)) and not _VALID_OFFSET.search(text)


def _parse_iso(raw: str, tz) -> Optional[ParsedTime]:
    # ISO-8601 proper never contains whitespace; space-separated values are
    # left to the format table.
    if any(char.isspace() for char in raw):
        return None
    # Bare clock readings belong to the time-only step.
    if _match(raw.upper(), TIME_FORMATS, tz) is not None:
        return None

    try:
        value = pendulum.parse(raw, tz=tz, strict=True)
    except (ValueError, TypeError, OverflowError):
        return None

    if isinstance(value, datetime):
        return ParsedTime(_ensure_pendulum(value, tz), ParseSource.ISO)
    if isinstance(value, date):
        return ParsedTime(pendulum.datetime(value.year, value.month, value.day, tz=tz), ParseSource.ISO)
    if isinstance(value, time):
        return ParsedTime(_on_today(value.hour, value.minute, value.second, tz), ParseSource.ISO)

    # Durations and intervals are valid ISO-8601 but not instants.
    return None


def _parse_relative(raw: str, tz) -> Optional[ParsedTime]:
    delta = RELATIVE_KEYWORDS.get(raw.lower())
    if delta is None:
        return None

    value = pendulum.now(tz).start_of("day").add(days=delta)
    return ParsedTime(value, ParseSource.RELATIVE, raw.lower())


def _parse_date_formats(raw: str, tz) -> Optional[ParsedTime]:
    # Month names are matched against the English locale's capitalised forms.
    text = raw.title()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    matched = _match(text, DATE_FORMATS, tz)
    if matched is None:
        return None

    pattern, value = matched
    return ParsedTime(value, ParseSource.FORMAT, pattern)


def _parse_time_formats(raw: str, tz) -> Optional[ParsedTime]:
    # Meridians are matched against the English locale's "AM" / "PM".
    matched = _match(raw.upper(), TIME_FORMATS, tz)
    if matched is None:
        return None

    pattern, value = matched
    return ParsedTime(_on_today(value.hour, value.minute, value.second, tz), ParseSource.TIME_ONLY, pattern)


def _match(text: str, formats: List[str], tz):
    """First ``(format, DateTime)`` pendulum accepts for ``text``, else None."""
    for fmt in formats:
        try:
            if fmt.endswith("Z"):
                value = pendulum.from_format(text, fmt)
            else:
                value = pendulum.from_format(text, fmt, tz=tz)
        except ValueError:
            # No match, or fields out of range (e.g. month 13); try the next format.
            continue
        return fmt, value

    return None


def _on_today(hour: int, minute: int, second: int, tz) -> DateTime:
    return pendulum.now(tz).set(hour=hour, minute=minute, second=second, microsecond=0)


def _ensure_pendulum(value: datetime, tz) -> DateTime:
    if isinstance(value, DateTime) and value.tzinfo is not None:
        return value
    return pendulum.instance(value, tz=tz)
