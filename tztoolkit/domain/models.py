"""
Domain models for time range, working window and slot calculations.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from .formatting import format_time_simple


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range [start, end).

    Invariant: start must not be after end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: "TimeRange") -> bool:
        """Check if ``other`` lies entirely inside this range."""
        return self.start <= other.start and other.end <= self.end

    def intersect(self, other: "TimeRange") -> "TimeRange | None":
        """
        Calculate the intersection of two time ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return TimeRange(start=start, end=end)

    def in_timezone(self, tz: str) -> "TimeRange":
        """Re-express both bounds in ``tz`` without moving the instants."""
        return TimeRange(start=self.start.in_timezone(tz), end=self.end.in_timezone(tz))

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class Participant:
    """Meeting participant anchored in a timezone."""
    name: str
    timezone: str


@dataclass(frozen=True)
class WorkingWindow:
    """
    A participant's locally defined daily availability.
    """
    name: str
    timezone: str
    start_time: time
    end_time: time

    def materialize(self, reference_date: date) -> TimeRange:
        """
        Build the absolute range for ``reference_date`` in this window's own
        timezone.
        """
        start = pendulum.datetime(
            reference_date.year,
            reference_date.month,
            reference_date.day,
            self.start_time.hour,
            self.start_time.minute,
            tz=self.timezone
        )
        end = pendulum.datetime(
            reference_date.year,
            reference_date.month,
            reference_date.day,
            self.end_time.hour,
            self.end_time.minute,
            tz=self.timezone
        )

        return TimeRange(start=start, end=end)


@dataclass(frozen=True)
class OverlapPeriod:
    """Shared availability of a group of participants."""
    participants: List[str]
    time_range: TimeRange

    @property
    def duration_minutes(self) -> int:
        return self.time_range.duration_minutes()

    def to_dict(self, reference_zone: str) -> Dict[str, Any]:
        local = self.time_range.in_timezone(reference_zone)
        return {
            "participants": list(self.participants),
            "start_time": local.start.isoformat(),
            "end_time": local.end.isoformat(),
            "duration_minutes": self.duration_minutes,
        }


@dataclass(frozen=True)
class ParticipantTime:
    """One participant's local view of a meeting slot."""
    name: str
    timezone: str
    local_start: DateTime
    local_end: DateTime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "timezone": self.timezone,
            "local_start_time": format_time_simple(self.local_start),
            "local_end_time": format_time_simple(self.local_end),
        }


class SlotFit(str, Enum):
    """
    Rule deciding whether a candidate meeting fits a participant's window.

    OVERLAP accepts any candidate that touches the window at all.
    CONTAIN accepts a candidate lying inside the window, or one that covers
    a window shorter than the meeting itself.
    """
    OVERLAP = "overlap"
    CONTAIN = "contain"

    def accepts(self, candidate: TimeRange, window: TimeRange) -> bool:
        if self is SlotFit.OVERLAP:
            return candidate.overlaps(window)
        if window.contains(candidate):
            return True
        return candidate.contains(window)


@dataclass
class MeetingSlot:
    """
    Represents a candidate meeting time valid for all participants.
    """
    time_range: TimeRange
    participant_times: List[ParticipantTime] = field(default_factory=list)
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.time_range.start.isoformat(),
            "end_time": self.time_range.end.isoformat(),
            "participant_times": [entry.to_dict() for entry in self.participant_times],
        }
