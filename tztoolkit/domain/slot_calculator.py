"""
Core business logic for finding meeting slots across timezones.

Pure domain logic without external dependencies (no API calls, no I/O).
"""

from dataclasses import dataclass, field
from datetime import time
from typing import Any, Dict, List, Optional, Sequence

from pendulum import DateTime

from .exceptions import ValidationError
from .models import MeetingSlot, Participant, ParticipantTime, SlotFit, TimeRange, WorkingWindow
from .parser import parse_time
from .timezones import validate_timezone

SCAN_STEP_MINUTES = 30


@dataclass
class SlotSearchResult:
    """Candidate slots for one reference day plus the best-scoring one."""
    date: DateTime
    slots: List[MeetingSlot] = field(default_factory=list)
    optimal: Optional[MeetingSlot] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.to_date_string(),
            "suggested_time_slots": [slot.to_dict() for slot in self.slots],
            "optimal_time_slot": self.optimal.to_dict() if self.optimal else None,
        }


class MeetingSlotFinder:
    """
    Finds meeting times that suit every participant.

    Algorithm:
    1. Anchor the search to the first participant's timezone and date
    2. Build each participant's working range for that day
    3. Scan the reference day in 30-minute steps, one candidate per step
    4. Keep candidates that fit every participant's range
    5. Score kept slots by distance from each participant's mid-day
    """

    def __init__(self, fit: SlotFit = SlotFit.CONTAIN):
        self.fit = SlotFit(fit)

    def find_slots(
        self,
        participants: Sequence[Participant],
        date: Optional[str] = None,
        duration_minutes: int = 60,
        start_hour: int = 9,
        end_hour: int = 17
    ) -> SlotSearchResult:
        """
        Find all candidate slots on a given day.

        Args:
            participants: People to schedule, each with an IANA timezone
            date: Meeting date (any parser input); defaults to today
            duration_minutes: Meeting length
            start_hour: Earliest local hour for every participant
            end_hour: Latest local hour for every participant

        Returns:
            SlotSearchResult; an empty slot list is not an error

        Raises:
            ValidationError: On invalid participants, timezones, hours or duration
        """
        self._validate(participants, duration_minutes, start_hour, end_hour)

        reference_zone = participants[0].timezone
        meeting_day = parse_time(date, reference_zone).start_of("day")

        working_ranges = self._get_working_ranges(participants, meeting_day, start_hour, end_hour)

        slots: List[MeetingSlot] = []
        for candidate in self._scan_candidates(meeting_day, duration_minutes):
            if all(self.fit.accepts(candidate, working) for working in working_ranges):
                slots.append(
                    MeetingSlot(
                        time_range=candidate,
                        participant_times=self._participant_times(participants, candidate),
                        score=self._score(candidate, participants, start_hour, end_hour),
                    )
                )

        optimal = min(slots, key=lambda slot: slot.score) if slots else None

        return SlotSearchResult(date=meeting_day, slots=slots, optimal=optimal)

    @staticmethod
    def _validate(
        participants: Sequence[Participant],
        duration_minutes: int,
        start_hour: int,
        end_hour: int
    ) -> None:
        if not participants:
            raise ValidationError("participants", "At least one participant is required")

        for participant in participants:
            validate_timezone(participant.timezone, f"timezone for {participant.name}")

        if not (0 <= start_hour <= 23 and 0 <= end_hour <= 23) or start_hour >= end_hour:
            raise ValidationError(
                "start_hour",
                "Invalid start or end hour. Hours must be between 0-23 and "
                "start hour must be less than end hour."
            )

        if duration_minutes <= 0:
            raise ValidationError("duration", "Meeting duration must be greater than zero")

    @staticmethod
    def _get_working_ranges(
        participants: Sequence[Participant],
        meeting_day: DateTime,
        start_hour: int,
        end_hour: int
    ) -> List[TimeRange]:
        """
        Working range per participant, on the meeting's calendar date in the
        participant's own timezone.
        """
        ranges: List[TimeRange] = []

        for participant in participants:
            window = WorkingWindow(
                name=participant.name,
                timezone=participant.timezone,
                start_time=time(hour=start_hour),
                end_time=time(hour=end_hour),
            )
            ranges.append(window.materialize(meeting_day.date()))

        return ranges

    @staticmethod
    def _scan_candidates(meeting_day: DateTime, duration_minutes: int) -> List[TimeRange]:
        """One candidate per scan step from 00:00 up to 23:59 of the reference day."""
        candidates: List[TimeRange] = []
        day_end = meeting_day.set(hour=23, minute=59)
        current = meeting_day

        while current < day_end:
            candidates.append(TimeRange(start=current, end=current.add(minutes=duration_minutes)))
            current = current.add(minutes=SCAN_STEP_MINUTES)

        return candidates

    @staticmethod
    def _participant_times(
        participants: Sequence[Participant],
        candidate: TimeRange
    ) -> List[ParticipantTime]:
        return [
            ParticipantTime(
                name=participant.name,
                timezone=participant.timezone,
                local_start=candidate.start.in_timezone(participant.timezone),
                local_end=candidate.end.in_timezone(participant.timezone),
            )
            for participant in participants
        ]

    @staticmethod
    def _score(
        candidate: TimeRange,
        participants: Sequence[Participant],
        start_hour: int,
        end_hour: int
    ) -> float:
        """
        Sum of hour distances between the local start and the window midpoint.
        Lower is better.
        """
        midpoint = (start_hour + end_hour) / 2
        total = 0.0

        for participant in participants:
            local_start = candidate.start.in_timezone(participant.timezone)
            total += abs(local_start.hour + local_start.minute / 60 - midpoint)

        return total
