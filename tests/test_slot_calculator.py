"""
Tests for slot calculator.
"""

import pendulum
import pytest

from tztoolkit.domain.exceptions import ValidationError
from tztoolkit.domain.models import Participant, SlotFit
from tztoolkit.domain.slot_calculator import MeetingSlotFinder


class TestMeetingSlotFinder:
    """Tests for MeetingSlotFinder."""

    def test_single_participant_slots_stay_inside_window(self):
        """Test that a 9-17 window with one-hour meetings yields 09:00 to 16:00 starts."""
        finder = MeetingSlotFinder()

        result = finder.find_slots(
            [Participant("alice", "Europe/Berlin")],
            date="2024-11-25",
            duration_minutes=60,
            start_hour=9,
            end_hour=17
        )

        starts = [slot.time_range.start for slot in result.slots]
        assert starts[0] == pendulum.datetime(2024, 11, 25, 9, 0, tz="Europe/Berlin")
        assert starts[-1] == pendulum.datetime(2024, 11, 25, 16, 0, tz="Europe/Berlin")
        assert len(starts) == 15
        assert all(slot.time_range.duration_minutes() == 60 for slot in result.slots)

    def test_overlap_fit_accepts_partial_candidates(self):
        """Test that the overlap rule admits candidates straddling the window edges."""
        finder = MeetingSlotFinder(fit=SlotFit.OVERLAP)

        result = finder.find_slots([Participant("alice", "UTC")], date="2024-11-25")

        starts = [slot.time_range.start for slot in result.slots]
        assert starts[0] == pendulum.datetime(2024, 11, 25, 8, 30, tz="UTC")
        assert starts[-1] == pendulum.datetime(2024, 11, 25, 16, 30, tz="UTC")
        assert len(starts) == 17

    def test_slots_are_on_the_scan_grid(self):
        """Test that every slot starts on a 30-minute boundary of the reference day."""
        result = MeetingSlotFinder().find_slots(
            [Participant("a", "Asia/Kolkata"), Participant("b", "Europe/London")],
            date="2025-07-14",
            duration_minutes=45
        )

        assert result.slots
        for slot in result.slots:
            local = slot.time_range.start.in_timezone("Asia/Kolkata")
            assert local.minute in (0, 30)
            assert local.date() == pendulum.date(2025, 7, 14)

    def test_two_timezones(self):
        """Test London and New York on a summer day, searched from London."""
        result = MeetingSlotFinder().find_slots(
            [Participant("ldn", "Europe/London"), Participant("nyc", "America/New_York")],
            date="2025-07-14",
            duration_minutes=60
        )

        starts = [slot.time_range.start.format("HH:mm") for slot in result.slots]
        assert starts == ["14:00", "14:30", "15:00", "15:30", "16:00"]

        first = result.slots[0].participant_times
        assert [entry.name for entry in first] == ["ldn", "nyc"]
        assert first[1].local_start.format("HH:mm") == "09:00"

    def test_optimal_slot_is_earliest_among_ties(self):
        """Test that equal scores resolve to the earliest candidate."""
        result = MeetingSlotFinder().find_slots(
            [Participant("ldn", "Europe/London"), Participant("nyc", "America/New_York")],
            date="2025-07-14",
            duration_minutes=60
        )

        assert result.optimal is result.slots[0]

    def test_optimal_slot_is_closest_to_midday(self):
        """Test that a single participant is best served mid-window."""
        result = MeetingSlotFinder().find_slots([Participant("alice", "UTC")], date="2024-11-25")

        assert result.optimal is not None
        assert result.optimal.time_range.start.format("HH:mm") == "13:00"
        assert result.optimal.score == 0

    def test_no_common_slot(self):
        """Test that disjoint windows produce an empty result, not an error."""
        result = MeetingSlotFinder().find_slots(
            [Participant("ldn", "Europe/London"), Participant("tyo", "Asia/Tokyo")],
            date="2025-07-14",
            duration_minutes=60,
            start_hour=9,
            end_hour=10
        )

        assert result.slots == []
        assert result.optimal is None
        assert result.to_dict()["optimal_time_slot"] is None

    def test_to_dict(self):
        """Test the serialised shape."""
        data = MeetingSlotFinder().find_slots(
            [Participant("alice", "UTC")],
            date="2024-11-25",
            start_hour=9,
            end_hour=11
        ).to_dict()

        assert data["date"] == "2024-11-25"
        assert [slot["start_time"] for slot in data["suggested_time_slots"]] == [
            "2024-11-25T09:00:00+00:00",
            "2024-11-25T09:30:00+00:00",
            "2024-11-25T10:00:00+00:00",
        ]
        assert data["optimal_time_slot"]["participant_times"][0]["local_start_time"] == "10:00 AM"

    @pytest.mark.parametrize(
        "start_hour, end_hour",
        [(17, 9), (9, 9), (-1, 10), (9, 24)],
    )
    def test_invalid_hours(self, start_hour, end_hour):
        """Test working hour validation."""
        with pytest.raises(ValidationError) as exc_info:
            MeetingSlotFinder().find_slots(
                [Participant("alice", "UTC")],
                start_hour=start_hour,
                end_hour=end_hour
            )

        assert exc_info.value.field == "start_hour"

    def test_invalid_duration(self):
        """Test that a meeting must last at least a minute."""
        with pytest.raises(ValidationError) as exc_info:
            MeetingSlotFinder().find_slots([Participant("alice", "UTC")], duration_minutes=0)

        assert exc_info.value.field == "duration"

    def test_requires_participants(self):
        """Test that an empty participant list is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            MeetingSlotFinder().find_slots([])

        assert exc_info.value.field == "participants"

    def test_invalid_participant_timezone(self):
        """Test participant timezone validation."""
        with pytest.raises(ValidationError, match="bob"):
            MeetingSlotFinder().find_slots([Participant("alice", "UTC"), Participant("bob", "Moon/Base")])
