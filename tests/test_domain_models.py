"""
Tests for domain models.
"""

import pendulum
import pytest
from datetime import time

from tztoolkit.domain.models import (
    MeetingSlot,
    OverlapPeriod,
    ParticipantTime,
    SlotFit,
    TimeRange,
    WorkingWindow,
)


def _range(start: str, end: str, tz: str = "Europe/Berlin") -> TimeRange:
    return TimeRange(start=pendulum.parse(start, tz=tz), end=pendulum.parse(end, tz=tz))


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 480  # 8 hours

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")

        with pytest.raises(ValueError, match="Start time .* must not be after end time"):
            TimeRange(start=start, end=end)

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = _range("2024-11-25 09:00", "2024-11-25 12:00")
        tr2 = _range("2024-11-25 11:00", "2024-11-25 14:00")
        tr3 = _range("2024-11-25 14:00", "2024-11-25 17:00")

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)

    def test_touching_ranges_do_not_overlap(self):
        """Test that half-open ranges sharing a boundary do not overlap."""
        tr1 = _range("2024-11-25 09:00", "2024-11-25 12:00")
        tr2 = _range("2024-11-25 12:00", "2024-11-25 14:00")

        assert not tr1.overlaps(tr2)
        assert tr1.intersect(tr2) is None

    def test_intersect(self):
        """Test intersection calculation."""
        tr1 = _range("2024-11-25 09:00", "2024-11-25 12:00")
        tr2 = _range("2024-11-25 11:00", "2024-11-25 14:00")

        intersection = tr1.intersect(tr2)

        assert intersection is not None
        assert intersection.start == pendulum.parse("2024-11-25 11:00", tz="Europe/Berlin")
        assert intersection.end == pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin")

    def test_intersect_across_timezones(self):
        """Test that intersection compares instants, not wall clocks."""
        berlin = _range("2024-11-25 09:00", "2024-11-25 17:00", tz="Europe/Berlin")
        new_york = _range("2024-11-25 09:00", "2024-11-25 17:00", tz="America/New_York")

        intersection = berlin.intersect(new_york)

        assert intersection is not None
        assert intersection.start.in_timezone("UTC").hour == 14
        assert intersection.end.in_timezone("UTC").hour == 16
        assert intersection.duration_minutes() == 120

    def test_contains(self):
        """Test containment."""
        outer = _range("2024-11-25 09:00", "2024-11-25 17:00")

        assert outer.contains(_range("2024-11-25 09:00", "2024-11-25 10:00"))
        assert outer.contains(_range("2024-11-25 16:00", "2024-11-25 17:00"))
        assert not outer.contains(_range("2024-11-25 16:30", "2024-11-25 17:30"))

    def test_in_timezone_keeps_instants(self):
        """Test re-expressing a range in another timezone."""
        tr = _range("2024-11-25 09:00", "2024-11-25 17:00")

        converted = tr.in_timezone("Asia/Tokyo")

        assert converted.start == tr.start
        assert converted.start.hour == 17
        assert converted.start.timezone_name == "Asia/Tokyo"


class TestWorkingWindow:
    """Tests for WorkingWindow model."""

    def test_materialize_on_calendar_date(self):
        """Test that the window is built on the date in its own timezone."""
        window = WorkingWindow(
            name="nyc",
            timezone="America/New_York",
            start_time=time(9, 0),
            end_time=time(17, 30),
        )

        work_range = window.materialize(pendulum.date(2024, 11, 25))

        assert work_range.start == pendulum.datetime(2024, 11, 25, 9, 0, tz="America/New_York")
        assert work_range.end == pendulum.datetime(2024, 11, 25, 17, 30, tz="America/New_York")
        assert work_range.duration_minutes() == 510


class TestSlotFit:
    """Tests for slot acceptance rules."""

    window = _range("2024-11-25 09:00", "2024-11-25 17:00")

    def test_contain_accepts_inner_candidate(self):
        """Test that CONTAIN accepts a candidate inside the window."""
        assert SlotFit.CONTAIN.accepts(_range("2024-11-25 16:00", "2024-11-25 17:00"), self.window)

    def test_contain_rejects_partial_candidate(self):
        """Test that CONTAIN rejects a candidate hanging over the edge."""
        assert not SlotFit.CONTAIN.accepts(_range("2024-11-25 08:30", "2024-11-25 09:30"), self.window)

    def test_contain_accepts_candidate_covering_short_window(self):
        """Test that a meeting longer than the window may cover it."""
        short_window = _range("2024-11-25 10:00", "2024-11-25 10:30")

        assert SlotFit.CONTAIN.accepts(_range("2024-11-25 10:00", "2024-11-25 11:00"), short_window)

    def test_overlap_accepts_partial_candidate(self):
        """Test that OVERLAP accepts any candidate touching the window."""
        assert SlotFit.OVERLAP.accepts(_range("2024-11-25 08:30", "2024-11-25 09:30"), self.window)
        assert not SlotFit.OVERLAP.accepts(_range("2024-11-25 08:00", "2024-11-25 09:00"), self.window)

    def test_parse_from_string(self):
        """Test that the enum parses from its config value."""
        assert SlotFit("overlap") is SlotFit.OVERLAP


class TestSerialisation:
    """Tests for the JSON-shaped views."""

    def test_overlap_period_to_dict(self):
        """Test that overlap bounds are rendered in the reference zone."""
        period = OverlapPeriod(
            participants=["a", "b"],
            time_range=_range("2024-11-25 14:00", "2024-11-25 16:00", tz="UTC"),
        )

        data = period.to_dict("Europe/Berlin")

        assert data == {
            "participants": ["a", "b"],
            "start_time": "2024-11-25T15:00:00+01:00",
            "end_time": "2024-11-25T17:00:00+01:00",
            "duration_minutes": 120,
        }

    def test_meeting_slot_to_dict(self):
        """Test local participant times in a slot."""
        slot_range = _range("2024-11-25 15:00", "2024-11-25 16:00", tz="UTC")
        slot = MeetingSlot(
            time_range=slot_range,
            participant_times=[
                ParticipantTime(
                    name="nyc",
                    timezone="America/New_York",
                    local_start=slot_range.start.in_timezone("America/New_York"),
                    local_end=slot_range.end.in_timezone("America/New_York"),
                )
            ],
        )

        data = slot.to_dict()

        assert data["start_time"] == "2024-11-25T15:00:00+00:00"
        assert data["participant_times"] == [
            {
                "name": "nyc",
                "timezone": "America/New_York",
                "local_start_time": "10:00 AM",
                "local_end_time": "11:00 AM",
            }
        ]
