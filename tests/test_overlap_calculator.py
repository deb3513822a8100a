"""
Tests for the working-hours overlap calculator.
"""

from datetime import time

import pendulum
import pytest

from tztoolkit.domain.exceptions import ValidationError
from tztoolkit.domain.models import WorkingWindow
from tztoolkit.domain.overlap_calculator import WorkingHoursOverlapCalculator, parse_clock


def _window(name: str, zone: str, start: str, end: str) -> WorkingWindow:
    return WorkingWindow(name=name, timezone=zone, start_time=parse_clock(start), end_time=parse_clock(end))


class TestParseClock:
    """Tests for HH:MM parsing."""

    def test_valid(self):
        assert parse_clock("09:30") == time(9, 30)
        assert parse_clock("7:05") == time(7, 5)

    @pytest.mark.parametrize("value", ["", "9", "24:00", "12:60", "noon", None])
    def test_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_clock(value, "working_hours.start")

        assert exc_info.value.field == "working_hours.start"


class TestWorkingHoursOverlapCalculator:
    """Tests for WorkingHoursOverlapCalculator."""

    calculator = WorkingHoursOverlapCalculator()

    def test_two_participants(self):
        """Test the overlap of London and New York on a summer day."""
        windows = [
            _window("ldn", "Europe/London", "09:00", "17:00"),
            _window("nyc", "America/New_York", "09:00", "17:00"),
        ]

        report = self.calculator.calculate(windows, "UTC", "2025-07-14")

        assert len(report.pairwise) == 1
        period = report.pairwise[0]
        assert period.participants == ["ldn", "nyc"]
        assert period.time_range.start == pendulum.datetime(2025, 7, 14, 13, tz="UTC")
        assert period.time_range.end == pendulum.datetime(2025, 7, 14, 16, tz="UTC")
        assert period.duration_minutes == 180
        assert report.all_way is None

    def test_overlap_is_symmetric(self):
        """Test that participant order does not change the overlap."""
        ldn = _window("ldn", "Europe/London", "08:30", "17:00")
        tokyo = _window("tyo", "Asia/Tokyo", "15:00", "23:00")

        forward = self.calculator.calculate([ldn, tokyo], "UTC", "2025-07-14").pairwise
        backward = self.calculator.calculate([tokyo, ldn], "UTC", "2025-07-14").pairwise

        assert len(forward) == len(backward) == 1
        assert forward[0].time_range.start == backward[0].time_range.start
        assert forward[0].time_range.end == backward[0].time_range.end
        assert forward[0].duration_minutes == backward[0].duration_minutes

    def test_twelve_hours_apart_never_overlap(self):
        """Test identical local windows twelve hours apart share nothing."""
        windows = [
            _window("utc", "UTC", "09:00", "12:00"),
            _window("gmt12", "Etc/GMT-12", "09:00", "12:00"),
        ]

        report = self.calculator.calculate(windows, "UTC", "2025-07-14")

        assert report.pairwise == []
        assert report.overlap_periods == []

    def test_pairs_without_all_way(self):
        """Test that the all-way entry is omitted when any step is empty."""
        windows = [
            _window("a", "UTC", "09:00", "12:00"),
            _window("b", "UTC", "11:00", "14:00"),
            _window("c", "UTC", "13:00", "16:00"),
        ]

        report = self.calculator.calculate(windows, "UTC", "2025-07-14")

        assert [period.participants for period in report.pairwise] == [["a", "b"], ["b", "c"]]
        assert report.all_way is None
        assert len(report.overlap_periods) == 2

    def test_all_way_overlap(self):
        """Test three windows with a common hour."""
        windows = [
            _window("a", "UTC", "09:00", "13:00"),
            _window("b", "UTC", "10:00", "14:00"),
            _window("c", "UTC", "12:00", "16:00"),
        ]

        report = self.calculator.calculate(windows, "UTC", "2025-07-14")

        assert len(report.pairwise) == 3
        assert report.all_way is not None
        assert report.all_way.participants == ["a", "b", "c"]
        assert report.all_way.duration_minutes == 60
        assert report.overlap_periods[-1] is report.all_way

    def test_two_participants_never_report_all_way(self):
        """Test that the all-way entry is only computed for larger groups."""
        windows = [
            _window("a", "UTC", "09:00", "17:00"),
            _window("b", "UTC", "09:00", "17:00"),
        ]

        report = self.calculator.calculate(windows, "UTC", "2025-07-14")

        assert len(report.pairwise) == 1
        assert report.all_way is None

    def test_to_dict_in_reference_zone(self):
        """Test that the serialised report uses the reference timezone."""
        windows = [
            _window("ldn", "Europe/London", "09:00", "17:00"),
            _window("nyc", "America/New_York", "09:00", "17:00"),
        ]

        data = self.calculator.calculate(windows, "Europe/Berlin", "2025-07-14").to_dict()

        assert data["reference_timezone"] == "Europe/Berlin"
        assert data["participants"][0] == {
            "name": "ldn",
            "timezone": "Europe/London",
            "working_hours_in_reference_zone": {
                "start": "2025-07-14T10:00:00+02:00",
                "end": "2025-07-14T18:00:00+02:00",
            },
        }
        assert data["overlap_periods"] == [
            {
                "participants": ["ldn", "nyc"],
                "start_time": "2025-07-14T15:00:00+02:00",
                "end_time": "2025-07-14T18:00:00+02:00",
                "duration_minutes": 180,
            }
        ]

    def test_empty_participants_raise(self):
        """Test that at least one participant is required."""
        with pytest.raises(ValidationError) as exc_info:
            self.calculator.calculate([], "UTC")

        assert exc_info.value.field == "participants"

    def test_invalid_reference_zone_raises(self):
        """Test reference timezone validation."""
        with pytest.raises(ValidationError) as exc_info:
            self.calculator.calculate([_window("a", "UTC", "09:00", "17:00")], "Bogus/Zone")

        assert exc_info.value.field == "reference_timezone"

    def test_invalid_participant_zone_raises(self):
        """Test participant timezone validation."""
        with pytest.raises(ValidationError, match="Bogus/Zone"):
            self.calculator.calculate([_window("a", "Bogus/Zone", "09:00", "17:00")], "UTC")

    def test_window_ending_before_start_raises(self):
        """Test that overnight windows are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            self.calculator.calculate([_window("night", "UTC", "22:00", "06:00")], "UTC")

        assert exc_info.value.field == "working_hours"
