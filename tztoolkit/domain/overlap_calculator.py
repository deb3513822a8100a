"""
Working-hours overlap between participants in different timezones.

Pure domain logic: each participant's daily window is materialised as an
absolute range, then intersected pairwise and, for larger groups, all-way.
"""

import re
from dataclasses import dataclass
from datetime import time
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence

from .exceptions import ValidationError
from .models import OverlapPeriod, TimeRange, WorkingWindow
from .parser import parse_time
from .timezones import validate_timezone

_CLOCK = re.compile(r"(?P<hour>\d{1,2}):(?P<minute>\d{2})")


def parse_clock(value: str, field: str = "working_hours") -> time:
    """
    Parse an ``HH:MM`` wall-clock string.

    Raises:
        ValidationError: If the value is not a valid 24h clock time
    """
    match = _CLOCK.fullmatch((value or "").strip())
    if not match:
        raise ValidationError(field, f"{field} must use HH:MM format, got {value!r}")

    hour, minute = int(match["hour"]), int(match["minute"])
    if hour > 23 or minute > 59:
        raise ValidationError(field, f"{field} is not a valid time of day: {value!r}")

    return time(hour=hour, minute=minute)


@dataclass
class OverlapReport:
    """Result of a working-hours overlap calculation."""
    reference_zone: str
    windows: List[WorkingWindow]
    ranges: List[TimeRange]
    pairwise: List[OverlapPeriod]
    all_way: Optional[OverlapPeriod]

    @property
    def overlap_periods(self) -> List[OverlapPeriod]:
        return self.pairwise + ([self.all_way] if self.all_way else [])

    def to_dict(self) -> Dict[str, Any]:
        participants = []
        for window, time_range in zip(self.windows, self.ranges):
            local = time_range.in_timezone(self.reference_zone)
            participants.append({
                "name": window.name,
                "timezone": window.timezone,
                "working_hours_in_reference_zone": {
                    "start": local.start.isoformat(),
                    "end": local.end.isoformat(),
                },
            })

        return {
            "participants": participants,
            "overlap_periods": [
                period.to_dict(self.reference_zone) for period in self.overlap_periods
            ],
            "reference_timezone": self.reference_zone,
        }


class WorkingHoursOverlapCalculator:
    """
    Calculates shared working hours across timezones.

    Algorithm:
    1. Materialise each participant's window on the reference day
    2. Intersect every unordered pair
    3. For more than two participants, fold all ranges into one intersection
    """

    def calculate(
        self,
        windows: Sequence[WorkingWindow],
        reference_zone: str,
        date: Optional[str] = None
    ) -> OverlapReport:
        """
        Compute pairwise and all-way overlaps.

        Args:
            windows: Participant working windows
            reference_zone: Timezone the results are expressed in
            date: Reference calendar date (any parser input); defaults to today

        Raises:
            ValidationError: On an empty participant list, an unknown
                timezone, or a window that does not end after it starts
        """
        if not windows:
            raise ValidationError("participants", "At least one participant is required")

        reference_zone = validate_timezone(reference_zone, "reference_timezone")
        for window in windows:
            validate_timezone(window.timezone, f"timezone for {window.name}")
            if window.end_time <= window.start_time:
                raise ValidationError(
                    "working_hours",
                    f"Working hours for {window.name} must end after they start"
                )

        reference_day = parse_time(date, reference_zone).date()
        ranges = [window.materialize(reference_day) for window in windows]

        pairwise = self._pairwise_overlaps(windows, ranges)
        all_way = self._all_way_overlap(windows, ranges) if len(windows) > 2 else None

        return OverlapReport(
            reference_zone=reference_zone,
            windows=list(windows),
            ranges=ranges,
            pairwise=pairwise,
            all_way=all_way,
        )

    def _pairwise_overlaps(
        self,
        windows: Sequence[WorkingWindow],
        ranges: List[TimeRange]
    ) -> List[OverlapPeriod]:
        periods: List[OverlapPeriod] = []

        for i, j in combinations(range(len(ranges)), 2):
            intersection = ranges[i].intersect(ranges[j])
            if intersection:
                periods.append(
                    OverlapPeriod(
                        participants=[windows[i].name, windows[j].name],
                        time_range=intersection,
                    )
                )

        return periods

    def _all_way_overlap(
        self,
        windows: Sequence[WorkingWindow],
        ranges: List[TimeRange]
    ) -> Optional[OverlapPeriod]:
        """
        Intersect all ranges; a single empty step means no all-way overlap.
        """
        common: TimeRange = ranges[0]

        for time_range in ranges[1:]:
            intersection = common.intersect(time_range)
            if intersection is None:
                return None
            common = intersection

        return OverlapPeriod(participants=[window.name for window in windows], time_range=common)
