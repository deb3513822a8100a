"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import ConfigError, ToolkitError, ValidationError
from .models import MeetingSlot, OverlapPeriod, Participant, SlotFit, TimeRange, WorkingWindow
from .overlap_calculator import WorkingHoursOverlapCalculator
from .parser import ParsedTime, ParseSource, parse_time, parse_time_detailed
from .slot_calculator import MeetingSlotFinder

__all__ = [
    "ConfigError",
    "ToolkitError",
    "ValidationError",
    "MeetingSlot",
    "OverlapPeriod",
    "Participant",
    "SlotFit",
    "TimeRange",
    "WorkingWindow",
    "WorkingHoursOverlapCalculator",
    "ParsedTime",
    "ParseSource",
    "parse_time",
    "parse_time_detailed",
    "MeetingSlotFinder",
]
