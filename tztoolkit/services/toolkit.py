"""
Application services for the timezone toolkit.

The service validates request-shaped arguments, delegates to the pure domain
layer and returns JSON-serialisable dictionaries for the CLI to print.
Collaborators with state
(the custom holiday store) and policy (the slot fit rule) are injected.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pendulum

from ..domain.business_days import count_business_days
from ..domain.exceptions import ValidationError
from ..domain.formatting import (
    DATE_STYLE_PATTERNS,
    DEFAULT_LOCALE,
    DateStyle,
    TimeFormat,
    format_datetime,
    resolve_locale,
)
from ..domain.holidays import CustomHolidayStore, Holiday, us_holidays
from ..domain.models import Participant, SlotFit, WorkingWindow
from ..domain.overlap_calculator import WorkingHoursOverlapCalculator, parse_clock
from ..domain.parser import parse_time, parse_time_detailed
from ..domain.slot_calculator import MeetingSlotFinder
from ..domain.timezones import (
    filter_timezones,
    format_offset,
    offset_minutes,
    timezone_difference,
    validate_timezone,
)

logger = logging.getLogger(__name__)


class TimezoneToolkitService:
    """
    Orchestrates parsing, conversion and scheduling calculations.
    """

    def __init__(
        self,
        holiday_store: Optional[CustomHolidayStore] = None,
        slot_fit: SlotFit = SlotFit.CONTAIN,
        default_timezone: str = "UTC",
        locale: str = DEFAULT_LOCALE,
    ) -> None:
        self._holiday_store = holiday_store if holiday_store is not None else CustomHolidayStore()
        self._overlap_calculator = WorkingHoursOverlapCalculator()
        self._slot_finder = MeetingSlotFinder(fit=slot_fit)
        self._default_timezone = validate_timezone(default_timezone, "default_timezone")
        self._locale = locale

    @property
    def holiday_store(self) -> CustomHolidayStore:
        return self._holiday_store

    def _zone(self, zone: Optional[str], field: str = "timezone") -> str:
        return validate_timezone(zone or self._default_timezone, field)

    # -- conversion -------------------------------------------------------

    def convert_time(
        self,
        time: Optional[str],
        from_timezone: str,
        to_timezone: str,
        fmt: str = TimeFormat.MEDIUM.value,
    ) -> Dict[str, Any]:
        """Convert a time from one timezone to another."""
        from_timezone = validate_timezone(from_timezone, "from_timezone")
        to_timezone = validate_timezone(to_timezone, "to_timezone")
        style = _time_format(fmt)

        parsed = parse_time_detailed(time, from_timezone)
        difference = timezone_difference(from_timezone, to_timezone, parsed.value)

        return {
            "original_time": parsed.value.in_timezone(from_timezone).isoformat(),
            "converted_time": format_datetime(
                parsed.value.in_timezone(to_timezone), style, self._locale
            ),
            "from_timezone": from_timezone,
            "to_timezone": to_timezone,
            "time_difference": format_offset(difference, pad_hours=False),
            "parsed_from": parsed.source.value,
            "degraded": parsed.degraded,
        }

    def current_time(self, zone: Optional[str] = None, fmt: str = TimeFormat.MEDIUM.value) -> Dict[str, Any]:
        """Current time in a timezone together with its UTC offset."""
        zone = self._zone(zone)
        now = pendulum.now(zone)

        return {
            "current_time": format_datetime(now, _time_format(fmt), self._locale),
            "timezone": zone,
            "utc_offset": format_offset(offset_minutes(zone, now)),
        }

    def timezone_difference(self, from_timezone: str, to_timezone: str) -> Dict[str, Any]:
        """Offset difference between two timezones right now."""
        from_timezone = validate_timezone(from_timezone, "from_timezone")
        to_timezone = validate_timezone(to_timezone, "to_timezone")

        now = pendulum.now("UTC")
        difference = timezone_difference(from_timezone, to_timezone, now)
        hours, minutes = divmod(abs(difference), 60)

        return {
            "from_timezone": from_timezone,
            "to_timezone": to_timezone,
            "time_difference": format_offset(difference, pad_hours=False),
            "current_time_from": format_datetime(now.in_timezone(from_timezone), TimeFormat.SHORT),
            "current_time_to": format_datetime(now.in_timezone(to_timezone), TimeFormat.SHORT),
            "hours_difference": hours,
            "minutes_difference": minutes,
            "total_minutes_difference": abs(difference),
            "direction": "ahead" if difference >= 0 else "behind",
        }

    def list_timezones(self, region: Optional[str] = None) -> Dict[str, Any]:
        """Curated IANA timezones with their current local time and offset."""
        now = pendulum.now("UTC")
        entries = [
            {
                "timezone": name,
                "current_time": format_datetime(now.in_timezone(name), TimeFormat.SHORT),
                "offset": format_offset(offset_minutes(name, now)),
            }
            for name in filter_timezones(region)
        ]

        return {"timezones": entries, "count": len(entries), "region": region or "All"}

    def countdown(self, target_date: str, zone: Optional[str] = None, title: Optional[str] = None) -> Dict[str, Any]:
        """Time remaining until a target date."""
        if not target_date:
            raise ValidationError("target_date", "Target date is required")

        zone = self._zone(zone)
        target = parse_time(target_date, zone)
        now = pendulum.now(zone)
        is_past = target < now

        total_seconds = math.floor((target - now).total_seconds())
        remaining = {"years": 0, "months": 0, "days": 0, "hours": 0, "minutes": 0, "seconds": 0}

        if is_past:
            text = "This event has already passed"
        else:
            interval = now.diff(target)
            remaining = {
                "years": interval.years,
                "months": interval.months,
                "days": interval.weeks * 7 + interval.remaining_days,
                "hours": interval.hours,
                "minutes": interval.minutes,
                "seconds": interval.remaining_seconds,
            }
            text = interval.in_words(locale=DEFAULT_LOCALE)

        return {
            "title": title or "Event",
            "target_date": target.isoformat(),
            "formatted_target_date": format_datetime(target, TimeFormat.FULL, self._locale),
            "current_date": now.isoformat(),
            "timezone": zone,
            "is_past": is_past,
            "countdown": text,
            "remaining": {
                **remaining,
                "total_days": math.floor(total_seconds / 86400),
                "total_hours": math.floor(total_seconds / 3600),
                "total_minutes": math.floor(total_seconds / 60),
                "total_seconds": total_seconds,
            },
        }

    def format_date(
        self,
        date: str,
        zone: Optional[str] = None,
        style: str = DateStyle.MEDIUM.value,
        locale: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Format a date in a named style and locale."""
        if not date:
            raise ValidationError("date", "Date is required")

        zone = self._zone(zone)
        try:
            date_style = DateStyle(style)
        except ValueError as exc:
            raise ValidationError("format", f"Unsupported format: {style}") from exc

        loc = resolve_locale(locale or self._locale)
        dt = parse_time(date, zone)

        if date_style is DateStyle.ISO:
            formatted_date = dt.to_date_string()
            formatted_time = dt.format("HH:mm:ss.SSSZ")
            formatted = dt.isoformat()
        elif date_style is DateStyle.RELATIVE:
            formatted = dt.diff_for_humans(locale=loc)
            formatted_date = formatted_time = formatted
        else:
            date_pattern, time_pattern, datetime_pattern = DATE_STYLE_PATTERNS[date_style]
            formatted_date = dt.format(date_pattern, locale=loc)
            formatted_time = dt.format(time_pattern, locale=loc)
            formatted = dt.format(datetime_pattern, locale=loc)

        return {
            "original_date": date,
            "parsed_date": dt.isoformat(),
            "formatted_date": formatted_date,
            "formatted_time": formatted_time,
            "formatted_date_time": formatted,
            "day_of_week": dt.format("dddd", locale=loc),
            "day_of_month": dt.day,
            "month": dt.format("MMMM", locale=loc),
            "year": dt.year,
            "timezone": zone,
            "locale": loc,
            "format": date_style.value,
        }

    # -- scheduling -------------------------------------------------------

    def business_days(
        self,
        start_date: str,
        end_date: str,
        zone: Optional[str] = None,
        exclude_holidays: bool = False,
    ) -> Dict[str, Any]:
        """Business days between two dates, both inclusive."""
        if not start_date:
            raise ValidationError("start_date", "Start date is required")
        if not end_date:
            raise ValidationError("end_date", "End date is required")

        return count_business_days(start_date, end_date, self._zone(zone), exclude_holidays).to_dict()

    def working_hours_overlap(
        self,
        teams: Sequence[Mapping[str, Any]],
        reference_timezone: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Shared working hours of teams in different timezones.

        Each team is ``{"name", "timezone", "working_hours": {"start", "end"}}``
        with ``HH:MM`` clock values.
        """
        windows = [_working_window(team) for team in teams or []]
        report = self._overlap_calculator.calculate(
            windows,
            self._zone(reference_timezone, "reference_timezone"),
            date,
        )
        return report.to_dict()

    def find_meeting_times(
        self,
        participants: Sequence[Mapping[str, Any]],
        date: Optional[str] = None,
        duration: int = 60,
        start_hour: int = 9,
        end_hour: int = 17,
    ) -> Dict[str, Any]:
        """Candidate meeting slots across participants' timezones."""
        people = [
            Participant(name=str(entry.get("name", "")), timezone=str(entry.get("timezone", "")))
            for entry in participants or []
        ]
        result = self._slot_finder.find_slots(
            people,
            date=date,
            duration_minutes=duration,
            start_hour=start_hour,
            end_hour=end_hour,
        )
        logger.debug("Found %d candidate slots on %s", len(result.slots), result.date.to_date_string())
        return result.to_dict()

    # -- holidays ---------------------------------------------------------

    def check_holiday(self, date: str, zone: Optional[str] = None) -> Dict[str, Any]:
        """US observances and custom holidays on a date."""
        if not date:
            raise ValidationError("date", "Date is required")

        day = parse_time(date, self._zone(zone)).date()
        holidays = [holiday for holiday in us_holidays(day.year) if holiday.date == day]
        holidays.extend(
            Holiday(name=custom.name, date=day, country="CUSTOM", type="custom")
            for custom in self._holiday_store.on(day)
        )

        return {
            "date": day.to_date_string(),
            "holidays": [holiday.to_dict() for holiday in holidays],
        }

    def holidays_in_range(self, start_date: str, end_date: str, zone: Optional[str] = None) -> Dict[str, Any]:
        """US observances and custom holidays between two dates, grouped by date."""
        zone = self._zone(zone)
        start = parse_time(start_date, zone).date()
        end = parse_time(end_date, zone).date()

        if start > end:
            raise ValidationError("start_date", "Start date must be before end date")

        grouped: Dict[str, List[Dict[str, str]]] = {}

        for year in range(start.year, end.year + 1):
            for holiday in us_holidays(year):
                if start <= holiday.date <= end:
                    grouped.setdefault(holiday.date.to_date_string(), []).append(holiday.to_dict())

        for day, customs in self._holiday_store.between(start, end).items():
            for custom in customs:
                holiday = Holiday(name=custom.name, date=day, country="CUSTOM", type="custom")
                grouped.setdefault(day.to_date_string(), []).append(holiday.to_dict())

        return {
            "start_date": start.to_date_string(),
            "end_date": end.to_date_string(),
            "holidays": dict(sorted(grouped.items())),
        }

    def add_custom_holiday(self, name: str, date: str, recurring: bool = False) -> Dict[str, Any]:
        """Add a holiday to the injected store."""
        if not name or not date:
            raise ValidationError("holiday", "Holiday name and date are required")

        parsed = parse_time_detailed(date, self._default_timezone)
        if parsed.degraded:
            raise ValidationError("date", f"Invalid date: {date}")

        holiday = self._holiday_store.add(name, parsed.value.date(), recurring)
        logger.info("Added custom holiday %s on %s", holiday.name, holiday.date.to_date_string())

        return {
            "success": True,
            "message": f'Custom holiday "{holiday.name}" added successfully',
            "holiday": holiday.to_dict(),
        }

    def custom_holidays(self) -> Dict[str, Any]:
        return {"holidays": [holiday.to_dict() for holiday in self._holiday_store.all()]}


def _time_format(fmt: Optional[str]) -> TimeFormat:
    try:
        return TimeFormat(fmt or TimeFormat.MEDIUM.value)
    except ValueError as exc:
        raise ValidationError("format", f"Unsupported format: {fmt}") from exc


def _working_window(team: Mapping[str, Any]) -> WorkingWindow:
    name = str(team.get("name", ""))
    hours = team.get("working_hours") or {}

    return WorkingWindow(
        name=name,
        timezone=str(team.get("timezone", "")),
        start_time=parse_clock(hours.get("start", ""), f"working_hours.start for {name}"),
        end_time=parse_clock(hours.get("end", ""), f"working_hours.end for {name}"),
    )
