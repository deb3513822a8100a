"""
US observance rules and the custom holiday store.
"""

import threading
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List

import pendulum
from pendulum import Date

from .exceptions import ValidationError


@dataclass(frozen=True)
class Holiday:
    """A named holiday on a concrete date."""
    name: str
    date: Date
    country: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "date": self.date.to_date_string(),
            "country": self.country,
            "type": self.type,
        }


@dataclass(frozen=True)
class CustomHoliday:
    """User-defined holiday; recurring entries match every year on the same month/day."""
    name: str
    date: Date
    recurring: bool = False

    def matches(self, day: date) -> bool:
        if self.recurring:
            return (self.date.month, self.date.day) == (day.month, day.day)
        return self.date == day

    def occurrence_in(self, year: int) -> Date | None:
        """The date this holiday falls on in ``year``, if any."""
        if not self.recurring:
            return self.date if self.date.year == year else None
        try:
            return pendulum.date(year, self.date.month, self.date.day)
        except ValueError:
            # Feb 29 in a non-leap year
            return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "date": self.date.to_date_string(),
            "recurring": self.recurring,
        }


def us_holidays(year: int) -> List[Holiday]:
    """
    Common US observances for a year, computed from their rules.

    Dates are the nominal days; weekend observance shifts are not applied.
    """
    jan = pendulum.date(year, 1, 1)
    feb = pendulum.date(year, 2, 1)
    may = pendulum.date(year, 5, 1)
    sep = pendulum.date(year, 9, 1)
    nov = pendulum.date(year, 11, 1)

    observances = [
        ("New Year's Day", jan),
        ("Martin Luther King Jr. Day", jan.nth_of("month", 3, pendulum.MONDAY)),
        ("Presidents' Day", feb.nth_of("month", 3, pendulum.MONDAY)),
        ("Memorial Day", may.last_of("month", pendulum.MONDAY)),
        ("Independence Day", pendulum.date(year, 7, 4)),
        ("Labor Day", sep.first_of("month", pendulum.MONDAY)),
        ("Thanksgiving Day", nov.nth_of("month", 4, pendulum.THURSDAY)),
        ("Christmas Day", pendulum.date(year, 12, 25)),
    ]

    return [Holiday(name=name, date=day, country="US", type="public") for name, day in observances]


def us_holiday_dates(years: Iterable[int]) -> Dict[Date, str]:
    """Map of holiday date -> name for every year given."""
    dates: Dict[Date, str] = {}
    for year in years:
        for holiday in us_holidays(year):
            dates[holiday.date] = holiday.name
    return dates


class CustomHolidayStore:
    """
    In-memory, append-only collection of custom holidays keyed by date.

    Entries are never mutated or removed. Appends are serialised with a lock
    so one store can be shared between callers.
    """

    def __init__(self, holidays: Iterable[CustomHoliday] = ()):
        self._lock = threading.Lock()
        self._by_date: Dict[Date, List[CustomHoliday]] = {}
        self._ordered: List[CustomHoliday] = []
        for holiday in holidays:
            self._append(holiday)

    def add(self, name: str, day: date, recurring: bool = False) -> CustomHoliday:
        """
        Add a custom holiday.

        Raises:
            ValidationError: If name or date is missing
        """
        if not name or not name.strip():
            raise ValidationError("name", "Holiday name and date are required")
        if day is None:
            raise ValidationError("date", "Holiday name and date are required")

        holiday = CustomHoliday(
            name=name.strip(),
            date=pendulum.date(day.year, day.month, day.day),
            recurring=bool(recurring),
        )
        with self._lock:
            self._append(holiday)
        return holiday

    def _append(self, holiday: CustomHoliday) -> None:
        self._by_date.setdefault(holiday.date, []).append(holiday)
        self._ordered.append(holiday)

    def all(self) -> List[CustomHoliday]:
        """All holidays in insertion order."""
        return list(self._ordered)

    def on(self, day: date) -> List[CustomHoliday]:
        """Holidays falling on ``day`` (recurring ones match any year)."""
        exact = list(self._by_date.get(pendulum.date(day.year, day.month, day.day), []))
        recurring = [
            holiday for holiday in self._ordered
            if holiday.recurring and holiday.date.year != day.year and holiday.matches(day)
        ]
        return exact + recurring

    def between(self, start: date, end: date) -> Dict[Date, List[CustomHoliday]]:
        """Occurrences of every holiday within [start, end], grouped by date."""
        occurrences: Dict[Date, List[CustomHoliday]] = {}

        for holiday in self._ordered:
            for year in range(start.year, end.year + 1):
                day = holiday.occurrence_in(year)
                if day is not None and start <= day <= end:
                    occurrences.setdefault(day, []).append(holiday)

        return dict(sorted(occurrences.items()))

    def __len__(self) -> int:
        return len(self._ordered)
