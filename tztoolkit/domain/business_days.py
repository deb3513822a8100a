"""
Business-day counting between two dates.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import Date

from .holidays import us_holiday_dates
from .parser import parse_time
from .timezones import validate_timezone

WEEKEND = (pendulum.SATURDAY, pendulum.SUNDAY)


@dataclass
class BusinessDayCount:
    """Outcome of a business-day calculation; both bounds inclusive."""
    start: Date
    end: Date
    timezone: str
    business_dates: List[Date] = field(default_factory=list)
    calendar_days: int = 0
    holidays_excluded: List[Date] = field(default_factory=list)

    @property
    def business_days(self) -> int:
        return len(self.business_dates)

    @property
    def weekend_days(self) -> int:
        return self.calendar_days - self.business_days - len(self.holidays_excluded)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": self.start.to_date_string(),
            "end_date": self.end.to_date_string(),
            "business_days": self.business_days,
            "calendar_days": self.calendar_days,
            "weekend_days": self.weekend_days,
            "holidays_excluded": len(self.holidays_excluded),
            "timezone": self.timezone,
            "business_dates_included": [day.to_date_string() for day in self.business_dates],
        }


def count_business_days(
    start: Optional[str],
    end: Optional[str],
    zone: str = "UTC",
    exclude_holidays: bool = False
) -> BusinessDayCount:
    """
    Count Monday-Friday dates between two dates, both inclusive.

    Bounds are parsed in ``zone`` and truncated to the start of their day;
    reversed bounds are swapped. With ``exclude_holidays`` the computed US
    observances are skipped as well.

    Raises:
        ValidationError: If ``zone`` is not a valid timezone
    """
    zone = validate_timezone(zone)
    first = parse_time(start, zone).start_of("day").date()
    last = parse_time(end, zone).start_of("day").date()

    if first > last:
        first, last = last, first

    holidays = (
        us_holiday_dates(range(first.year, last.year + 1)) if exclude_holidays else {}
    )

    result = BusinessDayCount(start=first, end=last, timezone=zone)
    current = first

    while current <= last:
        result.calendar_days += 1

        if current.day_of_week not in WEEKEND:
            if current in holidays:
                result.holidays_excluded.append(current)
            else:
                result.business_dates.append(current)

        current = current.add(days=1)

    return result
