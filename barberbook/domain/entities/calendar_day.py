from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class CalendarDay:
    date: date
    full: str = field(compare=False)  # "Mon Jan 01 2024", join key for reservations
    day_name: str = field(compare=False)
    day_num: int = field(compare=False)
    month: str = field(compare=False)
    is_today: bool = field(default=False, compare=False)

    @staticmethod
    def from_date(day: date, today: date) -> "CalendarDay":
        return CalendarDay(
            date=day,
            full=day.strftime("%a %b %d %Y"),
            day_name=day.strftime("%a"),
            day_num=day.day,
            month=day.strftime("%b"),
            is_today=day == today,
        )
