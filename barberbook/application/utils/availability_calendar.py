from __future__ import annotations

from datetime import date, datetime, timedelta

from barberbook.domain.entities.calendar_day import CalendarDay

DEFAULT_HORIZON_DAYS = 21


def generate_window(now: datetime | date, horizon_days: int = DEFAULT_HORIZON_DAYS) -> list[CalendarDay]:
    """Consecutive bookable days starting at now's date. Never contains past dates."""
    if horizon_days < 1:
        raise ValueError("horizon_days must be at least 1")
    today = now.date() if isinstance(now, datetime) else now
    return [CalendarDay.from_date(today + timedelta(days=offset), today) for offset in range(horizon_days)]


def find_day(window: list[CalendarDay], value: str) -> CalendarDay | None:
    """Resolve a day in the window by ISO date ("2024-01-01") or display form ("Mon Jan 01 2024")."""
    needle = (value or "").strip()
    if not needle:
        return None
    for day in window:
        if needle == day.full or needle == day.date.isoformat():
            return day
    return None
