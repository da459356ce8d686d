from __future__ import annotations

from dataclasses import dataclass

from barberbook.domain.entities.calendar_day import CalendarDay
from barberbook.domain.entities.service import Service


@dataclass(frozen=True)
class BookingDraft:
    service: Service | None = None
    date: CalendarDay | None = None
    time: str | None = None
    name: str = ""
    phone: str = ""

    @property
    def has_contact_details(self) -> bool:
        return bool(self.name.strip()) and bool(self.phone.strip())
