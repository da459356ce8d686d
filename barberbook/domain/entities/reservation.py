from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from barberbook.domain.entities.service import Service


@dataclass(frozen=True)
class Reservation:
    provider_id: str
    service: Service  # frozen copy of the catalog entry at booking time
    date: str  # CalendarDay.full
    time: str
    name: str
    phone: str
    created_at: str  # ISO-8601, UTC
    id: str | None = None  # assigned by the store

    def with_id(self, reservation_id: str) -> "Reservation":
        return replace(self, id=reservation_id)

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "provider_id": self.provider_id,
            "service": self.service.to_payload(),
            "date": self.date,
            "time": self.time,
            "name": self.name,
            "phone": self.phone,
            "created_at": self.created_at,
        }

    @staticmethod
    def from_payload(data: dict[str, Any]) -> "Reservation":
        return Reservation(
            id=data.get("id"),
            provider_id=str(data["provider_id"]),
            service=Service.from_payload(data["service"]),
            date=str(data["date"]),
            time=str(data["time"]),
            name=str(data.get("name") or ""),
            phone=str(data.get("phone") or ""),
            created_at=str(data.get("created_at") or ""),
        )
