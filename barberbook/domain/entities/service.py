from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: int
    name: str
    duration: str  # display label, e.g. "45 min"
    price: int  # whole currency units

    def to_payload(self) -> dict[str, object]:
        return {"id": self.id, "name": self.name, "duration": self.duration, "price": self.price}

    @staticmethod
    def from_payload(data: dict[str, object]) -> "Service":
        return Service(
            id=int(data["id"]),
            name=str(data["name"]),
            duration=str(data.get("duration") or ""),
            price=int(data["price"]),
        )
