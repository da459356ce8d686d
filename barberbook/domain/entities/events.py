from __future__ import annotations

from dataclasses import dataclass

from barberbook.domain.entities.reservation import Reservation


@dataclass(frozen=True)
class ReservationCreated:
    reservation: Reservation
    webhook_url: str | None = None
