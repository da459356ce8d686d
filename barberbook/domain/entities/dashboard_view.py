from __future__ import annotations

from dataclasses import dataclass

from barberbook.domain.entities.reservation import Reservation


@dataclass(frozen=True)
class DashboardView:
    provider_id: str
    count: int
    total_revenue: int
    reservations: tuple[Reservation, ...] = ()
