from __future__ import annotations

import logging
from uuid import uuid4

from barberbook.application.exceptions import ProfileNotFound, WriteFailure
from barberbook.application.ports.reservation_store import ReservationStorePort, Subscription
from barberbook.domain.entities.provider_profile import ProviderProfile
from barberbook.domain.entities.reservation import Reservation
from barberbook.infrastructure.store.snapshot_feed import SnapshotFeed
from barberbook.infrastructure.store.validation import check_reservation


class MemoryReservationStore(ReservationStorePort):
    def __init__(self, profiles: dict[str, ProviderProfile] | None = None) -> None:
        self._reservations: list[Reservation] = []
        self._profiles: dict[str, ProviderProfile] = dict(profiles or {})
        self._feed = SnapshotFeed()
        self._closed = False
        self._logger = logging.getLogger(__name__)

    async def open(self) -> None:
        self._closed = False

    async def close(self) -> None:
        self._closed = True
        self._feed.close_all()

    async def create(self, provider_id: str, reservation: Reservation) -> str:
        if self._closed:
            raise WriteFailure("Reservation store is closed")
        check_reservation(provider_id, reservation)
        reservation_id = uuid4().hex
        self._reservations.append(reservation.with_id(reservation_id))
        self._logger.info(
            "Reservation stored",
            extra={"provider_id": provider_id, "reservation_id": reservation_id},
        )
        self._feed.publish(list(self._reservations))
        return reservation_id

    async def list_reservations(self, provider_id: str | None = None) -> list[Reservation]:
        if provider_id is None:
            return list(self._reservations)
        return [r for r in self._reservations if r.provider_id == provider_id]

    def subscribe_all(self, provider_id: str | None = None) -> Subscription:
        subscription = self._feed.subscribe(provider_id, list(self._reservations))
        if self._closed:
            subscription.close()
        return subscription

    async def get_profile(self, provider_id: str) -> ProviderProfile:
        profile = self._profiles.get(provider_id)
        if profile is None:
            raise ProfileNotFound(provider_id)
        return profile

    async def put_profile(self, provider_id: str, profile: ProviderProfile) -> None:
        self._profiles[provider_id] = profile
