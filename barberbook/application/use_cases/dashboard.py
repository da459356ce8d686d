from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable

from barberbook.application.ports.reservation_store import ReservationStorePort, Subscription
from barberbook.domain.entities.dashboard_view import DashboardView
from barberbook.domain.entities.reservation import Reservation


def derive_view(reservations: Iterable[Reservation], provider_id: str) -> DashboardView:
    """
    Full recompute from one snapshot. Revenue sums the price frozen into each
    reservation, never the current catalog price. Arrival order is kept.
    """
    mine = tuple(r for r in reservations if r.provider_id == provider_id)
    return DashboardView(
        provider_id=provider_id,
        count=len(mine),
        total_revenue=sum(r.service.price for r in mine),
        reservations=mine,
    )


class DashboardAggregator:
    """
    Live dashboard for one provider. The feed subscription exists only between
    start() and stop() (or inside ``async with``).
    """

    def __init__(self, store: ReservationStorePort, provider_id: str) -> None:
        self._store = store
        self._provider_id = provider_id
        self._subscription: Subscription | None = None
        self._view = derive_view((), provider_id)
        self._logger = logging.getLogger(__name__)

    @property
    def view(self) -> DashboardView:
        return self._view

    @property
    def active(self) -> bool:
        return self._subscription is not None and not self._subscription.closed

    def start(self) -> None:
        if self.active:
            return
        self._subscription = self._store.subscribe_all(self._provider_id)
        self._logger.info("Dashboard subscribed", extra={"provider_id": self._provider_id})

    def stop(self) -> None:
        if self._subscription is None:
            return
        self._subscription.close()
        self._subscription = None
        self._logger.info("Dashboard unsubscribed", extra={"provider_id": self._provider_id})

    async def refresh(self) -> DashboardView:
        """Wait for the next snapshot and recompute. Raises StopAsyncIteration once stopped."""
        if self._subscription is None:
            raise StopAsyncIteration
        snapshot = await self._subscription.next_snapshot()
        self._view = derive_view(snapshot, self._provider_id)
        return self._view

    async def __aenter__(self) -> "DashboardAggregator":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.stop()

    def __aiter__(self) -> AsyncIterator[DashboardView]:
        return self

    async def __anext__(self) -> DashboardView:
        return await self.refresh()
