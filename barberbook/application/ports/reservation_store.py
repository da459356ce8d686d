from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from barberbook.domain.entities.provider_profile import ProviderProfile
from barberbook.domain.entities.reservation import Reservation


class Subscription(ABC):
    """Cancellable handle over a live feed of full reservation snapshots."""

    @abstractmethod
    async def next_snapshot(self) -> list[Reservation]:
        """Wait for the next snapshot. Raises StopAsyncIteration once closed."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def closed(self) -> bool:
        raise NotImplementedError

    def __aiter__(self) -> AsyncIterator[list[Reservation]]:
        return self

    async def __anext__(self) -> list[Reservation]:
        return await self.next_snapshot()


class ReservationStorePort(ABC):
    async def open(self) -> None:
        """Acquire the underlying store handle."""

    async def close(self) -> None:
        """Release the store handle and close every open subscription."""

    @abstractmethod
    async def create(self, provider_id: str, reservation: Reservation) -> str:
        """Persist a reservation. Returns the store-assigned id, raises WriteFailure."""
        raise NotImplementedError

    @abstractmethod
    async def list_reservations(self, provider_id: str | None = None) -> list[Reservation]:
        raise NotImplementedError

    @abstractmethod
    def subscribe_all(self, provider_id: str | None = None) -> Subscription:
        """
        Open a live feed. The first snapshot is the current state, every later
        change delivers the complete set again in arrival order.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_profile(self, provider_id: str) -> ProviderProfile:
        """Raises ProfileNotFound when no profile is stored."""
        raise NotImplementedError

    @abstractmethod
    async def put_profile(self, provider_id: str, profile: ProviderProfile) -> None:
        raise NotImplementedError
