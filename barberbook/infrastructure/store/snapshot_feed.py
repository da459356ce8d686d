from __future__ import annotations

import asyncio
import logging

from barberbook.application.ports.reservation_store import Subscription
from barberbook.domain.entities.reservation import Reservation


class FeedSubscription(Subscription):
    """
    Holds only the most recent snapshot. Since every snapshot is the complete
    set, a slow reader skips intermediate ones without losing data.
    """

    def __init__(self, feed: "SnapshotFeed", provider_id: str | None) -> None:
        self._feed = feed
        self._provider_id = provider_id
        self._pending: list[Reservation] | None = None
        self._wakeup = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, snapshot: list[Reservation]) -> None:
        if self._closed:
            return
        if self._provider_id is not None:
            snapshot = [r for r in snapshot if r.provider_id == self._provider_id]
        self._pending = list(snapshot)
        self._wakeup.set()

    async def next_snapshot(self) -> list[Reservation]:
        while self._pending is None and not self._closed:
            self._wakeup.clear()
            await self._wakeup.wait()
        if self._closed:
            raise StopAsyncIteration
        snapshot, self._pending = self._pending, None
        return snapshot

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._wakeup.set()
        self._feed.discard(self)


class SnapshotFeed:
    def __init__(self) -> None:
        self._subscribers: list[FeedSubscription] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, provider_id: str | None, current: list[Reservation]) -> FeedSubscription:
        subscription = FeedSubscription(self, provider_id)
        subscription.push(current)
        self._subscribers.append(subscription)
        self._logger.debug("Feed subscriber added", extra={"provider_id": provider_id})
        return subscription

    def publish(self, snapshot: list[Reservation]) -> None:
        for subscription in list(self._subscribers):
            subscription.push(snapshot)

    def discard(self, subscription: FeedSubscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)

    def close_all(self) -> None:
        for subscription in list(self._subscribers):
            subscription.close()
