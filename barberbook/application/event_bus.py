from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from barberbook.domain.entities.events import ReservationCreated

Handler = Callable[[ReservationCreated], Awaitable[None]]


class EventBus:
    """
    In-process outbox for ReservationCreated. Each handler runs in its own task
    so a slow or failing consumer never delays or fails the publisher.
    """

    def __init__(self) -> None:
        self._handlers: list[Handler] = []
        self._pending: set[asyncio.Task[None]] = set()
        self._logger = logging.getLogger(__name__)

    def subscribe(self, handler: Handler) -> None:
        self._handlers.append(handler)

    def publish(self, event: ReservationCreated) -> None:
        for handler in self._handlers:
            task = asyncio.get_running_loop().create_task(self._run(handler, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _run(self, handler: Handler, event: ReservationCreated) -> None:
        try:
            await handler(event)
        except Exception as e:
            self._logger.exception(
                "Event handler failed",
                extra={"reservation_id": event.reservation.id, "error": str(e)},
            )

    async def drain(self) -> None:
        """Wait for every handler task scheduled so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
