from __future__ import annotations

import logging

from barberbook.application.exceptions import NotificationFailure
from barberbook.application.ports.notifier import NotifierPort
from barberbook.domain.entities.events import ReservationCreated


class NotifyProviderUseCase:
    def __init__(self, notifier: NotifierPort, enabled: bool = True) -> None:
        self._notifier = notifier
        self._enabled = enabled
        self._logger = logging.getLogger(__name__)

    async def handle(self, event: ReservationCreated) -> bool:
        """Best-effort webhook delivery. Returns True if delivered, False if skipped or failed."""
        if not event.webhook_url:
            return False
        reservation = event.reservation
        if not self._enabled:
            self._logger.info(
                "NOTIFICATIONS_ENABLED=false -> skipping webhook",
                extra={"reservation_id": reservation.id, "provider_id": reservation.provider_id},
            )
            return False
        try:
            await self._notifier.send(event.webhook_url, reservation.to_payload())
        except NotificationFailure as e:
            self._logger.warning(
                "Webhook delivery failed",
                extra={"reservation_id": reservation.id, "provider_id": reservation.provider_id, "error": str(e)},
            )
            return False
        self._logger.info(
            "Webhook delivered",
            extra={"reservation_id": reservation.id, "provider_id": reservation.provider_id},
        )
        return True
