from __future__ import annotations

import logging
from typing import Any

from barberbook.application.ports.notifier import NotifierPort


class MockNotifier(NotifierPort):
    def __init__(self) -> None:
        self.sent: list[tuple[str, dict[str, Any]]] = []
        self._logger = logging.getLogger(__name__)

    async def send(self, url: str, payload: dict[str, Any]) -> None:
        self.sent.append((url, payload))
        self._logger.info("Mock webhook delivery", extra={"reservation_id": payload.get("id")})

    async def aclose(self) -> None:
        return None
