from __future__ import annotations

import logging
from typing import Any

import httpx

from barberbook.application.exceptions import NotificationFailure
from barberbook.application.ports.notifier import NotifierPort


class WebhookNotifier(NotifierPort):
    def __init__(self, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    async def send(self, url: str, payload: dict[str, Any]) -> None:
        try:
            resp = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise NotificationFailure(f"Webhook unreachable: {e}") from e

        if resp.status_code >= 400:
            self._logger.warning(
                "Webhook rejected payload",
                extra={"status": resp.status_code, "reason": resp.text[:200]},
            )
            raise NotificationFailure(f"Webhook returned HTTP {resp.status_code}")

    async def aclose(self) -> None:
        await self._client.aclose()
