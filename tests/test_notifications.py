"""
Tests for best-effort webhook delivery after a confirmed booking.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from barberbook.application.event_bus import EventBus
from barberbook.application.exceptions import NotificationFailure
from barberbook.application.use_cases.notify_provider import NotifyProviderUseCase
from barberbook.domain.entities.events import ReservationCreated
from barberbook.domain.entities.provider_profile import ProviderProfile
from barberbook.domain.entities.wizard_step import WizardStep
from barberbook.infrastructure.notifications.mock_notifier import MockNotifier
from barberbook.infrastructure.notifications.webhook_notifier import WebhookNotifier
from barberbook.infrastructure.store.memory_store import MemoryReservationStore

from conftest import make_wizard, walk_to_details

HOOK = "https://hooks.example.com/evan"


def _notifier(handler) -> WebhookNotifier:
    return WebhookNotifier(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _store_with_webhook() -> MemoryReservationStore:
    return MemoryReservationStore(
        profiles={"evan": ProviderProfile(slug="evan-styles", name="Evan Styles", webhook_url=HOOK)}
    )


def test_webhook_posts_reservation_payload():
    received = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append((str(request.url), json.loads(request.content)))
        return httpx.Response(200)

    async def scenario():
        notifier = _notifier(handler)
        events = EventBus()
        events.subscribe(NotifyProviderUseCase(notifier).handle)
        wizard = make_wizard(store=_store_with_webhook(), events=events)
        walk_to_details(wizard)
        state = await wizard.submit(name="Sam Doe", phone="0850000000")
        await events.drain()
        await notifier.aclose()
        return state

    state = asyncio.run(scenario())

    assert len(received) == 1
    url, payload = received[0]
    assert url == HOOK
    assert payload["id"] == state.reservation_id
    assert payload["service"] == {"id": 2, "name": "Beard Maintenance", "duration": "20 min", "price": 15}
    assert payload["time"] == "09:45"


def test_webhook_failure_never_fails_the_booking():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    async def scenario():
        notifier = _notifier(handler)
        events = EventBus()
        events.subscribe(NotifyProviderUseCase(notifier).handle)
        wizard = make_wizard(store=_store_with_webhook(), events=events)
        walk_to_details(wizard)
        state = await wizard.submit(name="Sam Doe", phone="0850000000")
        await events.drain()
        await notifier.aclose()
        return state

    state = asyncio.run(scenario())

    assert state.step is WizardStep.confirmed
    assert state.error is None


def test_unreachable_webhook_raises_notification_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async def scenario():
        notifier = _notifier(handler)
        try:
            await notifier.send(HOOK, {"id": "r1"})
        finally:
            await notifier.aclose()

    with pytest.raises(NotificationFailure):
        asyncio.run(scenario())


def test_notify_use_case_skips_without_webhook_or_when_disabled():
    store = MemoryReservationStore()
    wizard = make_wizard(store=store)
    walk_to_details(wizard)
    state = asyncio.run(wizard.submit(name="Sam Doe", phone="0850000000"))
    reservation = asyncio.run(store.list_reservations("evan"))[0]
    notifier = MockNotifier()

    assert asyncio.run(NotifyProviderUseCase(notifier).handle(ReservationCreated(reservation))) is False
    disabled = NotifyProviderUseCase(notifier, enabled=False)
    assert asyncio.run(disabled.handle(ReservationCreated(reservation, webhook_url=HOOK))) is False
    assert notifier.sent == []

    enabled = NotifyProviderUseCase(notifier)
    assert asyncio.run(enabled.handle(ReservationCreated(reservation, webhook_url=HOOK))) is True
    assert notifier.sent[0][1]["id"] == state.reservation_id


def test_event_bus_isolates_failing_handlers():
    calls = []

    async def broken(event):
        raise RuntimeError("handler bug")

    async def healthy(event):
        calls.append(event.reservation.id)

    async def scenario():
        events = EventBus()
        events.subscribe(broken)
        events.subscribe(healthy)
        wizard = make_wizard(events=events)
        walk_to_details(wizard)
        state = await wizard.submit(name="Sam Doe", phone="0850000000")
        await events.drain()
        return state

    state = asyncio.run(scenario())

    assert state.step is WizardStep.confirmed
    assert calls == [state.reservation_id]
