from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import Header, Request

from barberbook.application.event_bus import EventBus
from barberbook.application.ports.catalog import CatalogPort
from barberbook.application.ports.reservation_store import ReservationStorePort
from barberbook.application.use_cases.booking_wizard import BookingWizard
from barberbook.application.use_cases.notify_provider import NotifyProviderUseCase
from barberbook.application.use_cases.provider_profile import RegisterProviderUseCase, ResolveProfileUseCase
from barberbook.core.config import Settings
from barberbook.domain.entities.principal import Principal
from barberbook.infrastructure.catalog.catalog_store import StaticCatalog
from barberbook.infrastructure.notifications.mock_notifier import MockNotifier
from barberbook.infrastructure.notifications.webhook_notifier import WebhookNotifier
from barberbook.infrastructure.store.json_store import JsonReservationStore
from barberbook.infrastructure.store.memory_store import MemoryReservationStore
from barberbook.infrastructure.store.wizard_sessions import WizardSessionRegistry


@dataclass
class Container:
    settings: Settings
    store: ReservationStorePort
    catalog: CatalogPort
    notifier: MockNotifier | WebhookNotifier
    events: EventBus
    sessions: WizardSessionRegistry = field(default_factory=WizardSessionRegistry)
    clock: Callable[[], datetime] | None = None

    def now(self) -> datetime:
        if self.clock is not None:
            return self.clock()
        return datetime.now(ZoneInfo(self.settings.BUSINESS_TIMEZONE))

    def new_wizard(self, provider_id: str) -> BookingWizard:
        return BookingWizard(
            provider_id=provider_id,
            catalog=self.catalog,
            store=self.store,
            events=self.events,
            clock=self.now,
            horizon_days=self.settings.BOOKING_HORIZON_DAYS,
        )

    async def open(self) -> None:
        await self.store.open()

    async def close(self) -> None:
        await self.events.drain()
        await self.store.close()
        await self.notifier.aclose()


def build_store(settings: Settings) -> ReservationStorePort:
    provider = settings.STORE_PROVIDER
    if provider == "auto":
        provider = "json" if settings.ENV.lower() in {"dev", "local"} else "memory"
    if provider == "json":
        return JsonReservationStore(data_dir=settings.STORE_DATA_DIR, app_id=settings.APP_ID)
    return MemoryReservationStore()


def build_container(
    settings: Settings,
    store: ReservationStorePort | None = None,
    notifier: MockNotifier | WebhookNotifier | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Container:
    logger = logging.getLogger(__name__)
    store = store or build_store(settings)
    if notifier is None:
        if settings.ENV.lower() in {"dev", "local"}:
            notifier = MockNotifier()
        else:
            notifier = WebhookNotifier(timeout=settings.WEBHOOK_TIMEOUT_SECONDS)
    logger.info(
        "Container built",
        extra={"reason": f"store={type(store).__name__} notifier={type(notifier).__name__}"},
    )

    events = EventBus()
    events.subscribe(NotifyProviderUseCase(notifier, enabled=settings.NOTIFICATIONS_ENABLED).handle)
    return Container(
        settings=settings,
        store=store,
        catalog=StaticCatalog(),
        notifier=notifier,
        events=events,
        clock=clock,
    )


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_principal(x_principal_id: str | None = Header(None, alias="X-Principal-Id")) -> Principal:
    return Principal.from_header(x_principal_id)


def get_resolve_profile_use_case(request: Request) -> ResolveProfileUseCase:
    return ResolveProfileUseCase(get_container(request).store)


def get_register_provider_use_case(request: Request) -> RegisterProviderUseCase:
    return RegisterProviderUseCase(get_container(request).store)
