from __future__ import annotations

import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

from barberbook.application.event_bus import EventBus
from barberbook.application.exceptions import WriteFailure
from barberbook.application.use_cases.booking_wizard import BookingWizard
from barberbook.infrastructure.catalog.catalog_store import StaticCatalog
from barberbook.infrastructure.store.memory_store import MemoryReservationStore

DUBLIN = ZoneInfo("Europe/Dublin")
NEW_YEAR = datetime(2024, 1, 1, 8, 30, tzinfo=DUBLIN)  # a Monday


class FailingStore(MemoryReservationStore):
    def __init__(self) -> None:
        super().__init__()
        self.attempts = 0

    async def create(self, provider_id, reservation):
        self.attempts += 1
        raise WriteFailure("backend unreachable")


class GatedStore(MemoryReservationStore):
    """Holds every write until the gate opens."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()

    async def create(self, provider_id, reservation):
        await self.gate.wait()
        return await super().create(provider_id, reservation)



class SlowProfileStore(MemoryReservationStore):
    """Profile lookups take a while, like a remote document read."""

    async def get_profile(self, provider_id):
        await asyncio.sleep(0.05)
        return await super().get_profile(provider_id)


def make_wizard(store=None, events=None, provider_id: str = "evan", now: datetime = NEW_YEAR) -> BookingWizard:
    return BookingWizard(
        provider_id=provider_id,
        catalog=StaticCatalog(),
        store=store if store is not None else MemoryReservationStore(),
        events=events if events is not None else EventBus(),
        clock=lambda: now,
    )


def walk_to_details(wizard: BookingWizard, service_id: int = 2, day: str = "Mon Jan 01 2024", slot: str = "09:45") -> None:
    wizard.select_service(service_id)
    wizard.select_date(day)
    wizard.select_time(slot)

