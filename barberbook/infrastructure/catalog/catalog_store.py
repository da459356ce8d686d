from __future__ import annotations

from collections.abc import Iterable

from barberbook.application.ports.catalog import CatalogPort
from barberbook.domain.entities.service import Service
from barberbook.infrastructure.catalog.catalog_data import SERVICES, TIME_SLOTS


class StaticCatalog(CatalogPort):
    def __init__(
        self,
        services: Iterable[Service] | None = None,
        time_slots: Iterable[str] | None = None,
    ) -> None:
        self._services = {s.id: s for s in (services if services is not None else SERVICES)}
        self._time_slots = tuple(time_slots if time_slots is not None else TIME_SLOTS)

    def list_services(self) -> list[Service]:
        return list(self._services.values())

    def get_service(self, service_id: int) -> Service | None:
        return self._services.get(service_id)

    def time_slots(self) -> list[str]:
        return list(self._time_slots)
