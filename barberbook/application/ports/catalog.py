from __future__ import annotations

from abc import ABC, abstractmethod

from barberbook.domain.entities.service import Service


class CatalogPort(ABC):
    @abstractmethod
    def list_services(self) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    def get_service(self, service_id: int) -> Service | None:
        raise NotImplementedError

    @abstractmethod
    def time_slots(self) -> list[str]:
        """Fixed ordered daily offer times."""
        raise NotImplementedError
