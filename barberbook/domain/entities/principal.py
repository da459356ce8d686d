from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    id: str | None = None
    is_anonymous: bool = True

    @staticmethod
    def from_header(value: str | None) -> "Principal":
        principal_id = (value or "").strip()
        if not principal_id:
            return Principal()
        return Principal(id=principal_id, is_anonymous=False)

    def owns(self, provider_id: str) -> bool:
        return not self.is_anonymous and self.id == provider_id
