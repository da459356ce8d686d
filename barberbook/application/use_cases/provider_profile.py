from __future__ import annotations

import logging

from barberbook.application.exceptions import ProfileNotFound, ValidationFailure
from barberbook.application.ports.reservation_store import ReservationStorePort
from barberbook.domain.entities.principal import Principal
from barberbook.domain.entities.provider_profile import DEFAULT_PROFILE_IMAGE, ProviderProfile, slugify


class ResolveProfileUseCase:
    def __init__(self, store: ReservationStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    async def execute(self, provider_id: str) -> ProviderProfile:
        """Stored public profile, or the placeholder when none exists."""
        try:
            return await self._store.get_profile(provider_id)
        except ProfileNotFound:
            self._logger.warning(
                "Provider profile not found, using placeholder",
                extra={"provider_id": provider_id, "reason": "profile_not_found"},
            )
            return ProviderProfile.placeholder(provider_id)


class RegisterProviderUseCase:
    def __init__(self, store: ReservationStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        principal: Principal,
        provider_id: str,
        name: str,
        specialty: str,
        location: str = "",
        bio: str = "",
        image: str | None = None,
        webhook_url: str | None = None,
    ) -> ProviderProfile:
        if not principal.owns(provider_id):
            raise PermissionError("Only the provider may write its own profile")
        name = (name or "").strip()
        if not name:
            raise ValidationFailure("Provider name is required")

        profile = ProviderProfile(
            slug=slugify(name),
            name=name,
            specialty=(specialty or "").strip(),
            image=image or DEFAULT_PROFILE_IMAGE,
            location=(location or "").strip(),
            bio=(bio or "").strip(),
            webhook_url=(webhook_url or "").strip() or None,
        )
        await self._store.put_profile(provider_id, profile)
        self._logger.info("Provider profile saved", extra={"provider_id": provider_id})
        return profile
