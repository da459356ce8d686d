from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

DEFAULT_PROFILE_IMAGE = "https://images.unsplash.com/photo-1583195764036-6dc248ac07d9?w=400&h=400&fit=crop"
PLACEHOLDER_PROFILE_IMAGE = "https://images.unsplash.com/photo-1503443207922-dff7d543fd0e?w=400&h=400&fit=crop"


@dataclass(frozen=True)
class ProviderProfile:
    slug: str
    name: str
    specialty: str = ""
    image: str = DEFAULT_PROFILE_IMAGE
    location: str = ""
    bio: str = ""
    webhook_url: str | None = None
    is_placeholder: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "specialty": self.specialty,
            "image": self.image,
            "location": self.location,
            "bio": self.bio,
            "webhook_url": self.webhook_url,
        }

    @staticmethod
    def from_payload(data: dict[str, Any]) -> "ProviderProfile":
        return ProviderProfile(
            slug=str(data.get("slug") or ""),
            name=str(data.get("name") or ""),
            specialty=str(data.get("specialty") or ""),
            image=str(data.get("image") or DEFAULT_PROFILE_IMAGE),
            location=str(data.get("location") or ""),
            bio=str(data.get("bio") or ""),
            webhook_url=data.get("webhook_url") or None,
        )

    @staticmethod
    def placeholder(provider_id: str) -> "ProviderProfile":
        """Demo profile shown while a provider has no stored profile yet."""
        return ProviderProfile(
            slug=provider_id,
            name="Evan Styles",
            specialty="Modern Fades",
            image=PLACEHOLDER_PROFILE_IMAGE,
            location="South William St, Dublin",
            bio="Precision grooming specialist.",
            is_placeholder=True,
        )


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())
