from __future__ import annotations

import asyncio
import json
import logging
import re
import threading
from pathlib import Path
from typing import Any
from uuid import uuid4

from barberbook.application.exceptions import ProfileNotFound, WriteFailure
from barberbook.application.ports.reservation_store import ReservationStorePort, Subscription
from barberbook.domain.entities.provider_profile import ProviderProfile
from barberbook.domain.entities.reservation import Reservation
from barberbook.infrastructure.store.snapshot_feed import SnapshotFeed
from barberbook.infrastructure.store.validation import check_reservation

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonReservationStore(ReservationStorePort):
    """
    File-backed document store.

    Layout under data_dir/<app_id>/:
      bookings.json          list of reservation documents, arrival order
      barbers/<id>.json      one public profile document per provider
    """

    def __init__(self, data_dir: str = "./data/store", app_id: str = "barber-booking-app") -> None:
        self._root = Path(data_dir) / app_id
        self._bookings_path = self._root / "bookings.json"
        self._profiles_dir = self._root / "barbers"
        self._lock = threading.Lock()
        self._version = 0
        self._published_version = 0
        self._feed = SnapshotFeed()
        self._opened = False
        self._logger = logging.getLogger(__name__)

    async def open(self) -> None:
        self._profiles_dir.mkdir(parents=True, exist_ok=True)
        self._opened = True

    async def close(self) -> None:
        self._opened = False
        self._feed.close_all()

    async def create(self, provider_id: str, reservation: Reservation) -> str:
        if not self._opened:
            raise WriteFailure("Reservation store is not open")
        check_reservation(provider_id, reservation)
        reservation_id = uuid4().hex
        stored = reservation.with_id(reservation_id)

        version, snapshot = await asyncio.to_thread(self._append_booking, provider_id, stored)

        self._logger.info(
            "Reservation stored",
            extra={"provider_id": provider_id, "reservation_id": reservation_id},
        )
        # concurrent writes can resume out of order; never publish an older file state
        if version > self._published_version:
            self._published_version = version
            self._feed.publish(snapshot)
        return reservation_id

    async def list_reservations(self, provider_id: str | None = None) -> list[Reservation]:
        reservations = await asyncio.to_thread(self._read_reservations)
        if provider_id is None:
            return reservations
        return [r for r in reservations if r.provider_id == provider_id]

    def subscribe_all(self, provider_id: str | None = None) -> Subscription:
        subscription = self._feed.subscribe(provider_id, self._read_reservations())
        if not self._opened:
            subscription.close()
        return subscription

    async def get_profile(self, provider_id: str) -> ProviderProfile:
        return await asyncio.to_thread(self._read_profile, provider_id)

    async def put_profile(self, provider_id: str, profile: ProviderProfile) -> None:
        await asyncio.to_thread(self._write_profile, provider_id, profile)

    def _append_booking(self, provider_id: str, stored: Reservation) -> tuple[int, list[Reservation]]:
        with self._lock:
            documents = self._load_bookings(strict=True)
            documents.append(stored.to_payload())
            try:
                self._write_atomic(self._bookings_path, documents)
            except OSError as e:
                self._logger.error(
                    "Failed to persist reservation",
                    extra={"provider_id": provider_id, "error": str(e)},
                )
                raise WriteFailure("Reservation store is unreachable") from e
            self._version += 1
            return self._version, self._to_reservations(documents)

    def _read_reservations(self) -> list[Reservation]:
        with self._lock:
            return self._to_reservations(self._load_bookings())

    def _read_profile(self, provider_id: str) -> ProviderProfile:
        path = self._profile_path(provider_id)
        if path is None or not path.exists():
            raise ProfileNotFound(provider_id)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ProfileNotFound(provider_id) from e
        if not isinstance(data, dict):
            self._logger.warning("Profile document is not an object", extra={"provider_id": provider_id})
            raise ProfileNotFound(provider_id)
        try:
            return ProviderProfile.from_payload(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise ProfileNotFound(provider_id) from e

    def _write_profile(self, provider_id: str, profile: ProviderProfile) -> None:
        path = self._profile_path(provider_id)
        if path is None:
            raise WriteFailure(f"Invalid provider id: {provider_id!r}")
        try:
            with self._lock:
                path.parent.mkdir(parents=True, exist_ok=True)
                self._write_atomic(path, profile.to_payload())
        except OSError as e:
            raise WriteFailure("Profile store is unreachable") from e

    def _profile_path(self, provider_id: str) -> Path | None:
        if not _SAFE_ID.match(provider_id or ""):
            return None
        return self._profiles_dir / f"{provider_id}.json"

    def _load_bookings(self, strict: bool = False) -> list[dict[str, Any]]:
        """
        Load booking documents. Reads treat a corrupted file as empty; with
        strict=True (the write path) it raises WriteFailure so the existing
        file is never replaced by a truncated list.
        """
        if not self._bookings_path.exists():
            return []
        try:
            with open(self._bookings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            if strict:
                self._logger.error("Bookings file unreadable, refusing to write", extra={"error": str(e)})
                raise WriteFailure("Reservation store is corrupted") from e
            self._logger.warning("Bookings file unreadable, treating as empty")
            return []
        if not isinstance(data, list):
            if strict:
                self._logger.error("Bookings file is not a list, refusing to write")
                raise WriteFailure("Reservation store is corrupted")
            return []
        return data

    def _to_reservations(self, documents: list[dict[str, Any]]) -> list[Reservation]:
        reservations: list[Reservation] = []
        for doc in documents:
            try:
                reservations.append(Reservation.from_payload(doc))
            except (AttributeError, KeyError, TypeError, ValueError):
                self._logger.warning(
                    "Skipping malformed reservation document",
                    extra={"reservation_id": doc.get("id") if isinstance(doc, dict) else None},
                )
        return reservations

    def _write_atomic(self, path: Path, data: Any) -> None:
        temp_path = path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise
