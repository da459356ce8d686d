from __future__ import annotations

from barberbook.application.exceptions import WriteFailure
from barberbook.domain.entities.reservation import Reservation


def check_reservation(provider_id: str, reservation: Reservation) -> None:
    """Reject malformed payloads the way a document store rule set would."""
    if not provider_id or not provider_id.strip():
        raise WriteFailure("Reservation rejected: missing provider id")
    if reservation.provider_id != provider_id:
        raise WriteFailure("Reservation rejected: provider id mismatch")
    if not isinstance(reservation.service.price, int) or reservation.service.price < 0:
        raise WriteFailure("Reservation rejected: invalid service price")
    for field_name in ("date", "time", "name", "phone", "created_at"):
        if not str(getattr(reservation, field_name) or "").strip():
            raise WriteFailure(f"Reservation rejected: missing {field_name}")
