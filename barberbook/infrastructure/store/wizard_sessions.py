from __future__ import annotations

from uuid import uuid4

from barberbook.application.exceptions import SessionNotFound
from barberbook.application.use_cases.booking_wizard import BookingWizard


class WizardSessionRegistry:
    """In-memory wizard sessions. Each session id owns exactly one wizard."""

    def __init__(self, limit: int = 10_000) -> None:
        self._sessions: dict[str, BookingWizard] = {}
        self._limit = limit

    def add(self, wizard: BookingWizard) -> str:
        if len(self._sessions) >= self._limit:
            # drop the oldest session
            self._sessions.pop(next(iter(self._sessions)))
        session_id = uuid4().hex
        self._sessions[session_id] = wizard
        return session_id

    def get(self, session_id: str) -> BookingWizard:
        wizard = self._sessions.get(session_id)
        if wizard is None:
            raise SessionNotFound(session_id)
        return wizard
