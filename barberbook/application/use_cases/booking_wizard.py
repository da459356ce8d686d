from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from barberbook.application.event_bus import EventBus
from barberbook.application.exceptions import ValidationFailure, WizardBusy, WriteFailure
from barberbook.application.ports.catalog import CatalogPort
from barberbook.application.ports.reservation_store import ReservationStorePort
from barberbook.application.use_cases.provider_profile import ResolveProfileUseCase
from barberbook.application.utils.availability_calendar import DEFAULT_HORIZON_DAYS, find_day, generate_window
from barberbook.domain.entities.booking_draft import BookingDraft
from barberbook.domain.entities.calendar_day import CalendarDay
from barberbook.domain.entities.events import ReservationCreated
from barberbook.domain.entities.provider_profile import ProviderProfile
from barberbook.domain.entities.reservation import Reservation
from barberbook.domain.entities.service import Service
from barberbook.domain.entities.wizard_step import WizardStep

WRITE_FAILURE_MESSAGE = "Failed to save booking."

_PREVIOUS_STEP = {
    WizardStep.select_date: WizardStep.select_service,
    WizardStep.select_time: WizardStep.select_date,
}


@dataclass(frozen=True)
class WizardState:
    provider_id: str
    step: WizardStep
    draft: BookingDraft
    reservation_id: str | None = None
    error: str | None = None
    busy: bool = False

    @property
    def confirmation(self) -> str | None:
        """e.g. "Mon, Jan 1 at 09:45" once confirmed."""
        if self.step is not WizardStep.confirmed or self.draft.date is None:
            return None
        day = self.draft.date
        return f"{day.day_name}, {day.month} {day.day_num} at {self.draft.time}"


class BookingWizard:
    """
    Linear booking flow: service -> date -> time -> contact details -> confirmed.

    One instance per client session. Every transition is refused with
    ValidationFailure unless the draft already holds the fields the target step
    depends on, and with WizardBusy while the reservation write is in flight.
    """

    def __init__(
        self,
        provider_id: str,
        catalog: CatalogPort,
        store: ReservationStorePort,
        events: EventBus,
        clock: Callable[[], datetime],
        horizon_days: int = DEFAULT_HORIZON_DAYS,
    ) -> None:
        self.provider_id = provider_id
        self._catalog = catalog
        self._store = store
        self._events = events
        self._clock = clock
        self._horizon_days = horizon_days
        self._profiles = ResolveProfileUseCase(store)
        self._profile: ProviderProfile | None = None
        self._step = WizardStep.select_service
        self._draft = BookingDraft()
        self._reservation_id: str | None = None
        self._error: str | None = None
        self._busy = False
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> WizardState:
        return WizardState(
            provider_id=self.provider_id,
            step=self._step,
            draft=self._draft,
            reservation_id=self._reservation_id,
            error=self._error,
            busy=self._busy,
        )

    @property
    def profile(self) -> ProviderProfile | None:
        return self._profile

    async def load_profile(self) -> ProviderProfile:
        if self._profile is None:
            self._profile = await self._profiles.execute(self.provider_id)
        return self._profile

    def available_services(self) -> list[Service]:
        return self._catalog.list_services()

    def available_dates(self) -> list[CalendarDay]:
        return generate_window(self._clock(), self._horizon_days)

    def available_times(self) -> list[str]:
        return self._catalog.time_slots()

    def select_service(self, service_id: int) -> WizardState:
        self._ensure_idle()
        self._require_step(WizardStep.select_service)
        service = self._catalog.get_service(service_id)
        if service is None:
            raise ValidationFailure(f"Unknown service: {service_id}")
        self._draft = replace(self._draft, service=service)
        return self._move_to(WizardStep.select_date)

    def select_date(self, value: CalendarDay | str) -> WizardState:
        self._ensure_idle()
        self._require_step(WizardStep.select_date)
        if self._draft.service is None:
            raise ValidationFailure("Choose a service before picking a date")
        window = self.available_dates()
        if isinstance(value, CalendarDay):
            day = next((d for d in window if d == value), None)
        else:
            day = find_day(window, value)
        if day is None:
            raise ValidationFailure(f"Date is not bookable: {value}")
        self._draft = replace(self._draft, date=day)
        return self._move_to(WizardStep.select_time)

    def select_time(self, slot: str) -> WizardState:
        self._ensure_idle()
        self._require_step(WizardStep.select_time)
        if self._draft.service is None or self._draft.date is None:
            raise ValidationFailure("Choose a service and a date before picking a time")
        slot = (slot or "").strip()
        if slot not in self._catalog.time_slots():
            raise ValidationFailure(f"Time is not offered: {slot}")
        self._draft = replace(self._draft, time=slot)
        return self._move_to(WizardStep.collect_details)

    def update_details(self, name: str | None = None, phone: str | None = None) -> WizardState:
        self._ensure_idle()
        self._require_step(WizardStep.collect_details)
        self._draft = replace(
            self._draft,
            name=self._draft.name if name is None else name,
            phone=self._draft.phone if phone is None else phone,
        )
        return self.state

    def back(self) -> WizardState:
        self._ensure_idle()
        previous = _PREVIOUS_STEP.get(self._step)
        if previous is None:
            raise ValidationFailure(f"No way back from {self._step.value}")
        return self._move_to(previous)

    def reset(self) -> WizardState:
        """Book another session: only from the confirmation, clears the whole draft."""
        self._ensure_idle()
        self._require_step(WizardStep.confirmed)
        self._draft = BookingDraft()
        self._reservation_id = None
        self._error = None
        return self._move_to(WizardStep.select_service)

    async def submit(self, name: str | None = None, phone: str | None = None) -> WizardState:
        self._ensure_idle()
        self._require_step(WizardStep.collect_details)
        if name is not None or phone is not None:
            self.update_details(name, phone)

        draft = self._draft
        if draft.service is None or draft.date is None or draft.time is None:
            raise ValidationFailure("Service, date and time must be chosen before submitting")
        if not draft.has_contact_details:
            raise ValidationFailure("Name and phone are required")

        self._busy = True
        self._error = None
        try:
            profile = await self.load_profile()
        except BaseException:
            # includes cancellation while the profile lookup is pending
            self._busy = False
            raise

        reservation = Reservation(
            provider_id=self.provider_id,
            service=draft.service,
            date=draft.date.full,
            time=draft.time,
            name=draft.name.strip(),
            phone=draft.phone.strip(),
            created_at=self._clock().astimezone(timezone.utc).isoformat(),
        )

        write = asyncio.ensure_future(self._store.create(self.provider_id, reservation))
        # Registered before shield() so the outcome lands on the session even if
        # the caller is cancelled while waiting.
        write.add_done_callback(lambda task: self._apply_write_result(task, reservation, profile))
        try:
            await asyncio.shield(write)
        except WriteFailure:
            pass
        return self.state

    def _apply_write_result(
        self,
        task: "asyncio.Future[str]",
        reservation: Reservation,
        profile: ProviderProfile,
    ) -> None:
        self._busy = False
        if task.cancelled():
            self._error = WRITE_FAILURE_MESSAGE
            return
        exc = task.exception()
        if exc is not None:
            self._error = WRITE_FAILURE_MESSAGE
            self._logger.error(
                "Reservation write failed",
                extra={"provider_id": self.provider_id, "step": self._step.value, "error": str(exc)},
            )
            return

        self._reservation_id = task.result()
        self._move_to(WizardStep.confirmed)
        self._events.publish(
            ReservationCreated(
                reservation=reservation.with_id(self._reservation_id),
                webhook_url=profile.webhook_url,
            )
        )

    def _move_to(self, step: WizardStep) -> WizardState:
        self._logger.debug(
            "Wizard transition",
            extra={"provider_id": self.provider_id, "step": f"{self._step.value}->{step.value}"},
        )
        self._step = step
        return self.state

    def _require_step(self, expected: WizardStep) -> None:
        if self._step is not expected:
            raise ValidationFailure(f"Not allowed while on {self._step.value}")

    def _ensure_idle(self) -> None:
        if self._busy:
            raise WizardBusy("A booking is being saved")
