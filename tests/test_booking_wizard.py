"""
Tests for the booking wizard state machine.
"""

from __future__ import annotations

import asyncio

import pytest

from barberbook.application.event_bus import EventBus
from barberbook.application.exceptions import ValidationFailure, WizardBusy
from barberbook.application.use_cases.booking_wizard import WRITE_FAILURE_MESSAGE
from barberbook.domain.entities.booking_draft import BookingDraft
from barberbook.domain.entities.wizard_step import WizardStep
from barberbook.infrastructure.store.memory_store import MemoryReservationStore

from conftest import FailingStore, GatedStore, SlowProfileStore, make_wizard, walk_to_details


def test_starts_on_service_selection_with_empty_draft():
    wizard = make_wizard()

    assert wizard.state.step is WizardStep.select_service
    assert wizard.state.draft == BookingDraft()
    assert len(wizard.available_services()) == 4
    assert wizard.available_times()[1] == "09:45"


def test_successful_booking_reaches_confirmation():
    """Service 2 on Mon Jan 01 2024 at 09:45 for Sam Doe ends on the confirmation."""
    store = MemoryReservationStore()
    wizard = make_wizard(store=store)
    walk_to_details(wizard)

    state = asyncio.run(wizard.submit(name="Sam Doe", phone="0850000000"))

    assert state.step is WizardStep.confirmed
    assert state.reservation_id
    assert state.error is None
    assert state.confirmation == "Mon, Jan 1 at 09:45"

    saved = asyncio.run(store.list_reservations("evan"))
    assert len(saved) == 1
    assert saved[0].id == state.reservation_id
    assert saved[0].date == "Mon Jan 01 2024"
    assert saved[0].time == "09:45"
    assert saved[0].service.price == 15
    assert saved[0].name == "Sam Doe"


def test_write_failure_keeps_details_step_and_draft():
    store = FailingStore()
    wizard = make_wizard(store=store)
    walk_to_details(wizard)

    state = asyncio.run(wizard.submit(name="Sam Doe", phone="0850000000"))

    assert state.step is WizardStep.collect_details
    assert state.error == WRITE_FAILURE_MESSAGE
    assert state.reservation_id is None
    assert state.busy is False
    assert state.draft.service.id == 2
    assert state.draft.date.full == "Mon Jan 01 2024"
    assert state.draft.time == "09:45"
    assert state.draft.name == "Sam Doe"
    assert state.draft.phone == "0850000000"


def test_retry_after_write_failure_uses_same_draft():
    store = FailingStore()
    wizard = make_wizard(store=store)
    walk_to_details(wizard)
    asyncio.run(wizard.submit(name="Sam Doe", phone="0850000000"))

    state = asyncio.run(wizard.submit())

    assert store.attempts == 2
    assert state.step is WizardStep.collect_details
    assert state.draft.name == "Sam Doe"


def test_time_step_requires_service_and_date():
    wizard = make_wizard()

    with pytest.raises(ValidationFailure):
        wizard.select_time("09:45")
    with pytest.raises(ValidationFailure):
        wizard.select_date("Mon Jan 01 2024")

    wizard.select_service(1)
    with pytest.raises(ValidationFailure):
        wizard.select_time("09:45")
    assert wizard.state.step is WizardStep.select_date


def test_unknown_values_are_refused():
    wizard = make_wizard()

    with pytest.raises(ValidationFailure):
        wizard.select_service(99)
    wizard.select_service(1)
    with pytest.raises(ValidationFailure):
        wizard.select_date("2023-12-31")
    with pytest.raises(ValidationFailure):
        wizard.select_date("2024-01-22")  # one past the 21 day horizon
    wizard.select_date("2024-01-21")
    with pytest.raises(ValidationFailure):
        wizard.select_time("12:00")
    assert wizard.state.step is WizardStep.select_time


def test_submit_requires_name_and_phone():
    store = MemoryReservationStore()
    wizard = make_wizard(store=store)
    walk_to_details(wizard)

    with pytest.raises(ValidationFailure):
        asyncio.run(wizard.submit(name="Sam Doe", phone=""))
    with pytest.raises(ValidationFailure):
        asyncio.run(wizard.submit(name="   ", phone="0850000000"))

    assert wizard.state.step is WizardStep.collect_details
    assert asyncio.run(store.list_reservations()) == []


def test_back_keeps_earlier_selections():
    wizard = make_wizard()
    walk_to_details(wizard)

    with pytest.raises(ValidationFailure):
        wizard.back()

    wizard = make_wizard()
    wizard.select_service(3)
    wizard.select_date("2024-01-02")
    state = wizard.back()
    assert state.step is WizardStep.select_date
    assert state.draft.service.id == 3
    assert state.draft.date.full == "Tue Jan 02 2024"

    state = wizard.back()
    assert state.step is WizardStep.select_service
    assert state.draft.date.full == "Tue Jan 02 2024"

    with pytest.raises(ValidationFailure):
        wizard.back()

    state = wizard.select_service(4)
    assert state.step is WizardStep.select_date
    assert state.draft.service.id == 4
    assert state.draft.date.full == "Tue Jan 02 2024"


def test_reset_clears_draft_for_another_booking():
    store = MemoryReservationStore()
    wizard = make_wizard(store=store)
    walk_to_details(wizard)

    with pytest.raises(ValidationFailure):
        wizard.reset()

    asyncio.run(wizard.submit(name="Sam Doe", phone="0850000000"))
    state = wizard.reset()

    assert state.step is WizardStep.select_service
    assert state.draft == BookingDraft()
    assert state.reservation_id is None

    walk_to_details(wizard, service_id=1, day="2024-01-05", slot="16:00")
    asyncio.run(wizard.submit(name="Sam Doe", phone="0850000000"))
    assert len(asyncio.run(store.list_reservations("evan"))) == 2


def test_transitions_refused_while_write_in_flight():
    async def scenario():
        store = GatedStore()
        wizard = make_wizard(store=store)
        walk_to_details(wizard)

        pending = asyncio.create_task(wizard.submit(name="Sam Doe", phone="0850000000"))
        for _ in range(3):
            await asyncio.sleep(0)

        assert wizard.state.busy is True
        with pytest.raises(WizardBusy):
            wizard.update_details(name="Someone Else")
        with pytest.raises(WizardBusy):
            await wizard.submit()

        store.gate.set()
        state = await pending
        assert state.step is WizardStep.confirmed
        assert state.busy is False

    asyncio.run(scenario())


def test_cancelled_caller_does_not_cancel_the_write():
    async def scenario():
        store = GatedStore()
        wizard = make_wizard(store=store)
        walk_to_details(wizard)

        pending = asyncio.create_task(wizard.submit(name="Sam Doe", phone="0850000000"))
        for _ in range(3):
            await asyncio.sleep(0)
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

        store.gate.set()
        for _ in range(10):
            if not wizard.state.busy:
                break
            await asyncio.sleep(0)

        assert wizard.state.step is WizardStep.confirmed
        assert len(await store.list_reservations("evan")) == 1

    asyncio.run(scenario())



def test_cancelled_during_profile_lookup_leaves_wizard_usable():
    async def scenario():
        store = SlowProfileStore()
        wizard = make_wizard(store=store)
        walk_to_details(wizard)

        pending = asyncio.create_task(wizard.submit(name="Sam Doe", phone="0850000000"))
        await asyncio.sleep(0.01)
        assert wizard.state.busy is True
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

        assert wizard.state.busy is False
        assert wizard.state.step is WizardStep.collect_details
        assert await store.list_reservations() == []

        state = await wizard.submit()
        assert state.step is WizardStep.confirmed
        assert len(await store.list_reservations("evan")) == 1

    asyncio.run(scenario())

def test_confirmation_publishes_reservation_created():
    async def scenario():
        events = EventBus()
        seen = []

        async def record(event):
            seen.append(event)

        events.subscribe(record)
        wizard = make_wizard(events=events)
        walk_to_details(wizard)
        state = await wizard.submit(name="Sam Doe", phone="0850000000")
        await events.drain()
        return state, seen

    state, seen = asyncio.run(scenario())

    assert len(seen) == 1
    assert seen[0].reservation.id == state.reservation_id
    assert seen[0].webhook_url is None


def test_failed_write_publishes_nothing():
    async def scenario():
        events = EventBus()
        seen = []

        async def record(event):
            seen.append(event)

        events.subscribe(record)
        wizard = make_wizard(store=FailingStore(), events=events)
        walk_to_details(wizard)
        await wizard.submit(name="Sam Doe", phone="0850000000")
        await events.drain()
        return seen

    assert asyncio.run(scenario()) == []


def test_placeholder_profile_when_provider_missing():
    wizard = make_wizard(provider_id="nobody")

    profile = asyncio.run(wizard.load_profile())

    assert profile.is_placeholder is True
    assert profile.slug == "nobody"
    assert profile.name == "Evan Styles"
