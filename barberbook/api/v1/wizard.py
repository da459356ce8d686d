from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException

from barberbook.api.v1.schemas import (
    SelectDateRequestSchema,
    SelectServiceRequestSchema,
    SelectTimeRequestSchema,
    SubmitRequestSchema,
    WizardStateSchema,
)
from barberbook.application.exceptions import SessionNotFound, ValidationFailure, WizardBusy
from barberbook.application.use_cases.booking_wizard import BookingWizard, WizardState
from barberbook.wiring.dependencies import Container, get_container

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_wizard(container: Container, session_id: str) -> BookingWizard:
    try:
        return container.sessions.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Unknown wizard session")


def _transition(session_id: str, action: Callable[[], WizardState]) -> WizardStateSchema:
    try:
        state = action()
    except ValidationFailure as e:
        raise HTTPException(status_code=422, detail=str(e))
    except WizardBusy as e:
        raise HTTPException(status_code=409, detail=str(e))
    return WizardStateSchema.from_state(session_id, state)


async def _start(container: Container, provider_id: str) -> WizardStateSchema:
    wizard = container.new_wizard(provider_id)
    await wizard.load_profile()
    session_id = container.sessions.add(wizard)
    logger.info("Wizard started", extra={"provider_id": provider_id, "session_id": session_id})
    return WizardStateSchema.from_state(session_id, wizard.state)


@router.post("/wizard", response_model=WizardStateSchema, status_code=201)
async def start_default_wizard(container: Container = Depends(get_container)):
    return await _start(container, container.settings.DEFAULT_PROVIDER_ID)


@router.post("/providers/{provider_id}/wizard", response_model=WizardStateSchema, status_code=201)
async def start_wizard(provider_id: str, container: Container = Depends(get_container)):
    return await _start(container, provider_id)


@router.get("/wizard/{session_id}", response_model=WizardStateSchema)
async def get_wizard(session_id: str, container: Container = Depends(get_container)):
    wizard = _get_wizard(container, session_id)
    return WizardStateSchema.from_state(session_id, wizard.state)


@router.post("/wizard/{session_id}/service", response_model=WizardStateSchema)
async def select_service(session_id: str, req: SelectServiceRequestSchema, container: Container = Depends(get_container)):
    wizard = _get_wizard(container, session_id)
    return _transition(session_id, lambda: wizard.select_service(req.service_id))


@router.post("/wizard/{session_id}/date", response_model=WizardStateSchema)
async def select_date(session_id: str, req: SelectDateRequestSchema, container: Container = Depends(get_container)):
    wizard = _get_wizard(container, session_id)
    return _transition(session_id, lambda: wizard.select_date(req.date))


@router.post("/wizard/{session_id}/time", response_model=WizardStateSchema)
async def select_time(session_id: str, req: SelectTimeRequestSchema, container: Container = Depends(get_container)):
    wizard = _get_wizard(container, session_id)
    return _transition(session_id, lambda: wizard.select_time(req.time))


@router.post("/wizard/{session_id}/back", response_model=WizardStateSchema)
async def go_back(session_id: str, container: Container = Depends(get_container)):
    wizard = _get_wizard(container, session_id)
    return _transition(session_id, wizard.back)


@router.post("/wizard/{session_id}/reset", response_model=WizardStateSchema)
async def reset(session_id: str, container: Container = Depends(get_container)):
    wizard = _get_wizard(container, session_id)
    return _transition(session_id, wizard.reset)


@router.post("/wizard/{session_id}/submit", response_model=WizardStateSchema)
async def submit(session_id: str, req: SubmitRequestSchema, container: Container = Depends(get_container)):
    wizard = _get_wizard(container, session_id)
    try:
        state = await wizard.submit(name=req.name, phone=req.phone)
    except ValidationFailure as e:
        raise HTTPException(status_code=422, detail=str(e))
    except WizardBusy as e:
        raise HTTPException(status_code=409, detail=str(e))
    return WizardStateSchema.from_state(session_id, state)
