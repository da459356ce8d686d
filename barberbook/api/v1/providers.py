from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from barberbook.api.v1.schemas import DashboardSchema, ProfileSchema, RegisterProfileRequestSchema
from barberbook.application.exceptions import ValidationFailure, WriteFailure
from barberbook.application.use_cases.dashboard import DashboardAggregator
from barberbook.application.use_cases.provider_profile import RegisterProviderUseCase, ResolveProfileUseCase
from barberbook.domain.entities.principal import Principal
from barberbook.wiring.dependencies import (
    Container,
    get_container,
    get_principal,
    get_register_provider_use_case,
    get_resolve_profile_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_owner(principal: Principal, provider_id: str) -> None:
    if principal.is_anonymous:
        raise HTTPException(status_code=401, detail="Sign in required")
    if not principal.owns(provider_id):
        raise HTTPException(status_code=403, detail="Not your dashboard")


@router.get("/providers/{provider_id}", response_model=ProfileSchema)
async def get_profile(
    provider_id: str,
    container: Container = Depends(get_container),
    uc: ResolveProfileUseCase = Depends(get_resolve_profile_use_case),
):
    profile = await uc.execute(provider_id)
    return ProfileSchema.from_entity(profile, container.settings.PUBLIC_BOOKING_BASE_URL)


@router.put("/providers/{provider_id}", response_model=ProfileSchema)
async def register_profile(
    provider_id: str,
    req: RegisterProfileRequestSchema,
    principal: Principal = Depends(get_principal),
    container: Container = Depends(get_container),
    uc: RegisterProviderUseCase = Depends(get_register_provider_use_case),
):
    _require_owner(principal, provider_id)
    try:
        profile = await uc.execute(
            principal=principal,
            provider_id=provider_id,
            name=req.name,
            specialty=req.specialty,
            location=req.location,
            bio=req.bio,
            image=req.image,
            webhook_url=req.webhook_url,
        )
    except ValidationFailure as e:
        raise HTTPException(status_code=422, detail=str(e))
    except WriteFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ProfileSchema.from_entity(profile, container.settings.PUBLIC_BOOKING_BASE_URL)


async def _booking_link(container: Container, provider_id: str) -> str:
    profile = await ResolveProfileUseCase(container.store).execute(provider_id)
    return f"{container.settings.PUBLIC_BOOKING_BASE_URL.rstrip('/')}/{profile.slug}"


@router.get("/providers/{provider_id}/dashboard", response_model=DashboardSchema)
async def get_dashboard(
    provider_id: str,
    principal: Principal = Depends(get_principal),
    container: Container = Depends(get_container),
):
    _require_owner(principal, provider_id)
    async with DashboardAggregator(container.store, provider_id) as aggregator:
        view = await aggregator.refresh()
    return DashboardSchema.from_view(view, booking_link=await _booking_link(container, provider_id))


@router.get("/providers/{provider_id}/dashboard/stream")
async def stream_dashboard(
    provider_id: str,
    request: Request,
    principal: Principal = Depends(get_principal),
    container: Container = Depends(get_container),
) -> StreamingResponse:
    _require_owner(principal, provider_id)
    booking_link = await _booking_link(container, provider_id)

    async def events():
        async with DashboardAggregator(container.store, provider_id) as aggregator:
            async for view in aggregator:
                if await request.is_disconnected():
                    logger.info("Dashboard stream client gone", extra={"provider_id": provider_id})
                    break
                payload = DashboardSchema.from_view(view, booking_link=booking_link).model_dump_json()
                yield f"data: {payload}\n\n"

    return StreamingResponse(events(), media_type="text/event-stream")
