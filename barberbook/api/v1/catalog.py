from fastapi import APIRouter, Depends

from barberbook.api.v1.schemas import CalendarDaySchema, CatalogResponseSchema, ServiceSchema
from barberbook.application.utils.availability_calendar import generate_window
from barberbook.wiring.dependencies import Container, get_container

router = APIRouter()


@router.get("/catalog", response_model=CatalogResponseSchema)
def get_catalog(container: Container = Depends(get_container)):
    return CatalogResponseSchema(
        services=[ServiceSchema.from_entity(s) for s in container.catalog.list_services()],
        time_slots=container.catalog.time_slots(),
    )


@router.get("/calendar", response_model=list[CalendarDaySchema])
def get_calendar(container: Container = Depends(get_container)):
    window = generate_window(container.now(), container.settings.BOOKING_HORIZON_DAYS)
    return [CalendarDaySchema.from_entity(day) for day in window]
