from __future__ import annotations

from pydantic import BaseModel, Field

from barberbook.application.use_cases.booking_wizard import WizardState
from barberbook.domain.entities.calendar_day import CalendarDay
from barberbook.domain.entities.dashboard_view import DashboardView
from barberbook.domain.entities.provider_profile import ProviderProfile
from barberbook.domain.entities.reservation import Reservation
from barberbook.domain.entities.service import Service
from barberbook.domain.entities.wizard_step import WizardStep


class ServiceSchema(BaseModel):
    id: int
    name: str
    duration: str
    price: int

    @staticmethod
    def from_entity(service: Service) -> "ServiceSchema":
        return ServiceSchema(id=service.id, name=service.name, duration=service.duration, price=service.price)


class CalendarDaySchema(BaseModel):
    date: str
    full: str
    day_name: str
    day_num: int
    month: str
    is_today: bool

    @staticmethod
    def from_entity(day: CalendarDay) -> "CalendarDaySchema":
        return CalendarDaySchema(
            date=day.date.isoformat(),
            full=day.full,
            day_name=day.day_name,
            day_num=day.day_num,
            month=day.month,
            is_today=day.is_today,
        )


class CatalogResponseSchema(BaseModel):
    services: list[ServiceSchema]
    time_slots: list[str]


class ProfileSchema(BaseModel):
    slug: str
    name: str
    specialty: str = ""
    image: str = ""
    location: str = ""
    bio: str = ""
    is_placeholder: bool = False
    booking_link: str | None = None

    @staticmethod
    def from_entity(profile: ProviderProfile, base_url: str | None = None) -> "ProfileSchema":
        return ProfileSchema(
            slug=profile.slug,
            name=profile.name,
            specialty=profile.specialty,
            image=profile.image,
            location=profile.location,
            bio=profile.bio,
            is_placeholder=profile.is_placeholder,
            booking_link=f"{base_url.rstrip('/')}/{profile.slug}" if base_url else None,
        )


class RegisterProfileRequestSchema(BaseModel):
    name: str = Field(min_length=1)
    specialty: str = ""
    location: str = ""
    bio: str = ""
    image: str | None = None
    webhook_url: str | None = None


class SelectServiceRequestSchema(BaseModel):
    service_id: int


class SelectDateRequestSchema(BaseModel):
    date: str  # ISO date or "Mon Jan 01 2024"


class SelectTimeRequestSchema(BaseModel):
    time: str


class SubmitRequestSchema(BaseModel):
    name: str | None = None
    phone: str | None = None


class DraftSchema(BaseModel):
    service: ServiceSchema | None = None
    date: CalendarDaySchema | None = None
    time: str | None = None
    name: str = ""
    phone: str = ""


class WizardStateSchema(BaseModel):
    session_id: str
    provider_id: str
    step: WizardStep
    draft: DraftSchema
    reservation_id: str | None = None
    error: str | None = None
    busy: bool = False
    confirmation: str | None = None

    @staticmethod
    def from_state(session_id: str, state: WizardState) -> "WizardStateSchema":
        draft = state.draft
        return WizardStateSchema(
            session_id=session_id,
            provider_id=state.provider_id,
            step=state.step,
            draft=DraftSchema(
                service=ServiceSchema.from_entity(draft.service) if draft.service else None,
                date=CalendarDaySchema.from_entity(draft.date) if draft.date else None,
                time=draft.time,
                name=draft.name,
                phone=draft.phone,
            ),
            reservation_id=state.reservation_id,
            error=state.error,
            busy=state.busy,
            confirmation=state.confirmation,
        )


class ReservationSchema(BaseModel):
    id: str | None
    provider_id: str
    service: ServiceSchema
    date: str
    time: str
    name: str
    phone: str
    created_at: str

    @staticmethod
    def from_entity(reservation: Reservation) -> "ReservationSchema":
        return ReservationSchema(
            id=reservation.id,
            provider_id=reservation.provider_id,
            service=ServiceSchema.from_entity(reservation.service),
            date=reservation.date,
            time=reservation.time,
            name=reservation.name,
            phone=reservation.phone,
            created_at=reservation.created_at,
        )


class DashboardSchema(BaseModel):
    provider_id: str
    count: int
    total_revenue: int
    reservations: list[ReservationSchema] = Field(default_factory=list)
    booking_link: str | None = None

    @staticmethod
    def from_view(view: DashboardView, booking_link: str | None = None) -> "DashboardSchema":
        return DashboardSchema(
            provider_id=view.provider_id,
            count=view.count,
            total_revenue=view.total_revenue,
            reservations=[ReservationSchema.from_entity(r) for r in view.reservations],
            booking_link=booking_link,
        )
