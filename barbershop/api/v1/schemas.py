from datetime import date as Date
from datetime import datetime

from pydantic import BaseModel, Field

from barbershop.domain.entities.appointment import Appointment
from barbershop.domain.entities.service import Service, ServiceSize


class SizePricesSchema(BaseModel):
    small: float = Field(ge=0)
    medium: float = Field(ge=0)
    large: float = Field(ge=0)


class ServiceSchema(BaseModel):
    id: str
    name: str
    description: str | None = None
    duration_minutes: int | None = Field(None, ge=0)
    duration_class: str | None = None
    price: float | None = Field(None, ge=0)
    sizes: SizePricesSchema | None = None

    @classmethod
    def from_entity(cls, service: Service) -> "ServiceSchema":
        return cls(
            id=service.id,
            name=service.name,
            description=service.description,
            duration_minutes=service.duration_minutes,
            duration_class=service.duration_class.value,
            price=service.price,
            sizes=(
                SizePricesSchema(small=service.sizes.small, medium=service.sizes.medium, large=service.sizes.large)
                if service.sizes
                else None
            ),
        )


class ServiceUpdateSchema(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    duration_minutes: int | None = Field(None, ge=0)
    price: float | None = Field(None, ge=0)
    sizes: SizePricesSchema | None = None


class AvailabilityResponseSchema(BaseModel):
    day: Date
    duration_minutes: int
    available_slots: list[str]
    notices: list[str] = Field(default_factory=list)


class CustomerSchema(BaseModel):
    name: str
    phone: str
    email: str = ""


class BookingRequestSchema(BaseModel):
    services: list[str] = Field(default_factory=list)
    sizes: dict[str, ServiceSize] = Field(default_factory=dict)
    day: Date
    start_time: str = Field(description="HH:MM, 24h")
    customer: CustomerSchema


class BookingResponseSchema(BaseModel):
    appointment_id: str
    day: Date
    start_time: str
    duration_minutes: int
    notices: list[str] = Field(default_factory=list)


class AppointmentSchema(BaseModel):
    id: str
    day: Date
    start_time: str
    duration_minutes: int
    services: list[str]
    customer: CustomerSchema
    status: str
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentSchema":
        return cls(
            id=appointment.id,
            day=appointment.day,
            start_time=appointment.start_time.strftime("%H:%M"),
            duration_minutes=appointment.duration_minutes,
            services=list(appointment.services),
            customer=CustomerSchema(
                name=appointment.customer.name,
                phone=appointment.customer.phone,
                email=appointment.customer.email,
            ),
            status=appointment.status.value,
            completed_at=appointment.completed_at,
            cancelled_at=appointment.cancelled_at,
        )


class StaffAppointmentSchema(BaseModel):
    day: Date
    start_time: str
    customer_name: str
    customer_phone: str = ""
    customer_email: str = ""
    services: list[str] = Field(default_factory=list)


class DisabledDateSchema(BaseModel):
    day: Date
    disabled: bool


class DayStatsSchema(BaseModel):
    day: Date
    active: int
    completed: int
    cancelled: int
    disabled: bool


class RevenueSchema(BaseModel):
    day: Date
    daily_total: float
    monthly_total: float
    completed_today: int
    completed_this_month: int
