from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barbershop.application.utils.date_parser import (
    format_store_date,
    format_store_time,
    parse_store_date,
    parse_store_time,
)
from barbershop.application.utils.phone import normalize_phone
from barbershop.domain.entities.appointment import Appointment, AppointmentStatus, Customer

SERVICE_SEPARATOR = ", "


class AppointmentRecord(BaseModel):
    """Appointment document as stored under the active/completed/cancelled collections."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    day: str = Field(alias="dia")
    start_time: str = Field(alias="horario")
    services: str = Field("", alias="servico")
    user_name: str = Field("", alias="userName")
    user_phone: str = Field("", alias="userPhone")
    user_email: str = Field("", alias="userEmail")
    duration: int | None = None
    status: str | None = None
    completed_at: str | None = Field(None, alias="completedAt")
    cancelled_at: str | None = Field(None, alias="cancelledAt")

    @field_validator("day")
    @classmethod
    def _check_day(cls, value: str) -> str:
        parse_store_date(value)
        return value.strip()

    @field_validator("start_time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        return format_store_time(parse_store_time(value))

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("duration must not be negative")
        return value

    def to_appointment(
        self,
        appointment_id: str,
        status: AppointmentStatus,
        default_duration: int,
    ) -> Appointment:
        services = tuple(name.strip() for name in self.services.split(",") if name.strip())
        return Appointment(
            id=appointment_id,
            day=parse_store_date(self.day),
            start_time=parse_store_time(self.start_time),
            duration_minutes=self.duration if self.duration is not None else default_duration,
            services=services,
            customer=Customer(
                name=self.user_name,
                phone=normalize_phone(self.user_phone),
                email=self.user_email,
            ),
            status=status,
            completed_at=_parse_timestamp(self.completed_at),
            cancelled_at=_parse_timestamp(self.cancelled_at),
        )

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> AppointmentRecord:
        return cls(
            day=format_store_date(appointment.day),
            start_time=format_store_time(appointment.start_time),
            services=SERVICE_SEPARATOR.join(appointment.services),
            user_name=appointment.customer.name,
            user_phone=appointment.customer.phone,
            user_email=appointment.customer.email,
            duration=appointment.duration_minutes,
            status=None if appointment.is_active else appointment.status.value,
            completed_at=appointment.completed_at.isoformat() if appointment.completed_at else None,
            cancelled_at=appointment.cancelled_at.isoformat() if appointment.cancelled_at else None,
        )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_customer_document(self) -> dict[str, Any]:
        """Reduced copy kept under the customer's personal list."""
        return {"dia": self.day, "horario": self.start_time, "servico": self.services}


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
