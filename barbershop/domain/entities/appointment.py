from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum


class AppointmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Customer:
    name: str
    phone: str  # digits only, identity key
    email: str = ""


@dataclass(frozen=True)
class Appointment:
    id: str
    day: date
    start_time: time
    duration_minutes: int
    services: tuple[str, ...]  # display names, e.g. "Corte de Cabelo", "Carbonoplastia M"
    customer: Customer
    status: AppointmentStatus = AppointmentStatus.ACTIVE
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None

    @property
    def start_minutes(self) -> int:
        return self.start_time.hour * 60 + self.start_time.minute

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes

    @property
    def is_active(self) -> bool:
        return self.status == AppointmentStatus.ACTIVE
