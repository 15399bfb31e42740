from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from barbershop.domain.entities.service import ServiceSize


class BookingStep(str, Enum):
    SELECTING_SERVICES = "selecting_services"
    SELECTING_DATE = "selecting_date"
    SELECTING_TIME = "selecting_time"
    CONFIRMING = "confirming"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class BookingSession:
    step: BookingStep = BookingStep.SELECTING_SERVICES
    service_ids: tuple[str, ...] = ()
    sizes: dict[str, ServiceSize] = field(default_factory=dict)
    duration_minutes: int | None = None
    selected_date: date | None = None
    available_slots: tuple[time, ...] = ()
    selected_time: time | None = None
    appointment_id: str | None = None
    notices: tuple[str, ...] = ()
