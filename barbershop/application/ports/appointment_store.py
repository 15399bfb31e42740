from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime

from barbershop.application.ports.document_store import ChangeCallback, Unsubscribe
from barbershop.domain.entities.appointment import Appointment, AppointmentStatus


class AppointmentStorePort(ABC):
    @abstractmethod
    def get_appointments_for_date(self, day: date) -> list[Appointment]:
        """Active appointments on day, ordered by start time."""
        raise NotImplementedError

    @abstractmethod
    def get_disabled_dates(self) -> set[date]:
        """Dates manually blacked out by staff."""
        raise NotImplementedError

    @abstractmethod
    def new_appointment_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def create_appointment(self, appointment: Appointment) -> Appointment:
        """Write under the global active collection and the customer's personal list, same id."""
        raise NotImplementedError

    @abstractmethod
    def transition_status(self, appointment_id: str, new_status: AppointmentStatus, timestamp: datetime) -> Appointment:
        """Move an active appointment to the completed or cancelled collection, keeping its id."""
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, path: str, callback: ChangeCallback) -> Unsubscribe:
        raise NotImplementedError

    @abstractmethod
    def watched_paths(self) -> tuple[str, ...]:
        """Collections whose changes affect calendar views."""
        raise NotImplementedError

    @abstractmethod
    def get_appointment(self, appointment_id: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def list_appointments(self, status: AppointmentStatus | None = None) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def list_customer_appointments(self, phone: str) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def save_appointment(self, appointment: Appointment) -> Appointment:
        """Overwrite an active appointment record (staff edit)."""
        raise NotImplementedError

    @abstractmethod
    def set_date_disabled(self, day: date, disabled: bool) -> None:
        raise NotImplementedError
