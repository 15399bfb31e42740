from __future__ import annotations

from barbershop.application.ports.appointment_store import AppointmentStorePort
from barbershop.application.utils.phone import normalize_phone
from barbershop.domain.entities.appointment import Appointment


class CustomerHistoryUseCase:
    def __init__(self, appointments: AppointmentStorePort) -> None:
        self._appointments = appointments

    def execute(self, phone: str) -> list[Appointment]:
        """All of a customer's appointments, any status, newest first."""
        return self._appointments.list_customer_appointments(normalize_phone(phone))
