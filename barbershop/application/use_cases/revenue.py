from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from barbershop.application.ports.appointment_store import AppointmentStorePort
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.domain.entities.appointment import Appointment, AppointmentStatus


@dataclass(frozen=True)
class RevenueReport:
    day: date
    daily_total: float
    monthly_total: float
    completed_today: int
    completed_this_month: int


class RevenueUseCase:
    def __init__(self, appointments: AppointmentStorePort, catalog: ServiceCatalogPort) -> None:
        self._appointments = appointments
        self._catalog = catalog
        self._logger = logging.getLogger(__name__)

    def report(self, day: date) -> RevenueReport:
        completed = self._appointments.list_appointments(AppointmentStatus.COMPLETED)
        today = [a for a in completed if a.day == day]
        month = [a for a in completed if (a.day.year, a.day.month) == (day.year, day.month)]
        return RevenueReport(
            day=day,
            daily_total=sum(self.price_of(a) for a in today),
            monthly_total=sum(self.price_of(a) for a in month),
            completed_today=len(today),
            completed_this_month=len(month),
        )

    def price_of(self, appointment: Appointment) -> float:
        """Sum of service prices; tiered services without a size count at the medium price."""
        total = 0.0
        for name in appointment.services:
            match = self._catalog.find_by_name(name)
            if match is None:
                self._logger.debug("Unpriced service", extra={"appointment_id": appointment.id, "reason": name})
                continue
            service, size = match
            total += service.price_for(size)
        return total
