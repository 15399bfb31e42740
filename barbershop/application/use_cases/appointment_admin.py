from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from barbershop.application.exceptions import AppointmentNotFound, InvalidSelection, RuleViolation
from barbershop.application.ports.appointment_store import AppointmentStorePort
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.application.utils.date_parser import parse_time_of_day, to_minutes
from barbershop.application.utils.duration import duration_for
from barbershop.application.utils.phone import normalize_phone
from barbershop.domain.entities.appointment import Appointment, AppointmentStatus, Customer
from barbershop.domain.entities.schedule_rules import ScheduleRules


@dataclass(frozen=True)
class StaffAppointmentForm:
    day: date | None
    start_time: str
    customer_name: str
    services: tuple[str, ...]  # display names, e.g. "Barba", "Carbonoplastia G"
    customer_phone: str = ""
    customer_email: str = ""


class AppointmentAdminUseCase:
    """Staff operations: day list, status transitions, manual entries and day overrides."""

    def __init__(
        self,
        appointments: AppointmentStorePort,
        catalog: ServiceCatalogPort,
        rules: ScheduleRules,
        timezone: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._appointments = appointments
        self._catalog = catalog
        self._rules = rules
        self._timezone = timezone
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def _now(self) -> datetime:
        return self._clock() if self._clock is not None else datetime.now(self._timezone)

    def list_for_day(self, day: date, search: str | None = None) -> list[Appointment]:
        needle = (search or "").strip().casefold()
        return [
            appointment
            for appointment in self._appointments.list_appointments()
            if appointment.day == day and needle in appointment.customer.name.casefold()
        ]

    def complete(self, appointment_id: str) -> Appointment:
        return self._appointments.transition_status(appointment_id, AppointmentStatus.COMPLETED, self._now())

    def cancel(self, appointment_id: str) -> Appointment:
        return self._appointments.transition_status(appointment_id, AppointmentStatus.CANCELLED, self._now())

    def create(self, form: StaffAppointmentForm) -> Appointment:
        appointment = self._build(self._appointments.new_appointment_id(), form)
        return self._appointments.create_appointment(appointment)

    def update(self, appointment_id: str, form: StaffAppointmentForm) -> Appointment:
        existing = self._appointments.get_appointment(appointment_id)
        if existing is None or not existing.is_active:
            raise AppointmentNotFound(f"Active appointment {appointment_id} not found")
        return self._appointments.save_appointment(self._build(appointment_id, form))

    def toggle_disabled_date(self, day: date) -> bool:
        """Flip the manual override for day. Returns True when the day is now disabled."""
        disabled = day not in self._appointments.get_disabled_dates()
        self._appointments.set_date_disabled(day, disabled)
        return disabled

    def _build(self, appointment_id: str, form: StaffAppointmentForm) -> Appointment:
        if form.day is None or not form.start_time.strip() or not form.customer_name.strip() or not form.services:
            raise InvalidSelection("Date, time, customer name and at least one service are required.")

        start = parse_time_of_day(form.start_time)
        if start is None:
            raise RuleViolation("invalid_time", "Enter a valid time in the HH:MM format.")
        earliest = to_minutes(self._rules.admin_earliest_time)
        latest = to_minutes(self._rules.admin_latest_time)
        if not earliest <= to_minutes(start) <= latest:
            raise RuleViolation(
                "after_hours",
                f"The time must be between {self._rules.admin_earliest_time:%H:%M} and {self._rules.admin_latest_time:%H:%M}.",
            )

        names = self._resolve_names(form.services)
        services = [self._catalog.find_by_name(name)[0] for name in names]
        appointment = Appointment(
            id=appointment_id,
            day=form.day,
            start_time=start,
            duration_minutes=duration_for(services),
            services=names,
            customer=Customer(
                name=form.customer_name.strip(),
                phone=normalize_phone(form.customer_phone),
                email=form.customer_email.strip(),
            ),
        )
        self._logger.info("Staff appointment prepared", extra={"appointment_id": appointment_id, "duration": appointment.duration_minutes})
        return appointment

    def _resolve_names(self, names: Iterable[str]) -> tuple[str, ...]:
        resolved: list[str] = []
        for name in names:
            match = self._catalog.find_by_name(name)
            if match is None:
                raise InvalidSelection(f"Unknown service: {name}")
            service, size = match
            display = service.display_name(size)
            if display not in resolved:
                resolved.append(display)
        return tuple(resolved)
