from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable

from pydantic import ValidationError

from barbershop.application.dto.appointment_record import AppointmentRecord
from barbershop.application.exceptions import AppointmentNotFound, StoreUnavailable
from barbershop.application.ports.appointment_store import AppointmentStorePort
from barbershop.application.ports.document_store import ChangeCallback, DocumentStorePort, Unsubscribe
from barbershop.application.utils.date_parser import format_date_key, parse_date_key
from barbershop.domain.entities.appointment import Appointment, AppointmentStatus

ACTIVE_PATH = "agendamentobarbeiro"
COMPLETED_PATH = "finalizados"
CANCELLED_PATH = "cancelados"
DISABLED_DATES_PATH = "diasdesativados"
CUSTOMER_APPOINTMENTS_PATH = "user/number/{phone}/agendamento"

STATUS_PATHS = {
    AppointmentStatus.ACTIVE: ACTIVE_PATH,
    AppointmentStatus.COMPLETED: COMPLETED_PATH,
    AppointmentStatus.CANCELLED: CANCELLED_PATH,
}


class RealtimeAppointmentStore(AppointmentStorePort):
    def __init__(
        self,
        store: DocumentStorePort,
        default_duration_minutes: int = 30,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._default_duration = default_duration_minutes
        self._clock = clock
        self._id_lock = threading.Lock()
        self._last_id = 0
        self._logger = logging.getLogger(__name__)

    def new_appointment_id(self) -> str:
        """Millisecond timestamp, bumped when two bookings land in the same millisecond."""
        with self._id_lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
            return str(candidate)

    def get_appointments_for_date(self, day: date) -> list[Appointment]:
        appointments = [a for a in self._read_collection(AppointmentStatus.ACTIVE) if a.day == day]
        return sorted(appointments, key=lambda a: a.start_time)

    def get_disabled_dates(self) -> set[date]:
        raw = self._store.get(DISABLED_DATES_PATH) or {}
        disabled: set[date] = set()
        for key, value in raw.items():
            if isinstance(value, dict) and not value.get("blocked"):
                continue
            try:
                disabled.add(parse_date_key(key))
            except ValueError:
                self._logger.warning("Skipping malformed disabled date", extra={"date": key})
        return disabled

    def set_date_disabled(self, day: date, disabled: bool) -> None:
        path = f"{DISABLED_DATES_PATH}/{format_date_key(day)}"
        if disabled:
            self._store.set(path, {"blocked": True})
        else:
            self._store.remove(path)
        self._logger.info("Date availability changed", extra={"date": day.isoformat(), "status": "disabled" if disabled else "enabled"})

    def create_appointment(self, appointment: Appointment) -> Appointment:
        record = AppointmentRecord.from_appointment(appointment)
        # Two independent writes; a failure between them leaves the personal copy behind.
        if appointment.customer.phone:
            self._store.set(self._customer_path(appointment.customer.phone, appointment.id), record.to_customer_document())
        self._store.set(f"{ACTIVE_PATH}/{appointment.id}", record.to_document())
        self._logger.info(
            "Appointment created",
            extra={
                "appointment_id": appointment.id,
                "date": appointment.day.isoformat(),
                "time": appointment.start_time.strftime("%H:%M"),
                "duration": appointment.duration_minutes,
            },
        )
        return appointment

    def save_appointment(self, appointment: Appointment) -> Appointment:
        if not appointment.is_active:
            raise ValueError("Only active appointments can be edited")
        record = AppointmentRecord.from_appointment(appointment)
        previous = self._read_one(AppointmentStatus.ACTIVE, appointment.id)
        if previous and previous.customer.phone and previous.customer.phone != appointment.customer.phone:
            self._store.remove(self._customer_path(previous.customer.phone, appointment.id))
        if appointment.customer.phone:
            self._store.set(self._customer_path(appointment.customer.phone, appointment.id), record.to_customer_document())
        self._store.set(f"{ACTIVE_PATH}/{appointment.id}", record.to_document())
        self._logger.info("Appointment saved", extra={"appointment_id": appointment.id})
        return appointment

    def transition_status(self, appointment_id: str, new_status: AppointmentStatus, timestamp: datetime) -> Appointment:
        if new_status == AppointmentStatus.ACTIVE:
            raise ValueError("An appointment cannot be moved back to active")

        current = self._read_one(AppointmentStatus.ACTIVE, appointment_id)
        if current is None:
            already = self._read_one(new_status, appointment_id)
            if already is not None:
                return already
            raise AppointmentNotFound(f"Appointment {appointment_id} not found")

        if new_status == AppointmentStatus.COMPLETED:
            moved = replace(current, status=new_status, completed_at=timestamp)
        else:
            moved = replace(current, status=new_status, cancelled_at=timestamp)

        record = AppointmentRecord.from_appointment(moved)
        target_path = f"{STATUS_PATHS[new_status]}/{appointment_id}"
        self._store.set(target_path, record.to_document())
        try:
            self._store.remove(f"{ACTIVE_PATH}/{appointment_id}")
        except StoreUnavailable as e:
            self._logger.error("Error moving appointment, rolling back", extra={"appointment_id": appointment_id, "error": str(e)})
            self._store.remove(target_path)
            raise
        if current.customer.phone:
            self._store.remove(self._customer_path(current.customer.phone, appointment_id))
        self._logger.info("Appointment status changed", extra={"appointment_id": appointment_id, "status": new_status.value})
        return moved

    def subscribe(self, path: str, callback: ChangeCallback) -> Unsubscribe:
        return self._store.subscribe(path, callback)

    def watched_paths(self) -> tuple[str, ...]:
        return (ACTIVE_PATH, COMPLETED_PATH, CANCELLED_PATH, DISABLED_DATES_PATH)

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        for status in STATUS_PATHS:
            found = self._read_one(status, appointment_id)
            if found is not None:
                return found
        return None

    def list_appointments(self, status: AppointmentStatus | None = None) -> list[Appointment]:
        statuses = [status] if status else list(STATUS_PATHS)
        appointments: list[Appointment] = []
        for item in statuses:
            appointments.extend(self._read_collection(item))
        return sorted(appointments, key=lambda a: (a.day, a.start_time))

    def list_customer_appointments(self, phone: str) -> list[Appointment]:
        if not phone:
            return []
        owned = [a for a in self.list_appointments() if a.customer.phone == phone]
        return sorted(owned, key=lambda a: (a.day, a.start_time), reverse=True)

    def _customer_path(self, phone: str, appointment_id: str) -> str:
        return f"{CUSTOMER_APPOINTMENTS_PATH.format(phone=phone)}/{appointment_id}"

    def _read_collection(self, status: AppointmentStatus) -> list[Appointment]:
        raw = self._store.get(STATUS_PATHS[status]) or {}
        appointments: list[Appointment] = []
        for appointment_id, document in raw.items():
            appointment = self._decode(str(appointment_id), document, status)
            if appointment is not None:
                appointments.append(appointment)
        return appointments

    def _read_one(self, status: AppointmentStatus, appointment_id: str) -> Appointment | None:
        document = self._store.get(f"{STATUS_PATHS[status]}/{appointment_id}")
        if document is None:
            return None
        return self._decode(appointment_id, document, status)

    def _decode(self, appointment_id: str, document: Any, status: AppointmentStatus) -> Appointment | None:
        if not isinstance(document, dict):
            self._logger.warning("Skipping malformed appointment", extra={"appointment_id": appointment_id})
            return None
        try:
            record = AppointmentRecord.model_validate(document)
        except ValidationError as e:
            self._logger.warning(
                "Skipping malformed appointment",
                extra={"appointment_id": appointment_id, "error": str(e.errors()[:1])},
            )
            return None
        return record.to_appointment(appointment_id, status, self._default_duration)

