from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Callable
from zoneinfo import ZoneInfo

from barbershop.application.exceptions import InvalidSelection, RuleViolation, SlotConflict, StoreUnavailable
from barbershop.application.ports.appointment_store import AppointmentStorePort
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.application.use_cases.availability import (
    SLOT_MESSAGES,
    candidate_slots,
    ensure_date_bookable,
    slot_rejection,
)
from barbershop.application.utils.duration import duration_for, lookup_services, needs_early_arrival, unique_ids
from barbershop.application.utils.phone import normalize_phone
from barbershop.domain.entities.appointment import Appointment, Customer
from barbershop.domain.entities.booking_session import BookingSession, BookingStep
from barbershop.domain.entities.schedule_rules import ScheduleRules
from barbershop.domain.entities.service import ServiceSize

EARLY_ARRIVAL_NOTICE = "Please arrive 15 minutes before the scheduled time."
HOUR_LONG_NOTICE = "This appointment lasts 1 hour."


@dataclass(frozen=True)
class BookingResult:
    action: str  # "ask_services", "ask_date", "suggest_slots", "no_slots", "confirm", "booked"
    message: str | None
    proposed_slots: list[time] | None
    updated_state: BookingSession


class BookingWorkflow:
    """
    Customer booking flow: services, then date, then time, then confirmation.

    Sessions are immutable; every step returns a new one inside a
    BookingResult. Errors are raised and leave the caller's session as it
    was. Confirmation re-reads the day from the store before writing, which
    narrows (but does not close) the window for two customers taking the
    same slot.
    """

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

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return datetime.now(self._timezone)

    def start(self) -> BookingResult:
        return BookingResult(
            action="ask_services",
            message=None,
            proposed_slots=None,
            updated_state=BookingSession(),
        )

    def select_services(
        self,
        session: BookingSession,
        service_ids: Iterable[str],
        sizes: Mapping[str, ServiceSize] | None = None,
    ) -> BookingResult:
        ids = unique_ids(service_ids)
        if not ids:
            raise InvalidSelection("Select at least one service.")

        services = lookup_services(ids, self._catalog)
        duration = duration_for(services)
        notices: list[str] = []
        if duration == 60:
            notices.append(HOUR_LONG_NOTICE)
        if needs_early_arrival(services):
            notices.append(EARLY_ARRIVAL_NOTICE)

        updated = replace(
            session,
            step=BookingStep.SELECTING_DATE,
            service_ids=ids,
            sizes={key: ServiceSize(value) for key, value in (sizes or {}).items() if key in ids},
            duration_minutes=duration,
            available_slots=(),
            selected_time=None,
            appointment_id=None,
            notices=tuple(notices),
        )

        if session.selected_date is not None:
            # Changing services with a date already chosen re-filters that date.
            return self._load_slots(updated, session.selected_date)

        return BookingResult(action="ask_date", message=None, proposed_slots=None, updated_state=updated)

    def select_date(self, session: BookingSession, day: date) -> BookingResult:
        if not session.service_ids or session.duration_minutes is None:
            raise InvalidSelection("Select at least one service before choosing a date.")

        disabled = self._appointments.get_disabled_dates()
        ensure_date_bookable(day, self._rules, self.now().date(), disabled)
        return self._load_slots(session, day, disabled)

    def select_time(self, session: BookingSession, start: time) -> BookingResult:
        if session.selected_date is None or session.step not in (BookingStep.SELECTING_TIME, BookingStep.CONFIRMING):
            raise InvalidSelection("Choose a date before choosing a time.")
        if start not in session.available_slots:
            raise RuleViolation("not_offered", "This time is not available for the selected services.")

        updated = replace(session, step=BookingStep.CONFIRMING, selected_time=start)
        return BookingResult(action="confirm", message=None, proposed_slots=[start], updated_state=updated)

    def refresh(self, session: BookingSession) -> BookingResult:
        """Recompute the slot grid after a store change, keeping the chosen time if still offered."""
        if session.selected_date is None or session.step not in (BookingStep.SELECTING_TIME, BookingStep.CONFIRMING):
            return BookingResult(action="unchanged", message=None, proposed_slots=None, updated_state=session)

        result = self._load_slots(session, session.selected_date)
        if session.selected_time is not None and session.selected_time in result.updated_state.available_slots:
            kept = replace(result.updated_state, step=BookingStep.CONFIRMING, selected_time=session.selected_time)
            return BookingResult(action="confirm", message=None, proposed_slots=[session.selected_time], updated_state=kept)
        return result

    def confirm(self, session: BookingSession, customer: Customer) -> BookingResult:
        if session.step != BookingStep.CONFIRMING or session.selected_date is None or session.selected_time is None:
            raise InvalidSelection("Choose a date and a time before confirming.")
        if not session.service_ids or session.duration_minutes is None:
            raise InvalidSelection("Select at least one service.")
        phone = normalize_phone(customer.phone)
        if not customer.name.strip() or not phone:
            raise InvalidSelection("Customer name and phone are required.")

        day = session.selected_date
        start = session.selected_time
        now = self.now()

        # Fresh read, the grid in the session may be stale.
        disabled = self._appointments.get_disabled_dates()
        ensure_date_bookable(day, self._rules, now.date(), disabled)
        latest = self._appointments.get_appointments_for_date(day)

        reason = slot_rejection(day, start, session.duration_minutes, latest, self._rules, now)
        if reason and reason != "conflict":
            raise RuleViolation(reason, SLOT_MESSAGES[reason])
        if reason == "conflict":
            slots = candidate_slots(day, session.duration_minutes, latest, self._rules, now, disabled)
            refreshed = replace(
                session,
                step=BookingStep.SELECTING_TIME,
                available_slots=tuple(slots),
                selected_time=None,
            )
            self._logger.warning(
                "Slot no longer available",
                extra={"date": day.isoformat(), "time": start.strftime("%H:%M"), "reason": "conflict"},
            )
            raise SlotConflict("This time is no longer available. Please choose another one.", refreshed)

        services = lookup_services(session.service_ids, self._catalog)
        appointment = Appointment(
            id=self._appointments.new_appointment_id(),
            day=day,
            start_time=start,
            duration_minutes=session.duration_minutes,
            services=tuple(service.display_name(session.sizes.get(service.id)) for service in services),
            customer=Customer(name=customer.name.strip(), phone=phone, email=customer.email.strip()),
        )

        try:
            created = self._appointments.create_appointment(appointment)
        except StoreUnavailable as e:
            self._logger.error("Error creating booking", extra={"date": day.isoformat(), "error": str(e)})
            raise StoreUnavailable(str(e), replace(session, step=BookingStep.FAILED)) from e

        return BookingResult(
            action="booked",
            message=None,
            proposed_slots=None,
            updated_state=replace(session, step=BookingStep.CONFIRMED, appointment_id=created.id),
        )

    def book(
        self,
        service_ids: Iterable[str],
        day: date,
        start: time,
        customer: Customer,
        sizes: Mapping[str, ServiceSize] | None = None,
    ) -> BookingResult:
        """
        Run the whole flow in one call.

        The requested time goes straight to confirmation so that a taken
        slot surfaces as SlotConflict with the refreshed grid.
        """
        result = self.select_services(self.start().updated_state, service_ids, sizes)
        result = self.select_date(result.updated_state, day)
        confirming = replace(result.updated_state, step=BookingStep.CONFIRMING, selected_time=start)
        return self.confirm(confirming, customer)

    def _load_slots(
        self,
        session: BookingSession,
        day: date,
        disabled: set[date] | None = None,
    ) -> BookingResult:
        if disabled is None:
            disabled = self._appointments.get_disabled_dates()
        existing = self._appointments.get_appointments_for_date(day)
        duration = session.duration_minutes or 0
        slots = candidate_slots(day, duration, existing, self._rules, self.now(), disabled)

        updated = replace(
            session,
            step=BookingStep.SELECTING_TIME,
            selected_date=day,
            available_slots=tuple(slots),
            selected_time=None,
        )
        return BookingResult(
            action="suggest_slots" if slots else "no_slots",
            message=None,
            proposed_slots=list(slots),
            updated_state=updated,
        )
