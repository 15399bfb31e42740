"""
Tests for the customer booking workflow.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from barbershop.application.exceptions import InvalidSelection, RuleViolation, SlotConflict, StoreUnavailable
from barbershop.application.use_cases.booking import EARLY_ARRIVAL_NOTICE, HOUR_LONG_NOTICE, BookingWorkflow
from barbershop.domain.entities.appointment import Appointment, Customer
from barbershop.domain.entities.booking_session import BookingStep
from barbershop.domain.entities.schedule_rules import ScheduleRules
from barbershop.domain.entities.service import ServiceSize
from barbershop.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from barbershop.infrastructure.store.appointment_store import RealtimeAppointmentStore
from barbershop.infrastructure.store.memory_store import MemoryDocumentStore

TZ = ZoneInfo("America/Sao_Paulo")
MONDAY_MORNING = datetime(2024, 6, 3, 9, 0, tzinfo=TZ)
TUESDAY = date(2024, 6, 4)
CUSTOMER = Customer(name="João Silva", phone="(11) 98765-4321", email="joao@example.com")


class FlakyDocumentStore(MemoryDocumentStore):
    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def set(self, path: str, value: Any) -> None:
        if self.fail_writes:
            raise StoreUnavailable("Could not save to the appointment store")
        super().set(path, value)


def _workflow(now: datetime = MONDAY_MORNING, document_store: MemoryDocumentStore | None = None):
    document_store = document_store or MemoryDocumentStore()
    appointments = RealtimeAppointmentStore(document_store, clock=lambda: 1717400000.0)
    workflow = BookingWorkflow(
        appointments=appointments,
        catalog=ServiceCatalogStore(document_store),
        rules=ScheduleRules(),
        timezone=TZ,
        clock=lambda: now,
    )
    return workflow, appointments


def _at_time(workflow: BookingWorkflow, service_ids, day: date, start: time):
    result = workflow.select_services(workflow.start().updated_state, service_ids)
    result = workflow.select_date(result.updated_state, day)
    return workflow.select_time(result.updated_state, start).updated_state


def test_start_asks_for_services():
    workflow, _ = _workflow()
    result = workflow.start()
    assert result.action == "ask_services"
    assert result.updated_state.step == BookingStep.SELECTING_SERVICES


def test_selecting_no_services_is_rejected():
    workflow, _ = _workflow()
    with pytest.raises(InvalidSelection):
        workflow.select_services(workflow.start().updated_state, [])


def test_select_services_resolves_duration_and_notices():
    """Two short services take an hour; only long ones ask for early arrival."""
    workflow, _ = _workflow()
    session = workflow.start().updated_state

    result = workflow.select_services(session, ["haircut", "beard"])
    assert result.action == "ask_date"
    assert result.updated_state.step == BookingStep.SELECTING_DATE
    assert result.updated_state.duration_minutes == 60
    assert HOUR_LONG_NOTICE in result.updated_state.notices
    assert EARLY_ARRIVAL_NOTICE not in result.updated_state.notices

    result = workflow.select_services(session, ["carbonoplastia"])
    assert EARLY_ARRIVAL_NOTICE in result.updated_state.notices


def test_closed_weekday_is_rejected_at_date_selection():
    workflow, _ = _workflow()
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state

    with pytest.raises(RuleViolation) as exc_info:
        workflow.select_date(session, date(2024, 6, 9))
    assert exc_info.value.reason == "closed_weekday"


def test_date_beyond_booking_window_is_rejected():
    workflow, _ = _workflow()
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state

    with pytest.raises(RuleViolation) as exc_info:
        workflow.select_date(session, date(2024, 6, 25))
    assert exc_info.value.reason == "outside_window"


def test_manually_disabled_date_is_rejected():
    workflow, appointments = _workflow()
    appointments.set_date_disabled(TUESDAY, True)
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state

    with pytest.raises(RuleViolation) as exc_info:
        workflow.select_date(session, TUESDAY)
    assert exc_info.value.reason == "disabled_date"


def test_select_date_before_services_is_rejected():
    workflow, _ = _workflow()
    with pytest.raises(InvalidSelection):
        workflow.select_date(workflow.start().updated_state, TUESDAY)


def test_select_date_proposes_slots():
    workflow, _ = _workflow()
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state

    result = workflow.select_date(session, TUESDAY)
    assert result.action == "suggest_slots"
    assert result.updated_state.step == BookingStep.SELECTING_TIME
    assert result.updated_state.selected_date == TUESDAY
    assert result.proposed_slots[0] == time(9, 0)
    assert time(12, 0) not in result.proposed_slots


def test_today_hides_past_times():
    workflow, _ = _workflow(now=datetime(2024, 6, 4, 10, 15, tzinfo=TZ))
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state

    result = workflow.select_date(session, TUESDAY)
    assert result.proposed_slots[0] == time(10, 30)


def test_changing_services_refilters_the_chosen_date():
    """11:30 fits a half-hour cut but a one hour treatment would run into lunch."""
    workflow, _ = _workflow()
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state
    session = workflow.select_date(session, TUESDAY).updated_state
    assert time(11, 30) in session.available_slots

    result = workflow.select_services(session, ["carbonoplastia"])
    assert result.updated_state.step == BookingStep.SELECTING_TIME
    assert result.updated_state.duration_minutes == 60
    assert time(11, 30) not in result.updated_state.available_slots


def test_time_not_offered_is_rejected():
    workflow, _ = _workflow()
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state
    session = workflow.select_date(session, TUESDAY).updated_state

    with pytest.raises(RuleViolation) as exc_info:
        workflow.select_time(session, time(12, 0))
    assert exc_info.value.reason == "not_offered"


def test_time_before_date_is_rejected():
    workflow, _ = _workflow()
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state
    with pytest.raises(InvalidSelection):
        workflow.select_time(session, time(10, 0))


def test_confirm_writes_the_appointment():
    workflow, appointments = _workflow()
    session = _at_time(workflow, ["haircut", "beard"], TUESDAY, time(10, 0))
    assert session.step == BookingStep.CONFIRMING

    result = workflow.confirm(session, CUSTOMER)

    assert result.action == "booked"
    assert result.updated_state.step == BookingStep.CONFIRMED
    assert result.updated_state.appointment_id == "1717400000000"

    stored = appointments.get_appointments_for_date(TUESDAY)
    assert len(stored) == 1
    assert stored[0].start_time == time(10, 0)
    assert stored[0].duration_minutes == 60
    assert stored[0].services == ("Corte de Cabelo", "Barba")
    assert stored[0].customer.phone == "11987654321"


def test_confirm_requires_customer_details():
    workflow, appointments = _workflow()
    session = _at_time(workflow, ["haircut"], TUESDAY, time(10, 0))

    with pytest.raises(InvalidSelection):
        workflow.confirm(session, Customer(name=" ", phone="11987654321"))
    with pytest.raises(InvalidSelection):
        workflow.confirm(session, Customer(name="João", phone="--"))
    assert appointments.get_appointments_for_date(TUESDAY) == []


def test_confirm_before_time_is_rejected():
    workflow, _ = _workflow()
    session = workflow.select_services(workflow.start().updated_state, ["haircut"]).updated_state
    with pytest.raises(InvalidSelection):
        workflow.confirm(session, CUSTOMER)


def test_slot_taken_before_confirmation_raises_conflict():
    """Two customers pick 10:00; the second gets the refreshed grid back."""
    workflow, appointments = _workflow()
    first = _at_time(workflow, ["haircut", "beard"], TUESDAY, time(10, 0))
    second = _at_time(workflow, ["haircut", "beard"], TUESDAY, time(10, 0))

    workflow.confirm(first, CUSTOMER)

    with pytest.raises(SlotConflict) as exc_info:
        workflow.confirm(second, Customer(name="Maria", phone="11911112222"))

    refreshed = exc_info.value.session
    assert refreshed.step == BookingStep.SELECTING_TIME
    assert refreshed.selected_time is None
    assert time(10, 0) not in refreshed.available_slots
    assert time(9, 30) not in refreshed.available_slots
    assert time(11, 0) in refreshed.available_slots
    assert second.step == BookingStep.CONFIRMING
    assert len(appointments.get_appointments_for_date(TUESDAY)) == 1


def test_store_failure_on_confirm_marks_session_failed():
    document_store = FlakyDocumentStore()
    workflow, appointments = _workflow(document_store=document_store)
    session = _at_time(workflow, ["haircut"], TUESDAY, time(10, 0))

    document_store.fail_writes = True
    with pytest.raises(StoreUnavailable) as exc_info:
        workflow.confirm(session, CUSTOMER)

    assert exc_info.value.session.step == BookingStep.FAILED
    assert session.step == BookingStep.CONFIRMING
    document_store.fail_writes = False
    assert appointments.get_appointments_for_date(TUESDAY) == []


def test_refresh_drops_time_taken_elsewhere():
    workflow, appointments = _workflow()
    session = _at_time(workflow, ["haircut"], TUESDAY, time(10, 0))

    appointments.create_appointment(
        Appointment(
            id=appointments.new_appointment_id(),
            day=TUESDAY,
            start_time=time(10, 0),
            duration_minutes=30,
            services=("Barba",),
            customer=Customer(name="Maria", phone="11911112222"),
        )
    )

    result = workflow.refresh(session)
    assert result.action == "suggest_slots"
    assert result.updated_state.step == BookingStep.SELECTING_TIME
    assert result.updated_state.selected_time is None
    assert time(10, 0) not in result.updated_state.available_slots


def test_refresh_keeps_time_still_free():
    workflow, _ = _workflow()
    session = _at_time(workflow, ["haircut"], TUESDAY, time(10, 0))

    result = workflow.refresh(session)
    assert result.action == "confirm"
    assert result.updated_state.selected_time == time(10, 0)


def test_book_runs_the_whole_flow_with_sizes():
    workflow, appointments = _workflow()

    result = workflow.book(
        ["carbonoplastia"], TUESDAY, time(14, 0), CUSTOMER, sizes={"carbonoplastia": ServiceSize.LARGE}
    )

    assert result.action == "booked"
    stored = appointments.get_appointment(result.updated_state.appointment_id)
    assert stored.services == ("Carbonoplastia G",)
    assert stored.duration_minutes == 60


def test_book_taken_slot_raises_conflict():
    workflow, _ = _workflow()
    workflow.book(["haircut"], TUESDAY, time(15, 0), CUSTOMER)

    with pytest.raises(SlotConflict) as exc_info:
        workflow.book(["haircut"], TUESDAY, time(15, 0), Customer(name="Maria", phone="11911112222"))
    assert time(15, 30) in exc_info.value.session.available_slots


def test_book_lunch_time_is_a_rule_violation():
    workflow, _ = _workflow()
    with pytest.raises(RuleViolation) as exc_info:
        workflow.book(["haircut"], TUESDAY, time(12, 0), CUSTOMER)
    assert exc_info.value.reason == "lunch"


def test_confirm_revalidates_date_rules():
    """A day disabled after the time was picked is refused at confirmation."""
    workflow, appointments = _workflow()
    session = _at_time(workflow, ["haircut"], TUESDAY, time(10, 0))
    appointments.set_date_disabled(TUESDAY, True)

    with pytest.raises(RuleViolation) as exc_info:
        workflow.confirm(session, CUSTOMER)
    assert exc_info.value.reason == "disabled_date"
