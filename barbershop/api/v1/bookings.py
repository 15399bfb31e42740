from datetime import date as Date

from fastapi import APIRouter, Depends, HTTPException, Query

from barbershop.api.v1.errors import to_http_error
from barbershop.api.v1.schemas import (
    AppointmentSchema,
    AvailabilityResponseSchema,
    BookingRequestSchema,
    BookingResponseSchema,
    ServiceSchema,
)
from barbershop.application.exceptions import BookingError
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.application.use_cases.booking import BookingWorkflow
from barbershop.application.use_cases.customer_history import CustomerHistoryUseCase
from barbershop.application.utils.date_parser import parse_time_of_day
from barbershop.domain.entities.appointment import Customer
from barbershop.wiring.dependencies import (
    get_booking_workflow,
    get_customer_history_use_case,
    get_service_catalog,
)

router = APIRouter()


@router.get("/services", response_model=list[ServiceSchema])
def list_services(catalog: ServiceCatalogPort = Depends(get_service_catalog)):
    try:
        services = catalog.list_services()
    except BookingError as e:
        raise to_http_error(e)
    return [ServiceSchema.from_entity(service) for service in services]


@router.get("/availability", response_model=AvailabilityResponseSchema)
def availability(
    day: Date = Query(alias="date"),
    services: list[str] = Query([]),
    uc: BookingWorkflow = Depends(get_booking_workflow),
):
    try:
        result = uc.select_services(uc.start().updated_state, services)
        result = uc.select_date(result.updated_state, day)
    except BookingError as e:
        raise to_http_error(e)

    session = result.updated_state
    return AvailabilityResponseSchema(
        day=day,
        duration_minutes=session.duration_minutes or 0,
        available_slots=[slot.strftime("%H:%M") for slot in session.available_slots],
        notices=list(session.notices),
    )


@router.post("/bookings", response_model=BookingResponseSchema, status_code=201)
def create_booking(
    req: BookingRequestSchema,
    uc: BookingWorkflow = Depends(get_booking_workflow),
):
    start = parse_time_of_day(req.start_time)
    if start is None:
        raise HTTPException(status_code=422, detail="start_time must be HH:MM")

    try:
        result = uc.book(
            service_ids=req.services,
            day=req.day,
            start=start,
            customer=Customer(name=req.customer.name, phone=req.customer.phone, email=req.customer.email),
            sizes=dict(req.sizes),
        )
    except BookingError as e:
        raise to_http_error(e)

    session = result.updated_state
    return BookingResponseSchema(
        appointment_id=session.appointment_id or "",
        day=req.day,
        start_time=start.strftime("%H:%M"),
        duration_minutes=session.duration_minutes or 0,
        notices=list(session.notices),
    )


@router.get("/customers/{phone}/appointments", response_model=list[AppointmentSchema])
def customer_appointments(
    phone: str,
    uc: CustomerHistoryUseCase = Depends(get_customer_history_use_case),
):
    try:
        appointments = uc.execute(phone)
    except BookingError as e:
        raise to_http_error(e)
    return [AppointmentSchema.from_entity(appointment) for appointment in appointments]
