from datetime import date as Date

from fastapi import APIRouter, Depends, HTTPException, Query

from barbershop.api.v1.errors import to_http_error
from barbershop.api.v1.schemas import (
    AppointmentSchema,
    DayStatsSchema,
    DisabledDateSchema,
    RevenueSchema,
    ServiceSchema,
    ServiceUpdateSchema,
    StaffAppointmentSchema,
)
from barbershop.application.exceptions import BookingError
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.application.use_cases.appointment_admin import AppointmentAdminUseCase, StaffAppointmentForm
from barbershop.application.use_cases.calendar_overview import CalendarOverview
from barbershop.application.use_cases.revenue import RevenueUseCase
from barbershop.domain.entities.service import Service, TieredPrice
from barbershop.wiring.dependencies import (
    get_admin_use_case,
    get_calendar_overview,
    get_revenue_use_case,
    get_service_catalog,
)

router = APIRouter()


def _form(req: StaffAppointmentSchema) -> StaffAppointmentForm:
    return StaffAppointmentForm(
        day=req.day,
        start_time=req.start_time,
        customer_name=req.customer_name,
        services=tuple(req.services),
        customer_phone=req.customer_phone,
        customer_email=req.customer_email,
    )


@router.get("/appointments", response_model=list[AppointmentSchema])
def list_appointments(
    day: Date = Query(alias="date"),
    search: str | None = None,
    uc: AppointmentAdminUseCase = Depends(get_admin_use_case),
):
    try:
        appointments = uc.list_for_day(day, search)
    except BookingError as e:
        raise to_http_error(e)
    return [AppointmentSchema.from_entity(a) for a in appointments]


@router.post("/appointments", response_model=AppointmentSchema, status_code=201)
def create_appointment(
    req: StaffAppointmentSchema,
    uc: AppointmentAdminUseCase = Depends(get_admin_use_case),
):
    try:
        appointment = uc.create(_form(req))
    except BookingError as e:
        raise to_http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.put("/appointments/{appointment_id}", response_model=AppointmentSchema)
def update_appointment(
    appointment_id: str,
    req: StaffAppointmentSchema,
    uc: AppointmentAdminUseCase = Depends(get_admin_use_case),
):
    try:
        appointment = uc.update(appointment_id, _form(req))
    except BookingError as e:
        raise to_http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.post("/appointments/{appointment_id}/complete", response_model=AppointmentSchema)
def complete_appointment(
    appointment_id: str,
    uc: AppointmentAdminUseCase = Depends(get_admin_use_case),
):
    try:
        appointment = uc.complete(appointment_id)
    except BookingError as e:
        raise to_http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentSchema)
def cancel_appointment(
    appointment_id: str,
    uc: AppointmentAdminUseCase = Depends(get_admin_use_case),
):
    try:
        appointment = uc.cancel(appointment_id)
    except BookingError as e:
        raise to_http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.put("/disabled-dates/{day}", response_model=DisabledDateSchema)
def toggle_disabled_date(
    day: Date,
    uc: AppointmentAdminUseCase = Depends(get_admin_use_case),
):
    try:
        disabled = uc.toggle_disabled_date(day)
    except BookingError as e:
        raise to_http_error(e)
    return DisabledDateSchema(day=day, disabled=disabled)


@router.get("/calendar", response_model=list[DayStatsSchema])
def calendar_month(
    month: str = Query(pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    overview: CalendarOverview = Depends(get_calendar_overview),
):
    year, number = (int(part) for part in month.split("-"))
    try:
        stats = overview.month(year, number)
    except BookingError as e:
        raise to_http_error(e)
    return [
        DayStatsSchema(
            day=day,
            active=item.active,
            completed=item.completed,
            cancelled=item.cancelled,
            disabled=item.disabled,
        )
        for day, item in stats.items()
    ]


@router.get("/revenue", response_model=RevenueSchema)
def revenue(
    day: Date = Query(alias="date"),
    uc: RevenueUseCase = Depends(get_revenue_use_case),
):
    try:
        report = uc.report(day)
    except BookingError as e:
        raise to_http_error(e)
    return RevenueSchema(
        day=report.day,
        daily_total=report.daily_total,
        monthly_total=report.monthly_total,
        completed_today=report.completed_today,
        completed_this_month=report.completed_this_month,
    )


@router.put("/services/{service_id}", response_model=ServiceSchema)
def save_service(
    service_id: str,
    req: ServiceUpdateSchema,
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    service = Service(
        id=service_id,
        name=req.name.strip(),
        description=req.description,
        duration_minutes=req.duration_minutes,
        price=req.price,
        sizes=(
            TieredPrice(small=req.sizes.small, medium=req.sizes.medium, large=req.sizes.large)
            if req.sizes
            else None
        ),
    )
    try:
        saved = catalog.save_service(service)
    except BookingError as e:
        raise to_http_error(e)
    return ServiceSchema.from_entity(saved)


@router.delete("/services/{service_id}", status_code=204)
def delete_service(
    service_id: str,
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    try:
        deleted = catalog.delete_service(service_id)
    except BookingError as e:
        raise to_http_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Service {service_id} not found")
