from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from barbershop.core.config import settings
from barbershop.application.ports.appointment_store import AppointmentStorePort
from barbershop.application.ports.document_store import DocumentStorePort
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.application.use_cases.appointment_admin import AppointmentAdminUseCase
from barbershop.application.use_cases.booking import BookingWorkflow
from barbershop.application.use_cases.calendar_overview import CalendarOverview
from barbershop.application.use_cases.customer_history import CustomerHistoryUseCase
from barbershop.application.use_cases.revenue import RevenueUseCase
from barbershop.domain.entities.schedule_rules import ScheduleRules
from barbershop.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from barbershop.infrastructure.store.appointment_store import RealtimeAppointmentStore
from barbershop.infrastructure.store.firebase_store import FirebaseDocumentStore
from barbershop.infrastructure.store.json_store import JsonDocumentStore
from barbershop.infrastructure.store.memory_store import MemoryDocumentStore


_document_store: DocumentStorePort | None = None
_calendar_overview: CalendarOverview | None = None


def get_document_store() -> DocumentStorePort:
    global _document_store
    if _document_store is None:
        logger = logging.getLogger(__name__)
        provider = settings.STORE_PROVIDER.lower()
        if provider == "firebase":
            if not settings.FIREBASE_DATABASE_URL and settings.ENV.lower() in {"dev", "local"}:
                logger.info("Using MemoryDocumentStore (FIREBASE_DATABASE_URL missing, ENV=dev/local)")
                _document_store = MemoryDocumentStore()
            else:
                logger.info("Using FirebaseDocumentStore")
                _document_store = FirebaseDocumentStore()
        elif provider == "json":
            logger.info("Using JsonDocumentStore", extra={"path": settings.DATA_FILE})
            _document_store = JsonDocumentStore(settings.DATA_FILE)
        else:
            _document_store = MemoryDocumentStore()
    return _document_store


@lru_cache
def get_schedule_rules() -> ScheduleRules:
    return settings.schedule_rules()


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_appointment_store() -> AppointmentStorePort:
    return RealtimeAppointmentStore(
        get_document_store(),
        default_duration_minutes=settings.DEFAULT_APPOINTMENT_MINUTES,
    )


def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore(get_document_store())


def get_booking_workflow() -> BookingWorkflow:
    return BookingWorkflow(
        appointments=get_appointment_store(),
        catalog=get_service_catalog(),
        rules=get_schedule_rules(),
        timezone=get_timezone(),
    )


def get_admin_use_case() -> AppointmentAdminUseCase:
    return AppointmentAdminUseCase(
        appointments=get_appointment_store(),
        catalog=get_service_catalog(),
        rules=get_schedule_rules(),
        timezone=get_timezone(),
    )


def get_calendar_overview() -> CalendarOverview:
    global _calendar_overview
    if _calendar_overview is None:
        _calendar_overview = CalendarOverview(get_appointment_store())
        _calendar_overview.watch()
    return _calendar_overview


def get_revenue_use_case() -> RevenueUseCase:
    return RevenueUseCase(appointments=get_appointment_store(), catalog=get_service_catalog())


def get_customer_history_use_case() -> CustomerHistoryUseCase:
    return CustomerHistoryUseCase(appointments=get_appointment_store())
