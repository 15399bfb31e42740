from __future__ import annotations

from collections.abc import Iterable

from barbershop.application.exceptions import InvalidSelection
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.domain.entities.service import DurationClass, Service

SHORT_MINUTES = 30
LONG_MINUTES = 60


def duration_for(services: Iterable[Service]) -> int:
    """
    Coarse duration bucket for a set of services: 0, 30 or 60 minutes.

    Any Long service makes it an hour; two or more Short services also fill
    the hour; a single Short one takes half; Zero-class services never count.
    Individual durations are never summed, existing bookings rely on this.
    """
    classes = [service.duration_class for service in services]
    if DurationClass.LONG in classes:
        return LONG_MINUTES
    short_count = classes.count(DurationClass.SHORT)
    if short_count >= 2:
        return LONG_MINUTES
    if short_count == 1:
        return SHORT_MINUTES
    return 0


def needs_early_arrival(services: Iterable[Service]) -> bool:
    return any(service.duration_class == DurationClass.LONG for service in services)


def unique_ids(service_ids: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for service_id in service_ids:
        key = service_id.strip()
        if key:
            seen.setdefault(key, None)
    return tuple(seen)


def lookup_services(service_ids: Iterable[str], catalog: ServiceCatalogPort) -> list[Service]:
    services: list[Service] = []
    for service_id in unique_ids(service_ids):
        service = catalog.get_service(service_id)
        if service is None:
            raise InvalidSelection(f"Unknown service: {service_id}")
        services.append(service)
    return services


def resolve_duration(service_ids: Iterable[str], catalog: ServiceCatalogPort) -> int:
    return duration_for(lookup_services(service_ids, catalog))
