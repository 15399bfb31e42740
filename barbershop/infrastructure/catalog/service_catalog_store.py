from __future__ import annotations

import logging

from pydantic import ValidationError

from barbershop.application.dto.service_record import ServiceRecord
from barbershop.application.exceptions import StoreUnavailable
from barbershop.application.ports.document_store import DocumentStorePort
from barbershop.application.ports.service_catalog import ServiceCatalogPort
from barbershop.domain.entities.service import Service, ServiceSize
from barbershop.infrastructure.catalog.service_catalog_data import DEFAULT_SERVICES

SERVICES_PATH = "services"


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, store: DocumentStorePort, defaults: list[Service] | None = None) -> None:
        self._store = store
        self._defaults = list(DEFAULT_SERVICES if defaults is None else defaults)
        self._logger = logging.getLogger(__name__)

    def list_services(self) -> list[Service]:
        try:
            raw = self._store.get(SERVICES_PATH)
            if not raw:
                self._seed_defaults()
                return list(self._defaults)
        except StoreUnavailable as e:
            self._logger.warning("Service catalog unavailable, using defaults", extra={"error": str(e)})
            return list(self._defaults)

        services: list[Service] = []
        for service_id, document in raw.items():
            try:
                services.append(ServiceRecord.model_validate(document).to_service(str(service_id)))
            except ValidationError:
                self._logger.warning("Skipping malformed service", extra={"service": service_id})
        return services

    def get_service(self, service_id: str) -> Service | None:
        normalized = service_id.strip()
        for service in self.list_services():
            if service.id == normalized:
                return service
        return None

    def find_by_name(self, display_name: str) -> tuple[Service, ServiceSize | None] | None:
        normalized = display_name.strip().casefold()
        services = self.list_services()
        for service in services:
            if not service.is_tiered and service.name.casefold() == normalized:
                return service, None
        for service in services:
            if not service.is_tiered:
                continue
            if service.name.casefold() == normalized:
                return service, ServiceSize.MEDIUM
            for size in ServiceSize:
                if service.display_name(size).casefold() == normalized:
                    return service, size
        return None

    def save_service(self, service: Service) -> Service:
        self._ensure_seeded()
        self._store.set(f"{SERVICES_PATH}/{service.id}", ServiceRecord.from_service(service).to_document())
        self._logger.info("Service saved", extra={"service": service.id})
        return service

    def delete_service(self, service_id: str) -> bool:
        self._ensure_seeded()
        if self._store.get(f"{SERVICES_PATH}/{service_id}") is None:
            return False
        self._store.remove(f"{SERVICES_PATH}/{service_id}")
        self._logger.info("Service deleted", extra={"service": service_id})
        return True

    def _ensure_seeded(self) -> None:
        if not self._store.get(SERVICES_PATH):
            self._seed_defaults()

    def _seed_defaults(self) -> None:
        documents = {service.id: ServiceRecord.from_service(service).to_document() for service in self._defaults}
        self._store.set(SERVICES_PATH, documents)
        self._logger.info("Service catalog initialized with defaults", extra={"reason": "empty_catalog"})
