from __future__ import annotations

from abc import ABC, abstractmethod

from barbershop.domain.entities.service import Service, ServiceSize


class ServiceCatalogPort(ABC):
    @abstractmethod
    def list_services(self) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        """Get service by id."""
        raise NotImplementedError

    @abstractmethod
    def find_by_name(self, display_name: str) -> tuple[Service, ServiceSize | None] | None:
        """Resolve a stored display name ("Carbonoplastia M") to its service and size."""
        raise NotImplementedError

    @abstractmethod
    def save_service(self, service: Service) -> Service:
        raise NotImplementedError

    @abstractmethod
    def delete_service(self, service_id: str) -> bool:
        raise NotImplementedError
