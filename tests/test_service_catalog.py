"""
Tests for the service catalog stored under services/{id}.
"""

from __future__ import annotations

from typing import Any

from barbershop.application.exceptions import StoreUnavailable
from barbershop.domain.entities.service import Service, ServiceSize, TieredPrice
from barbershop.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from barbershop.infrastructure.store.memory_store import MemoryDocumentStore


class OfflineDocumentStore(MemoryDocumentStore):
    def get(self, path: str) -> Any:
        raise StoreUnavailable("Could not read from the appointment store")


def test_empty_store_is_seeded_with_defaults():
    document_store = MemoryDocumentStore()
    catalog = ServiceCatalogStore(document_store)

    services = catalog.list_services()

    assert len(services) == 8
    assert set(document_store.get("services")) == {
        "haircut",
        "beard",
        "eyebrows",
        "carbonoplastia",
        "pigmentation",
        "facial-cleaning",
        "taninoplastia",
        "visagismo",
    }
    assert document_store.get("services/carbonoplastia") == {
        "name": "Carbonoplastia",
        "description": "Tratamento capilar com carbono ativado",
        "duration": 60,
        "sizes": {"p": 120.0, "m": 140.0, "g": 160.0},
    }


def test_stored_services_are_not_overwritten():
    document_store = MemoryDocumentStore({"services": {"haircut": {"name": "Corte", "duration": 30, "price": 45}}})
    catalog = ServiceCatalogStore(document_store)

    services = catalog.list_services()

    assert [s.id for s in services] == ["haircut"]
    assert services[0].price == 45


def test_malformed_service_is_skipped():
    document_store = MemoryDocumentStore(
        {"services": {"haircut": {"name": "Corte", "duration": 30}, "broken": {"duration": "long"}}}
    )
    assert [s.id for s in ServiceCatalogStore(document_store).list_services()] == ["haircut"]


def test_unavailable_store_falls_back_to_defaults():
    catalog = ServiceCatalogStore(OfflineDocumentStore())
    assert catalog.get_service("haircut").name == "Corte de Cabelo"


def test_find_by_display_name():
    catalog = ServiceCatalogStore(MemoryDocumentStore())

    service, size = catalog.find_by_name("barba")
    assert service.id == "beard" and size is None

    service, size = catalog.find_by_name("Carbonoplastia G")
    assert service.id == "carbonoplastia" and size == ServiceSize.LARGE

    service, size = catalog.find_by_name("Taninoplastia")
    assert service.id == "taninoplastia" and size == ServiceSize.MEDIUM

    assert catalog.find_by_name("Massagem") is None


def test_tiered_names_and_prices():
    service = ServiceCatalogStore(MemoryDocumentStore()).get_service("carbonoplastia")
    assert service.display_name() == "Carbonoplastia M"
    assert service.display_name(ServiceSize.SMALL) == "Carbonoplastia P"
    assert service.price_for(ServiceSize.LARGE) == 160
    assert service.price_for() == 140


def test_save_and_delete_service():
    document_store = MemoryDocumentStore()
    catalog = ServiceCatalogStore(document_store)

    catalog.save_service(
        Service(id="hydration", name="Hidratação", duration_minutes=30, sizes=TieredPrice(60, 70, 80))
    )

    assert catalog.get_service("hydration").sizes.large == 80
    assert catalog.get_service("haircut") is not None
    assert catalog.delete_service("hydration") is True
    assert catalog.delete_service("hydration") is False
    assert catalog.get_service("hydration") is None
