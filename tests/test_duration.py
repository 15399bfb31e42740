"""
Tests for duration resolution over the default service catalog.
"""

from __future__ import annotations

import pytest

from barbershop.application.exceptions import InvalidSelection
from barbershop.application.utils.duration import needs_early_arrival, resolve_duration, unique_ids
from barbershop.domain.entities.service import DurationClass, Service
from barbershop.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from barbershop.infrastructure.store.memory_store import MemoryDocumentStore


def _catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore(MemoryDocumentStore())


def test_two_short_services_fill_the_hour_in_any_order():
    """Haircut and beard take an hour whichever is picked first."""
    catalog = _catalog()
    assert resolve_duration(["haircut", "beard"], catalog) == 60
    assert resolve_duration(["beard", "haircut"], catalog) == 60


def test_single_short_service_takes_half_an_hour():
    assert resolve_duration(["haircut"], _catalog()) == 30


def test_zero_class_services_do_not_count():
    """Eyebrows and the consultation add no time."""
    catalog = _catalog()
    assert resolve_duration(["eyebrows"], catalog) == 0
    assert resolve_duration(["visagismo"], catalog) == 0
    assert resolve_duration(["haircut", "eyebrows"], catalog) == 30


def test_long_service_wins():
    catalog = _catalog()
    assert resolve_duration(["carbonoplastia"], catalog) == 60
    assert resolve_duration(["carbonoplastia", "haircut", "beard"], catalog) == 60


def test_durations_are_bucketed_not_summed():
    """Three short services still fit the one hour bucket."""
    assert resolve_duration(["haircut", "beard", "pigmentation"], _catalog()) == 60


def test_repeated_service_counts_once():
    assert resolve_duration(["haircut", "haircut"], _catalog()) == 30
    assert unique_ids([" haircut", "beard", "haircut", ""]) == ("haircut", "beard")


def test_unknown_service_is_rejected():
    with pytest.raises(InvalidSelection):
        resolve_duration(["haircut", "massage"], _catalog())


def test_duration_class_thresholds():
    assert Service(id="a", name="A").duration_class == DurationClass.ZERO
    assert Service(id="b", name="B", duration_minutes=0).duration_class == DurationClass.ZERO
    assert Service(id="c", name="C", duration_minutes=45).duration_class == DurationClass.SHORT
    assert Service(id="d", name="D", duration_minutes=90).duration_class == DurationClass.LONG


def test_long_services_ask_for_early_arrival():
    catalog = _catalog()
    assert needs_early_arrival([catalog.get_service("taninoplastia")])
    assert not needs_early_arrival([catalog.get_service("haircut"), catalog.get_service("beard")])
