"""Shared fixtures: an in-memory remote store and catalog builders."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

import pytest

from storefront_catalog.clients.catalog_store import (
    Configured,
    RemoteCatalogError,
    RemoteErrorKind,
    Unconfigured,
)
from storefront_catalog.config.configuration import CatalogServiceConfig
from storefront_catalog.services.catalog_service import CatalogService
from storefront_catalog.services.static_catalog import StaticCatalog


class FakeCatalogStore:
    """In-memory CatalogStore that can be told to fail specific operations."""

    def __init__(self, products: Optional[List[Dict[str, Any]]] = None):
        self.items: Dict[str, Dict[str, Any]] = {p["id"]: dict(p) for p in products or []}
        self.failing: set = set()
        self.calls: Dict[str, int] = {}

    def _enter(self, operation: str) -> None:
        self.calls[operation] = self.calls.get(operation, 0) + 1
        if operation in self.failing:
            raise RemoteCatalogError(operation, RemoteErrorKind.CONNECTIVITY, "connection refused")

    async def list_all(self):
        self._enter("list_all")
        return sorted((dict(p) for p in self.items.values()), key=lambda p: p.get("nombre") or "")

    async def get_by_id(self, product_id):
        self._enter("get_by_id")
        item = self.items.get(product_id)
        return dict(item) if item else None

    async def insert(self, record):
        self._enter("insert")
        if record["id"] in self.items:
            raise RemoteCatalogError("insert", RemoteErrorKind.CONFLICT, "id already exists")
        self.items[record["id"]] = dict(record)
        return dict(record)

    async def update_by_id(self, product_id, changes: Mapping[str, Any]):
        self._enter("update_by_id")
        if product_id not in self.items:
            raise RemoteCatalogError("update_by_id", RemoteErrorKind.NOT_FOUND, "not found")
        self.items[product_id].update(changes)
        return dict(self.items[product_id])

    async def delete_by_id(self, product_id):
        self._enter("delete_by_id")
        if product_id not in self.items:
            raise RemoteCatalogError("delete_by_id", RemoteErrorKind.NOT_FOUND, "not found")
        del self.items[product_id]

    async def exists_by_name(self, nombre):
        self._enter("exists_by_name")
        return any(
            isinstance(p.get("nombre"), str) and p["nombre"].lower() == nombre.lower()
            for p in self.items.values()
        )

    async def upsert(self, record):
        self._enter("upsert")
        self.items[record["id"]] = dict(record)
        return dict(record)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


STATIC_RECORDS = [
    {"id": "a", "nombre": "Filtro X"},
    {
        "id": "bomba-pg-20",
        "nombre": "Bomba PG-20",
        "descripcion": "Bomba de engranajes",
        "modelos_compatibles": ["NH TT3840"],
        "imagen": ["/img/pg20-1.jpg", "/img/pg20-2.jpg"],
    },
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def static_catalog():
    return StaticCatalog.from_records(STATIC_RECORDS)


@pytest.fixture
def service_config():
    return CatalogServiceConfig(freshness_window_ms=60_000, verbose_logging=False)


@pytest.fixture
def remote_store():
    return FakeCatalogStore([{"id": "b", "nombre": "Bomba"}])


@pytest.fixture
def remote_service(remote_store, static_catalog, service_config, clock):
    """Catalog service backed by the fake remote store."""
    return CatalogService(Configured(remote_store), static_catalog, service_config, clock=clock)


@pytest.fixture
def offline_service(static_catalog, service_config, clock):
    """Catalog service with no remote store."""
    return CatalogService(Unconfigured("not configured"), static_catalog, service_config, clock=clock)


@pytest.fixture
def make_store():
    """Factory for additional fake remote stores."""
    return FakeCatalogStore
