"""Client modules for external services."""

from storefront_catalog.clients.catalog_store import (
    CatalogStore,
    Configured,
    RemoteCatalog,
    RemoteCatalogError,
    RemoteErrorKind,
    Unconfigured,
)
from storefront_catalog.clients.cosmosdb_client import (
    CosmosCatalogClient,
    connect_remote_catalog,
)

__all__ = [
    "CatalogStore",
    "Configured",
    "RemoteCatalog",
    "RemoteCatalogError",
    "RemoteErrorKind",
    "Unconfigured",
    "CosmosCatalogClient",
    "connect_remote_catalog",
]
