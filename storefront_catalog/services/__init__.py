"""Catalog services."""

from storefront_catalog.services.catalog_cache import CatalogCache
from storefront_catalog.services.catalog_service import (
    CatalogService,
    CatalogUnavailableError,
    FallbackReason,
)
from storefront_catalog.services.identifiers import derive_product_id
from storefront_catalog.services.static_catalog import StaticCatalog, normalize_product

__all__ = [
    "CatalogCache",
    "CatalogService",
    "CatalogUnavailableError",
    "FallbackReason",
    "StaticCatalog",
    "derive_product_id",
    "normalize_product",
]
