"""Catalog ingestion utilities."""

from storefront_catalog.ingestion.migrate_products import (
    MigrationSummary,
    migrate_product,
    migrate_static_catalog,
)

__all__ = ["MigrationSummary", "migrate_product", "migrate_static_catalog"]
