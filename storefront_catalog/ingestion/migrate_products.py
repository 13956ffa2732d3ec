"""Copy the bundled static catalog into the remote product store."""

import asyncio
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from storefront_catalog.clients.catalog_store import (
    CatalogStore,
    RemoteCatalogError,
    Unconfigured,
)
from storefront_catalog.clients.cosmosdb_client import CosmosCatalogClient, connect_remote_catalog
from storefront_catalog.config.configuration import get_config
from storefront_catalog.models.product import Product
from storefront_catalog.services.static_catalog import StaticCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationSummary:
    """Outcome of a migration run."""

    migrated: int
    failed: int
    total: int


async def migrate_product(
    store: CatalogStore,
    product: Product,
    now: Optional[datetime] = None,
) -> Product:
    """
    Upsert one product by id, keeping its original creation timestamp.

    Args:
        store: Remote product store.
        product: Normalized static product.
        now: Timestamp to stamp; defaults to the current UTC time.

    Returns:
        The stored record.

    Raises:
        RemoteCatalogError: If the lookup or upsert fails.
    """
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    existing = await store.get_by_id(product["id"])

    created_at = stamp
    if existing is not None and existing.get("created_at"):
        created_at = existing["created_at"]
        logger.info(f"Product '{product['id']}' already exists, updating")

    record = {**product, "created_at": created_at, "updated_at": stamp}
    return await store.upsert(record)


async def migrate_static_catalog(
    store: CatalogStore,
    static_catalog: StaticCatalog,
    now: Optional[datetime] = None,
) -> MigrationSummary:
    """
    Migrate every static product into the remote store.

    A failing product is logged and counted; the run continues with the rest.

    Args:
        store: Remote product store.
        static_catalog: Source snapshot.
        now: Timestamp applied to every record in this run.

    Returns:
        MigrationSummary with counts of migrated and failed products.
    """
    now = now or datetime.now(timezone.utc)
    products = static_catalog.load()
    migrated = 0
    failed = 0

    for product in products:
        try:
            await migrate_product(store, product, now=now)
            migrated += 1
            logger.info(f"Migrated: {product['nombre']}")
        except RemoteCatalogError as e:
            failed += 1
            logger.error(f"Error migrating product '{product['id']}': {e}")

    logger.info(f"Migration finished: {migrated} migrated, {failed} failed, {len(products)} total")
    return MigrationSummary(migrated=migrated, failed=failed, total=len(products))


async def main() -> int:
    config = get_config()
    logging.basicConfig(level=config.logging.level)

    remote = await connect_remote_catalog(config.cosmosdb)
    if isinstance(remote, Unconfigured):
        logger.error(f"Cannot migrate: remote catalog unavailable ({remote.reason})")
        return 1

    try:
        summary = await migrate_static_catalog(
            remote.store, StaticCatalog(config.static_catalog.path)
        )
    finally:
        if isinstance(remote.store, CosmosCatalogClient):
            await remote.store.close()

    print(f"Migrated: {summary.migrated}  Errors: {summary.failed}  Total: {summary.total}")
    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
