"""Catalog service bootstrap and command-line catalog dump."""

import asyncio
import logging
from typing import Optional

from storefront_catalog.clients import CosmosCatalogClient, Configured, connect_remote_catalog
from storefront_catalog.config.configuration import AppConfig, get_config
from storefront_catalog.services import CatalogService, StaticCatalog

logger = logging.getLogger(__name__)


async def create_catalog_service(config: Optional[AppConfig] = None) -> CatalogService:
    """Resolve the remote store and build a catalog service from configuration."""
    config = config or get_config()
    remote = await connect_remote_catalog(config.cosmosdb)
    return CatalogService(
        remote=remote,
        static_catalog=StaticCatalog(config.static_catalog.path),
        config=config.catalog,
    )


async def close_catalog_service(service: CatalogService) -> None:
    """Release the remote connection held by a service, if any."""
    remote = service.remote
    if isinstance(remote, Configured) and isinstance(remote.store, CosmosCatalogClient):
        await remote.store.close()


async def main() -> None:
    config = get_config()
    logging.basicConfig(level=config.logging.level)

    service = await create_catalog_service(config)
    try:
        products = await service.get_all()
        entry = service.cache.read()
        source = entry.source.value if entry else "unknown"
        print(f"{len(products)} products (source: {source})\n")
        for product in products:
            print(f"  {product['id']}: {product['nombre']}")
    finally:
        await close_catalog_service(service)


if __name__ == "__main__":
    asyncio.run(main())
