"""Azure Cosmos DB client for the remote product store."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional

from azure.core.exceptions import AzureError
from azure.cosmos.aio import CosmosClient
from azure.cosmos.aio._container import ContainerProxy
from azure.cosmos.aio._database import DatabaseProxy
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from storefront_catalog.clients.catalog_store import (
    Configured,
    RemoteCatalog,
    RemoteCatalogError,
    RemoteErrorKind,
    Unconfigured,
)
from storefront_catalog.config.configuration import CosmosDBConfig
from storefront_catalog.models.product import Product

logger = logging.getLogger(__name__)

# Metadata Cosmos adds to every item; not part of a product record
SYSTEM_FIELDS = frozenset({"_rid", "_self", "_etag", "_attachments", "_ts"})

LIST_ALL_QUERY = "SELECT * FROM c ORDER BY c.nombre ASC"
EXISTS_BY_NAME_QUERY = "SELECT TOP 1 c.id FROM c WHERE STRINGEQUALS(c.nombre, @nombre, true)"


def _strip_system_fields(item: Mapping[str, Any]) -> Product:
    return {k: v for k, v in item.items() if k not in SYSTEM_FIELDS}  # type: ignore[return-value]


def _error_kind(error: AzureError) -> RemoteErrorKind:
    if isinstance(error, CosmosHttpResponseError):
        status = error.status_code
        if status in (401, 403):
            return RemoteErrorKind.PERMISSION
        if status == 404:
            return RemoteErrorKind.NOT_FOUND
        if status == 409:
            return RemoteErrorKind.CONFLICT
        if status is None or status >= 500 or status in (408, 429):
            return RemoteErrorKind.CONNECTIVITY
        return RemoteErrorKind.UNKNOWN
    return RemoteErrorKind.CONNECTIVITY


@contextmanager
def _remote_operation(operation: str) -> Iterator[None]:
    """Translate Azure SDK errors raised inside the block into RemoteCatalogError."""
    try:
        yield
    except AzureError as e:
        raise RemoteCatalogError(operation, _error_kind(e), str(e)) from e


class CosmosCatalogClient:
    """Async Cosmos DB product store with connection management.

    Uses the NoSQL API with one item per product, partitioned by ``/id``.
    Supports async context manager pattern for proper resource cleanup.
    """

    def __init__(
        self,
        endpoint: str,
        key: str,
        database_name: str,
        container_name: str,
        partition_key_path: str = "/id",
    ):
        """Initialize the Cosmos DB client.

        Args:
            endpoint: Cosmos DB account endpoint URL
            key: Cosmos DB account key
            database_name: Name of the database to use
            container_name: Name of the products container
            partition_key_path: Path to the partition key field (default: /id)
        """
        self._endpoint = endpoint
        self._key = key
        self._database_name = database_name
        self._container_name = container_name
        self._partition_key_path = partition_key_path

        self._client: Optional[CosmosClient] = None
        self._database: Optional[DatabaseProxy] = None
        self._container: Optional[ContainerProxy] = None

    @classmethod
    def from_config(cls, config: CosmosDBConfig) -> "CosmosCatalogClient":
        return cls(
            endpoint=config.endpoint,
            key=config.key,
            database_name=config.database_name,
            container_name=config.container_name,
            partition_key_path=config.partition_key_path,
        )

    async def connect(self) -> None:
        """Establish connection and ensure database/container exist."""
        self._client = CosmosClient(url=self._endpoint, credential=self._key)
        await self._client.__aenter__()

        # Get or create database
        try:
            self._database = self._client.get_database_client(self._database_name)
            # Verify database exists by reading it
            await self._database.read()
        except CosmosResourceNotFoundError:
            self._database = await self._client.create_database(self._database_name)

        # Get or create container
        try:
            self._container = self._database.get_container_client(self._container_name)
            # Verify container exists by reading it
            await self._container.read()
        except CosmosResourceNotFoundError:
            self._container = await self._database.create_container(
                id=self._container_name,
                partition_key={"paths": [self._partition_key_path], "kind": "Hash"},
            )

    async def close(self) -> None:
        """Close the Cosmos DB connection."""
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None
            self._container = None

    async def __aenter__(self) -> "CosmosCatalogClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Async context manager exit with cleanup."""
        await self.close()
        return False

    def _require_container(self) -> ContainerProxy:
        if self._container is None:
            raise RuntimeError("CosmosDB client not connected. Call connect() first.")
        return self._container

    async def _query(self, operation: str, query: str, parameters=None) -> List[dict]:
        container = self._require_container()
        items = []
        with _remote_operation(operation):
            async for item in container.query_items(query=query, parameters=parameters):
                items.append(dict(item))
        return items

    async def list_all(self) -> List[Product]:
        """Return every product ordered by name ascending."""
        items = await self._query("list_all", LIST_ALL_QUERY)
        return [_strip_system_fields(item) for item in items]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """Read a single product; None if it does not exist."""
        container = self._require_container()
        try:
            with _remote_operation("get_by_id"):
                item = await container.read_item(item=product_id, partition_key=product_id)
        except RemoteCatalogError as e:
            if e.kind is RemoteErrorKind.NOT_FOUND:
                return None
            raise
        return _strip_system_fields(item)

    async def insert(self, record: Product) -> Product:
        """Create a product. An existing id raises a CONFLICT error."""
        container = self._require_container()
        with _remote_operation("insert"):
            result = await container.create_item(body=dict(record))
        return _strip_system_fields(result)

    async def update_by_id(self, product_id: str, changes: Mapping[str, Any]) -> Product:
        """Apply a partial update with a single patch request."""
        container = self._require_container()
        operations = [
            {"op": "set", "path": f"/{field}", "value": value}
            for field, value in changes.items()
        ]
        if not operations:
            existing = await self.get_by_id(product_id)
            if existing is None:
                raise RemoteCatalogError(
                    "update_by_id", RemoteErrorKind.NOT_FOUND, f"Product '{product_id}' not found"
                )
            return existing

        with _remote_operation("update_by_id"):
            result = await container.patch_item(
                item=product_id,
                partition_key=product_id,
                patch_operations=operations,
            )
        return _strip_system_fields(result)

    async def delete_by_id(self, product_id: str) -> None:
        container = self._require_container()
        with _remote_operation("delete_by_id"):
            await container.delete_item(item=product_id, partition_key=product_id)

    async def exists_by_name(self, nombre: str) -> bool:
        items = await self._query(
            "exists_by_name",
            EXISTS_BY_NAME_QUERY,
            parameters=[{"name": "@nombre", "value": nombre}],
        )
        return len(items) > 0

    async def upsert(self, record: Mapping[str, Any]) -> Product:
        """Insert or replace a product by id."""
        container = self._require_container()
        with _remote_operation("upsert"):
            result = await container.upsert_item(body=dict(record))
        return _strip_system_fields(result)


async def connect_remote_catalog(config: Optional[CosmosDBConfig]) -> RemoteCatalog:
    """Resolve the remote store once at startup.

    Never raises: missing credentials or a failed connection produce an
    ``Unconfigured`` handle and the catalog runs on its static snapshot.
    """
    if config is None or not config.endpoint or not config.key:
        logger.warning(
            "Remote catalog not configured. Set COSMOSDB_ENDPOINT and COSMOSDB_KEY "
            "in your .env file to enable it."
        )
        return Unconfigured("missing COSMOSDB_ENDPOINT or COSMOSDB_KEY")

    client = CosmosCatalogClient.from_config(config)
    try:
        await client.connect()
    except Exception as e:
        logger.warning(f"Could not connect to remote catalog at {config.endpoint}: {e}")
        try:
            await client.close()
        except Exception as close_error:
            logger.debug(f"Ignoring error while closing failed client: {close_error}")
        return Unconfigured(f"connection failed: {e}")

    logger.info(
        f"Remote catalog connected: {config.database_name}/{config.container_name}"
    )
    return Configured(client)
