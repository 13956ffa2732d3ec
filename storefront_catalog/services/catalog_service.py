"""Catalog service: source selection and caching for product reads, remote-only writes.

Reads never raise. They are served from the cache when it is fresh, otherwise
from the remote store, and fall back to the bundled static snapshot when the
remote store is unconfigured, failing or empty. Writes go to the remote store
only, propagate every failure and invalidate the cache on success.
"""

import copy
import logging
from datetime import timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Tuple

from storefront_catalog.clients.catalog_store import (
    CatalogStore,
    Configured,
    RemoteCatalog,
    RemoteCatalogError,
    Unconfigured,
)
from storefront_catalog.config.configuration import CatalogServiceConfig
from storefront_catalog.models.product import Product, ProductSource
from storefront_catalog.services.catalog_cache import CatalogCache, Clock, utc_now
from storefront_catalog.services.identifiers import derive_product_id
from storefront_catalog.services.static_catalog import StaticCatalog, normalize_product

logger = logging.getLogger(__name__)


class CatalogUnavailableError(Exception):
    """Raised when a write is attempted without a configured remote store."""

    pass


class FallbackReason(str, Enum):
    UNCONFIGURED = "unconfigured"
    REMOTE_ERROR = "remote_error"
    REMOTE_EMPTY = "remote_empty"
    NOT_FOUND = "not_found"


# Each attempt records why it could not serve the call in the shared list
ReadAttempt = Callable[[List[FallbackReason]], Awaitable[Optional[List[Product]]]]


def _same_name(product: Product, nombre: str) -> bool:
    stored = product.get("nombre")
    return isinstance(stored, str) and stored.lower() == nombre.lower()


def _copies(products: Iterable[Product]) -> List[Product]:
    return copy.deepcopy(list(products))


class CatalogService:
    """Serves the product catalog to the storefront."""

    def __init__(
        self,
        remote: RemoteCatalog,
        static_catalog: StaticCatalog,
        config: CatalogServiceConfig,
        cache: Optional[CatalogCache] = None,
        clock: Clock = utc_now,
    ):
        """Initialize the catalog service.

        Args:
            remote: Remote store handle resolved at startup.
            static_catalog: Bundled snapshot used as the read fallback.
            config: Freshness window and logging verbosity.
            cache: Prebuilt cache; by default one is created from ``config``.
            clock: Time source for the default cache.
        """
        self._remote = remote
        self._static_catalog = static_catalog
        self._config = config
        self._cache = cache or CatalogCache(
            timedelta(milliseconds=config.freshness_window_ms), clock=clock
        )
        # Per-call detail is only worth INFO when verbose logging is on
        self._detail = logger.info if config.verbose_logging else logger.debug

    @property
    def cache(self) -> CatalogCache:
        return self._cache

    @property
    def remote(self) -> RemoteCatalog:
        return self._remote

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    async def get_all(self) -> List[Product]:
        """Return the full catalog from the first source that yields data."""
        attempts: Tuple[ReadAttempt, ...] = (
            self._all_from_cache,
            self._all_from_remote,
            self._all_from_static,
        )
        skipped: List[FallbackReason] = []
        for attempt in attempts:
            products = await attempt(skipped)
            if products is not None:
                return products
        # _all_from_static always returns a list
        return []

    async def _all_from_cache(self, skipped: List[FallbackReason]) -> Optional[List[Product]]:
        entry = self._cache.read()
        if entry is None:
            return None
        self._detail(
            f"Serving {len(entry.products)} products from cache "
            f"(source: {entry.source.value}, captured at {entry.captured_at.isoformat()})"
        )
        return _copies(entry.products)

    async def _all_from_remote(self, skipped: List[FallbackReason]) -> Optional[List[Product]]:
        if isinstance(self._remote, Unconfigured):
            skipped.append(FallbackReason.UNCONFIGURED)
            return None

        try:
            products = await self._remote.store.list_all()
        except RemoteCatalogError as e:
            logger.warning(f"Remote catalog read failed: {e}")
            skipped.append(FallbackReason.REMOTE_ERROR)
            return None

        if not products:
            # An empty remote table is treated as mis-provisioned, not authoritative
            logger.warning("Remote catalog returned no products")
            skipped.append(FallbackReason.REMOTE_EMPTY)
            return None

        self._cache.write(products, ProductSource.REMOTE)
        logger.info(f"Loaded {len(products)} products from remote catalog")
        self._detail(f"Remote product ids: {[p['id'] for p in products]}")
        return _copies(products)

    async def _all_from_static(self, skipped: List[FallbackReason]) -> Optional[List[Product]]:
        products = self._static_catalog.load()
        self._cache.write(products, ProductSource.STATIC)
        reason = ", ".join(r.value for r in skipped) or "none"
        logger.info(f"Loaded {len(products)} products from static catalog (reason: {reason})")
        self._detail(f"Static product ids: {[p['id'] for p in products]}")
        return products

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """Return one product, or None when no source has it."""
        entry = self._cache.read()
        if entry is not None:
            for product in entry.products:
                if product["id"] == product_id:
                    return copy.deepcopy(product)

        if isinstance(self._remote, Configured):
            try:
                product = await self._remote.store.get_by_id(product_id)
            except RemoteCatalogError as e:
                logger.warning(f"Remote lookup of product '{product_id}' failed: {e}")
                return self._find_static(product_id, FallbackReason.REMOTE_ERROR)
            if product is not None:
                return product
            return self._find_static(product_id, FallbackReason.NOT_FOUND)

        return self._find_static(product_id, FallbackReason.UNCONFIGURED)

    def _find_static(self, product_id: str, reason: FallbackReason) -> Optional[Product]:
        self._detail(f"Looking up product '{product_id}' in static catalog (reason: {reason.value})")
        for product in self._static_catalog.load():
            if product["id"] == product_id:
                return product
        return None

    async def exists_by_name(self, nombre: str) -> bool:
        """Check case-insensitively whether a product with this exact name exists."""
        entry = self._cache.read()
        if entry is not None and any(_same_name(p, nombre) for p in entry.products):
            return True

        if isinstance(self._remote, Configured):
            try:
                return await self._remote.store.exists_by_name(nombre)
            except RemoteCatalogError as e:
                logger.warning(f"Remote name check for '{nombre}' failed: {e}")
                return self._static_has_name(nombre, FallbackReason.REMOTE_ERROR)

        return self._static_has_name(nombre, FallbackReason.UNCONFIGURED)

    def _static_has_name(self, nombre: str, reason: FallbackReason) -> bool:
        self._detail(f"Checking name '{nombre}' in static catalog (reason: {reason.value})")
        return any(_same_name(p, nombre) for p in self._static_catalog.load())

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def _require_store(self, operation: str) -> CatalogStore:
        if isinstance(self._remote, Unconfigured):
            raise CatalogUnavailableError(
                f"Cannot {operation} product: remote catalog is not configured "
                f"({self._remote.reason}). Set COSMOSDB_ENDPOINT and COSMOSDB_KEY."
            )
        return self._remote.store

    async def create(self, draft: Mapping[str, Any]) -> Product:
        """
        Insert a new product into the remote store.

        Args:
            draft: Product fields; ``id`` is derived from ``nombre`` when absent.

        Returns:
            The inserted record as stored remotely.

        Raises:
            CatalogUnavailableError: If no remote store is configured.
            ValueError: If ``nombre`` is missing or yields no identifier, or
                ``id`` is not a valid identifier.
            RemoteCatalogError: If the insert fails.
        """
        store = self._require_store("create")

        nombre = draft.get("nombre")
        if not nombre or not isinstance(nombre, str):
            raise ValueError("Product 'nombre' is required")

        explicit_id = draft.get("id")
        if explicit_id is not None and (
            not isinstance(explicit_id, str) or derive_product_id(explicit_id) != explicit_id
        ):
            raise ValueError(
                f"Product id {explicit_id!r} must be lowercase letters, digits and hyphens"
            )

        product_id = explicit_id or derive_product_id(nombre)
        if not product_id:
            raise ValueError(f"Cannot derive a product id from name {nombre!r}")

        record = normalize_product({**draft, "id": product_id})
        try:
            created = await store.insert(record)
        except RemoteCatalogError as e:
            logger.error(f"Error creating product '{product_id}': {e}")
            raise

        self._cache.invalidate()
        logger.info(f"Created product '{product_id}'")
        return created

    async def update(self, product_id: str, changes: Mapping[str, Any]) -> Product:
        """
        Apply a partial update to a remote product.

        Raises:
            CatalogUnavailableError: If no remote store is configured.
            ValueError: If ``changes`` tries to change the identifier or
                blanks ``nombre``.
            RemoteCatalogError: If the update fails.
        """
        store = self._require_store("update")

        fields = dict(changes)
        if "id" in fields:
            if fields.pop("id") != product_id:
                raise ValueError("Product id cannot be changed")
        if "nombre" in fields:
            nombre = fields["nombre"]
            if not isinstance(nombre, str) or not nombre.strip():
                raise ValueError("Product 'nombre' cannot be empty")

        try:
            updated = await store.update_by_id(product_id, fields)
        except RemoteCatalogError as e:
            logger.error(f"Error updating product '{product_id}': {e}")
            raise

        self._cache.invalidate()
        logger.info(f"Updated product '{product_id}' ({', '.join(fields) or 'no fields'})")
        return updated

    async def delete(self, product_id: str) -> bool:
        """
        Delete a remote product.

        Raises:
            CatalogUnavailableError: If no remote store is configured.
            RemoteCatalogError: If the delete fails.
        """
        store = self._require_store("delete")

        try:
            await store.delete_by_id(product_id)
        except RemoteCatalogError as e:
            logger.error(f"Error deleting product '{product_id}': {e}")
            raise

        self._cache.invalidate()
        logger.info(f"Deleted product '{product_id}'")
        return True
