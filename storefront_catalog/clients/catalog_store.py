"""Contract for the remote product store.

The remote handle is resolved once at startup into either ``Configured`` or
``Unconfigured``. Consumers branch on the variant instead of null-checking a
client, so running without a remote store is an ordinary, visible case.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Protocol, Union, runtime_checkable

from storefront_catalog.models.product import Product


class RemoteErrorKind(str, Enum):
    CONNECTIVITY = "connectivity"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNKNOWN = "unknown"


class RemoteCatalogError(Exception):
    """Structured failure of a remote store operation."""

    def __init__(self, operation: str, kind: RemoteErrorKind, message: str):
        super().__init__(f"{operation} failed ({kind.value}): {message}")
        self.operation = operation
        self.kind = kind
        self.message = message


@runtime_checkable
class CatalogStore(Protocol):
    """Operations the catalog service needs from a remote product store.

    Every operation raises ``RemoteCatalogError`` on failure. ``get_by_id``
    reports a missing product as ``None`` rather than an error.
    """

    async def list_all(self) -> List[Product]:
        """Return every product ordered by ``nombre`` ascending."""
        ...

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        ...

    async def insert(self, record: Product) -> Product:
        ...

    async def update_by_id(self, product_id: str, changes: Mapping[str, Any]) -> Product:
        ...

    async def delete_by_id(self, product_id: str) -> None:
        ...

    async def exists_by_name(self, nombre: str) -> bool:
        """Case-insensitive exact match on ``nombre``."""
        ...

    async def upsert(self, record: Mapping[str, Any]) -> Product:
        ...


@dataclass(frozen=True)
class Configured:
    """A connected remote store."""

    store: CatalogStore


@dataclass(frozen=True)
class Unconfigured:
    """No remote store; ``reason`` says why (missing credentials, failed connect)."""

    reason: str


RemoteCatalog = Union[Configured, Unconfigured]
