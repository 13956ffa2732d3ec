"""Product catalog models shared by the remote store, static snapshot and cache."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Tuple, TypedDict, Union


class _ProductRequired(TypedDict):
    id: str
    nombre: str


class Product(_ProductRequired, total=False):
    """A catalog record as stored remotely or bundled in the static snapshot.

    ``id`` is immutable once assigned and is the only join key between the
    remote and static representations.
    """

    descripcion: str
    modelos_compatibles: List[str]
    imagen: Union[str, List[str]]  # single path or ordered gallery


class ProductSource(str, Enum):
    """Where a cached catalog snapshot came from."""

    REMOTE = "remote"
    STATIC = "static"


@dataclass(frozen=True)
class CacheEntry:
    """Whole-catalog snapshot held by the catalog cache."""

    products: Tuple[Product, ...]  # private copy, order as returned by the source
    captured_at: datetime  # UTC capture time
    source: ProductSource
