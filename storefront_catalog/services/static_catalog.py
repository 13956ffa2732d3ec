"""Bundled static product snapshot used when the remote store cannot serve reads."""

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from storefront_catalog.models.product import Product

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "data" / "products.json"


def normalize_product(raw: Mapping[str, Any]) -> Product:
    """
    Fill in the optional fields of a raw snapshot entry.

    Missing or empty ``descripcion`` and ``imagen`` become ``""``; a missing or
    non-list ``modelos_compatibles`` becomes ``[]``.
    """
    modelos = raw.get("modelos_compatibles")
    imagen = raw.get("imagen")
    if isinstance(imagen, (list, tuple)):
        imagen = list(imagen)
    elif not isinstance(imagen, str):
        imagen = ""

    return {
        "id": raw["id"],
        "nombre": raw["nombre"],
        "descripcion": raw.get("descripcion") or "",
        "modelos_compatibles": list(modelos) if isinstance(modelos, (list, tuple)) else [],
        "imagen": imagen,
    }


class StaticCatalog:
    """Read-only product list loaded once from the bundled JSON snapshot.

    ``load()`` normalizes the raw entries on every call and returns a new list,
    so callers can never alter what later calls see. It never raises: an
    unreadable snapshot yields an empty catalog.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path) if path else DEFAULT_CATALOG_PATH
        self._raw: Optional[List[Any]] = None

    @classmethod
    def from_records(cls, records: Sequence[Any]) -> "StaticCatalog":
        """Build a catalog over in-memory raw entries instead of a file."""
        catalog = cls()
        catalog._raw = list(records)
        return catalog

    def _read_raw(self) -> List[Any]:
        if self._raw is not None:
            return self._raw

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read static catalog {self._path}: {e}")
            data = []

        if not isinstance(data, list):
            logger.error(f"Static catalog {self._path} must contain a JSON list")
            data = []

        logger.debug(f"Loaded {len(data)} raw entries from {self._path}")
        self._raw = data
        return self._raw

    def load(self) -> List[Product]:
        """Return the normalized snapshot."""
        products: List[Product] = []
        for index, raw in enumerate(self._read_raw()):
            if not isinstance(raw, Mapping) or not raw.get("id") or not raw.get("nombre"):
                logger.warning(f"Skipping static catalog entry {index}: missing id or nombre")
                continue
            products.append(normalize_product(raw))
        return products
