"""Single-slot, time-boxed cache of the whole product catalog."""

import copy
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from storefront_catalog.models.product import CacheEntry, Product, ProductSource

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CatalogCache:
    """Holds at most one catalog snapshot.

    Expiry is checked lazily on ``read``; nothing is swept in the background.
    """

    def __init__(self, freshness_window: timedelta, clock: Clock = utc_now):
        self._freshness_window = freshness_window
        self._clock = clock
        self._entry: Optional[CacheEntry] = None

    @property
    def freshness_window(self) -> timedelta:
        return self._freshness_window

    def read(self) -> Optional[CacheEntry]:
        """Return the entry if it is younger than the freshness window, else None."""
        entry = self._entry
        if entry is None:
            return None
        if self._clock() - entry.captured_at >= self._freshness_window:
            return None
        return entry

    def write(self, products: List[Product], source: ProductSource) -> CacheEntry:
        """Replace the entry with a snapshot detached from the caller's list."""
        self._entry = CacheEntry(
            products=tuple(copy.deepcopy(products)),
            captured_at=self._clock(),
            source=source,
        )
        return self._entry

    def invalidate(self) -> None:
        self._entry = None
