"""Data models module."""

from storefront_catalog.models.product import CacheEntry, Product, ProductSource

__all__ = ["CacheEntry", "Product", "ProductSource"]
