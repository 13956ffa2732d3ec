"""Storefront product catalog data-access layer."""
