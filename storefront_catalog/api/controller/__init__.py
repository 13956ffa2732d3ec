"""API controllers."""

from storefront_catalog.api.controller.products_controller import router as products_router

__all__ = ["products_router"]
