"""FastAPI application setup."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront_catalog.api.controller import products_router
from storefront_catalog.clients import Configured
from storefront_catalog.services import CatalogService


def create_app(service: Optional[CatalogService] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        service: Prebuilt catalog service. When omitted, one is built from
            configuration at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if service is not None:
            app.state.catalog_service = service
            yield
            return

        from storefront_catalog.main import close_catalog_service, create_catalog_service

        app.state.catalog_service = await create_catalog_service()
        try:
            yield
        finally:
            await close_catalog_service(app.state.catalog_service)

    app = FastAPI(
        title="Storefront Catalog API",
        description="Product catalog with remote store and static fallback",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS for the storefront frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production: specify storefront origin
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(products_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        remote = app.state.catalog_service.remote
        return {
            "status": "healthy",
            "remote_catalog": "configured" if isinstance(remote, Configured) else "unconfigured",
        }

    return app


app = create_app()
