"""REST controller for the product catalog."""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field, field_validator

from storefront_catalog.clients.catalog_store import RemoteCatalogError, RemoteErrorKind
from storefront_catalog.services.catalog_service import CatalogService, CatalogUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


class ProductCreate(BaseModel):
    """New product; ``id`` is derived from ``nombre`` when omitted."""

    id: Optional[str] = None
    nombre: str = Field(min_length=1)
    descripcion: str = ""
    modelos_compatibles: List[str] = Field(default_factory=list)
    imagen: Union[str, List[str]] = ""


class ProductUpdate(BaseModel):
    """Partial update; only fields that are sent are changed."""

    nombre: Optional[str] = Field(default=None, min_length=1)
    descripcion: Optional[str] = None
    modelos_compatibles: Optional[List[str]] = None
    imagen: Optional[Union[str, List[str]]] = None

    @field_validator("nombre")
    @classmethod
    def nombre_not_null(cls, value: Optional[str]) -> str:
        # Defaults are not validated, so this only sees an explicit null
        if value is None:
            raise ValueError("nombre cannot be null")
        return value


class ExistsResponse(BaseModel):
    exists: bool


def get_catalog_service(request: Request) -> CatalogService:
    """Catalog service created at application startup."""
    return request.app.state.catalog_service


_STATUS_BY_KIND = {
    RemoteErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RemoteErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
}


def _write_error(e: Exception) -> HTTPException:
    """Map a failed write onto an HTTP error."""
    if isinstance(e, CatalogUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    if isinstance(e, RemoteCatalogError):
        code = _STATUS_BY_KIND.get(e.kind, status.HTTP_502_BAD_GATEWAY)
        return HTTPException(status_code=code, detail=e.message)
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.get("")
async def list_products(service: CatalogService = Depends(get_catalog_service)) -> List[dict]:
    return await service.get_all()


@router.get("/exists", response_model=ExistsResponse)
async def product_name_exists(
    nombre: str, service: CatalogService = Depends(get_catalog_service)
) -> ExistsResponse:
    return ExistsResponse(exists=await service.exists_by_name(nombre))


@router.get("/{product_id}")
async def get_product(
    product_id: str, service: CatalogService = Depends(get_catalog_service)
) -> dict:
    product = await service.get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate, service: CatalogService = Depends(get_catalog_service)
) -> dict:
    try:
        return await service.create(payload.model_dump(exclude_none=True))
    except (CatalogUnavailableError, RemoteCatalogError, ValueError) as e:
        logger.warning(f"Create product failed: {e}")
        raise _write_error(e) from e


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    service: CatalogService = Depends(get_catalog_service),
) -> dict:
    try:
        return await service.update(product_id, payload.model_dump(exclude_unset=True))
    except (CatalogUnavailableError, RemoteCatalogError, ValueError) as e:
        logger.warning(f"Update of product '{product_id}' failed: {e}")
        raise _write_error(e) from e


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str, service: CatalogService = Depends(get_catalog_service)
) -> Response:
    try:
        await service.delete(product_id)
    except (CatalogUnavailableError, RemoteCatalogError) as e:
        logger.warning(f"Delete of product '{product_id}' failed: {e}")
        raise _write_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
