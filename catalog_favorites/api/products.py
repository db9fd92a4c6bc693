"""Read-through endpoints for the remote product catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path

from catalog_favorites.schemas.error import ErrorResponse
from catalog_favorites.schemas.products import CatalogProduct
from catalog_favorites.services.catalog_client import CatalogClient
from catalog_favorites.services.dependencies import get_catalog_client, get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get(
    "",
    response_model=list[CatalogProduct],
    responses={401: {"model": ErrorResponse}},
)
async def list_products(
    catalog: CatalogClient = Depends(get_catalog_client),
) -> list[CatalogProduct]:
    """Return the full catalog listing."""

    return await catalog.get_all()


@router.get(
    "/{product_id}",
    response_model=CatalogProduct,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int = Path(..., description="Catalog identifier of the product"),
    catalog: CatalogClient = Depends(get_catalog_client),
) -> CatalogProduct:
    product = await catalog.get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
