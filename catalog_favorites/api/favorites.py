"""FastAPI router exposing the caller's favorite products."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from catalog_favorites.schemas.error import ErrorResponse
from catalog_favorites.schemas.favorites import (
    FavoriteCreate,
    FavoriteEnvelope,
    FavoriteListResponse,
    FavoriteRead,
    Pagination,
)
from catalog_favorites.schemas.users import MessageResponse
from catalog_favorites.services.auth import AuthenticatedUser
from catalog_favorites.services.dependencies import (
    get_current_user,
    get_favorites_service,
)
from catalog_favorites.services.favorites_service import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    AlreadyFavoritedError,
    FavoriteNotFoundError,
    FavoritesService,
    ProductNotFoundError,
)

router = APIRouter()

@router.post(
    "",
    response_model=FavoriteEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def add_favorite(
    payload: FavoriteCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteEnvelope:
    """Add a catalog product to the caller's favorites."""

    try:
        favorite = await service.add_favorite(
            user_id=current_user.id, product_id=payload.product_id
        )
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except AlreadyFavoritedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return FavoriteEnvelope(
        message="Product added to favorites",
        favorite=FavoriteRead.model_validate(favorite),
    )


@router.get(
    "",
    response_model=FavoriteListResponse,
    responses={401: {"model": ErrorResponse}},
)
async def list_favorites(
    page: int = Query(DEFAULT_PAGE, ge=1, description="1-based page number"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, description="Page size"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteListResponse:
    """Return the caller's favorites, newest first."""

    result = await service.list_favorites(user_id=current_user.id, page=page, limit=limit)
    return FavoriteListResponse(
        favorites=[FavoriteRead.model_validate(item) for item in result.favorites],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def remove_favorite(
    product_id: int = Path(..., description="Catalog identifier of the product"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: FavoritesService = Depends(get_favorites_service),
) -> MessageResponse:
    """Remove a product from the caller's favorites."""

    try:
        await service.remove_favorite(user_id=current_user.id, product_id=product_id)
    except FavoriteNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MessageResponse(message="Product removed from favorites")
