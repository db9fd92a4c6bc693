"""Pydantic schemas that power the favorites API surface."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from catalog_favorites.schemas.products import ProductSummary


class FavoriteCreate(BaseModel):
    """Payload for adding a catalog product to the caller's favorites."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(
        ...,
        alias="productId",
        gt=0,
        description="Identifier of the product in the remote catalog.",
    )


class FavoriteRead(BaseModel):
    """Read model exposed in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Surrogate primary key for the favorite row")
    user_id: str
    product_id: int
    created_at: datetime = Field(
        ..., description="Timestamp when the product was added to the favorites."
    )
    product: ProductSummary


class FavoriteEnvelope(BaseModel):
    message: str
    favorite: FavoriteRead


class Pagination(BaseModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0, description="Number of favorites owned by the user.")
    pages: int = Field(..., ge=0, description="ceil(total / limit)")


class FavoriteListResponse(BaseModel):
    favorites: list[FavoriteRead]
    pagination: Pagination
