"""Pydantic schemas describing catalog products and their cached projection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CatalogRating(BaseModel):
    """Optional rating block attached to catalog products."""

    rate: float | None = Field(None, description="Average customer rating.")
    count: int | None = Field(None, description="Number of ratings received.")


class CatalogProduct(BaseModel):
    """Product record as served by the remote catalog API."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Catalog identifier for the product.")
    title: str
    price: float
    description: str
    category: str
    image: str
    rating: CatalogRating | None = Field(
        None,
        description="Rating block; absent for products nobody has rated yet.",
    )

    @property
    def rating_rate(self) -> float | None:
        return self.rating.rate if self.rating is not None else None

    @property
    def rating_count(self) -> int | None:
        return self.rating.count if self.rating is not None else None


class ProductSummary(BaseModel):
    """Minimal product projection embedded in favorite responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    image: str
    price: float
    rating: float | None = None
    rating_count: int | None = None
