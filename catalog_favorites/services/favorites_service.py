"""Business logic powering the favorites API endpoints.

``add_favorite`` is a short-circuiting pipeline:

1. ask the catalog whether the product exists;
2. reject pairs that are already favorited (fast path only);
3. fetch the full product record;
4. upsert the local product cache row;
5. insert the favorite, treating a unique-constraint violation as the
   authoritative "already favorited" signal;
6. return the favorite with its product projection.

The catalog call and the local writes never share a transaction, so a failure
between steps 4 and 5 can leave a cached product without a favorite.  Product
rows are a pure mirror of the catalog, which makes that harmless.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from catalog_favorites.db.models import Favorite
from catalog_favorites.db.repositories import FavoriteRepository, ProductRepository
from catalog_favorites.services.catalog_client import CatalogProductSource

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class ProductNotFoundError(LookupError):
    """Raised when the catalog does not know the requested product."""


class FavoriteNotFoundError(LookupError):
    """Raised when the user has not favorited the requested product."""


class AlreadyFavoritedError(ValueError):
    """Raised when the (user, product) pair is already a favorite."""


@dataclass(frozen=True, slots=True)
class FavoritePage:
    favorites: list[Favorite]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


class FavoritesService:
    """Orchestrates the catalog client and the favorite/product repositories."""

    def __init__(
        self,
        *,
        catalog: CatalogProductSource,
        favorites: FavoriteRepository,
        products: ProductRepository,
    ) -> None:
        self._catalog = catalog
        self._favorites = favorites
        self._products = products

    async def add_favorite(self, *, user_id: str, product_id: int) -> Favorite:
        if not await self._catalog.validate(product_id):
            raise ProductNotFoundError("Product not found")

        existing = await self._favorites.find(user_id=user_id, product_id=product_id)
        if existing is not None:
            raise AlreadyFavoritedError("Product is already in favorites")

        product = await self._catalog.get_by_id(product_id)
        if product is None:
            # The product vanished between the validation and the fetch.
            raise ProductNotFoundError("Product not found")

        await self._products.upsert(product)

        try:
            await self._favorites.create(user_id=user_id, product_id=product_id)
        except IntegrityError:
            await self._favorites.rollback()
            if await self._favorites.find(user_id=user_id, product_id=product_id) is None:
                raise
            logger.warning(
                "Concurrent add of product %s for user %s rejected by the unique constraint",
                product_id,
                user_id,
            )
            raise AlreadyFavoritedError("Product is already in favorites") from None

        favorite = await self._favorites.find(user_id=user_id, product_id=product_id)
        if favorite is None:  # pragma: no cover - the row was flushed just above
            raise RuntimeError("Favorite disappeared right after insertion")

        logger.info("User %s favorited product %s", user_id, product_id)
        return favorite

    async def list_favorites(
        self,
        *,
        user_id: str,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> FavoritePage:
        if page < 1:
            raise ValueError("page must be greater than or equal to 1")
        if limit < 1:
            raise ValueError("limit must be greater than 0")

        offset = (page - 1) * limit
        favorites = await self._favorites.list_for_user(
            user_id=user_id, offset=offset, limit=limit
        )
        total = await self._favorites.count_for_user(user_id=user_id)
        return FavoritePage(
            favorites=list(favorites),
            page=page,
            limit=limit,
            total=total,
        )

    async def remove_favorite(self, *, user_id: str, product_id: int) -> None:
        favorite = await self._favorites.find(user_id=user_id, product_id=product_id)
        if favorite is None:
            raise FavoriteNotFoundError("Favorite not found")

        await self._favorites.delete(favorite)
        logger.info("User %s removed product %s from favorites", user_id, product_id)


__all__ = [
    "AlreadyFavoritedError",
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "FavoriteNotFoundError",
    "FavoritePage",
    "FavoritesService",
    "ProductNotFoundError",
]
