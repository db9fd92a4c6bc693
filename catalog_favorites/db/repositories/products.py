"""Upsert helpers for the local product cache."""

from __future__ import annotations

from typing import Any

from sqlalchemy import or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_favorites.db.models import Product, utcnow
from catalog_favorites.schemas.products import CatalogProduct

# Columns refreshed from the catalog on every upsert.
_MIRRORED_COLUMNS = (
    "title",
    "image",
    "price",
    "rating",
    "rating_count",
    "category",
    "description",
)


def _product_values(product: CatalogProduct) -> dict[str, Any]:
    """Flatten a catalog product into ``products`` column values.

    The optional ``rating`` block maps onto two independently nullable
    columns.
    """

    return {
        "id": product.id,
        "title": product.title,
        "image": product.image,
        "price": product.price,
        "rating": product.rating_rate,
        "rating_count": product.rating_count,
        "category": product.category,
        "description": product.description,
    }


class ProductRepository:
    """Maintains the ``products`` table as a mirror of the remote catalog."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _insert(self):
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(Product)
        if dialect == "sqlite":
            return sqlite.insert(Product)
        raise RuntimeError(f"Product upsert is not supported on dialect '{dialect}'")

    async def upsert(self, product: CatalogProduct) -> None:
        """Insert or refresh the cached row for ``product``.

        The conflict branch only fires when a mirrored column actually changed,
        so replaying identical catalog data leaves the row (and its
        ``updated_at``) untouched.
        """

        now = utcnow()
        stmt = self._insert().values(
            **_product_values(product), created_at=now, updated_at=now
        )
        changed = or_(
            *(
                getattr(Product, column).is_distinct_from(getattr(stmt.excluded, column))
                for column in _MIRRORED_COLUMNS
            )
        )
        update_columns = {
            column: getattr(stmt.excluded, column) for column in _MIRRORED_COLUMNS
        }
        update_columns["updated_at"] = stmt.excluded.updated_at
        stmt = stmt.on_conflict_do_update(
            index_elements=[Product.id],
            set_=update_columns,
            where=changed,
        )
        await self._session.execute(stmt)

    async def get(self, product_id: int) -> Product | None:
        return await self._session.get(Product, product_id)
