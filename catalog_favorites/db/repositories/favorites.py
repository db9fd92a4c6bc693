"""Database-oriented helpers for favorites."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catalog_favorites.db.models import Favorite


class FavoriteRepository:
    """Encapsulates SQLAlchemy operations required by the favorites domain."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, *, user_id: str, product_id: int) -> Favorite | None:
        """Return the favorite for the pair, with its product eagerly loaded."""

        query = (
            select(Favorite)
            .options(selectinload(Favorite.product))
            .where(Favorite.user_id == user_id, Favorite.product_id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(query)
        return result.scalars().one_or_none()

    async def create(self, *, user_id: str, product_id: int) -> Favorite:
        """Insert a favorite row.

        Raises :class:`sqlalchemy.exc.IntegrityError` when the pair already
        exists; callers decide how to report it.
        """

        favorite = Favorite(user_id=user_id, product_id=product_id)
        self._session.add(favorite)
        await self._session.flush()
        return favorite

    async def delete(self, favorite: Favorite) -> None:
        await self._session.delete(favorite)
        await self._session.flush()

    async def list_for_user(
        self, *, user_id: str, offset: int, limit: int
    ) -> Sequence[Favorite]:
        """Return one page of favorites, newest first, with products loaded."""

        query = (
            select(Favorite)
            .options(selectinload(Favorite.product))
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(query)
        return result.scalars().all()

    async def count_for_user(self, *, user_id: str) -> int:
        query = select(func.count()).select_from(Favorite).where(Favorite.user_id == user_id)
        result = await self._session.execute(query)
        return int(result.scalar_one())

    async def rollback(self) -> None:
        await self._session.rollback()
