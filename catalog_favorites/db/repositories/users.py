"""Database-oriented helpers for user accounts."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_favorites.db.models import Favorite, User


class UserRepository:
    """Encapsulates SQLAlchemy operations on the ``users`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalars().one_or_none()

    async def email_taken(self, email: str, *, exclude_id: str | None = None) -> bool:
        """Return ``True`` when another account already uses ``email``."""

        query = select(User.id).where(User.email == email)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self._session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def create(self, *, name: str, email: str, password_hash: str) -> User:
        user = User(name=name, email=email, password=password_hash)
        self._session.add(user)
        await self._session.flush()
        return user

    async def update(
        self, user: User, *, name: str | None = None, email: str | None = None
    ) -> User:
        """Apply the supplied profile fields; ``None`` leaves a field unchanged."""

        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        await self._session.flush()
        return user

    async def delete(self, user: User) -> None:
        """Remove a user together with every favorite they own."""

        await self._session.execute(delete(Favorite).where(Favorite.user_id == user.id))
        await self._session.delete(user)
        await self._session.flush()

    async def rollback(self) -> None:
        await self._session.rollback()
