"""Account workflows: registration, login and profile management."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from catalog_favorites.db.models import User
from catalog_favorites.db.repositories import UserRepository
from catalog_favorites.services.auth import TokenService, hash_password, verify_password

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(ValueError):
    """Raised when an email address already belongs to another account."""


class InvalidCredentialsError(PermissionError):
    """Raised when a login attempt does not match a stored account."""


class UserNotFoundError(LookupError):
    """Raised when the authenticated identity no longer maps to a user row."""


class UserService:
    """Coordinates the user repository, password hashing and token issuance."""

    def __init__(self, *, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    async def register(self, *, name: str, email: str, password: str) -> User:
        if await self._users.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError("Email is already in use")

        try:
            user = await self._users.create(
                name=name, email=email, password_hash=hash_password(password)
            )
        except IntegrityError as exc:
            # A concurrent registration won the race for the unique email.
            await self._users.rollback()
            raise EmailAlreadyRegisteredError("Email is already in use") from exc

        logger.info("Registered user %s", user.id)
        return user

    async def login(self, *, email: str, password: str) -> tuple[str, User]:
        """Return a fresh bearer token and the matching user."""

        user = await self._users.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            raise InvalidCredentialsError("Invalid email or password")

        token = self._tokens.issue(user_id=user.id, email=user.email)
        return token, user

    async def get_profile(self, user_id: str) -> User:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    async def update_profile(
        self, user_id: str, *, name: str | None = None, email: str | None = None
    ) -> User:
        user = await self.get_profile(user_id)
        if email is not None and await self._users.email_taken(email, exclude_id=user_id):
            raise EmailAlreadyRegisteredError("Email is already in use")

        try:
            return await self._users.update(user, name=name, email=email)
        except IntegrityError as exc:
            await self._users.rollback()
            raise EmailAlreadyRegisteredError("Email is already in use") from exc

    async def delete_profile(self, user_id: str) -> None:
        user = await self.get_profile(user_id)
        await self._users.delete(user)
        logger.info("Deleted user %s and their favorites", user_id)


__all__ = [
    "EmailAlreadyRegisteredError",
    "InvalidCredentialsError",
    "UserNotFoundError",
    "UserService",
]
