"""Password hashing and bearer-token issuance/verification.

Tokens are HS256 JWTs carrying ``{id, email}`` and an ``exp`` claim.  The
service is stateless: every request is verified on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from catalog_favorites.settings import AppSettings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class InvalidTokenError(PermissionError):
    """Raised when a bearer token is missing, malformed, forged or expired."""


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Identity attached to a request once its token has been verified."""

    id: str
    email: str


def hash_password(password: str) -> str:
    """Generate a salted PBKDF2 hash of ``password``."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare plain password with its hashed version."""
    return pwd_context.verify(plain_password, hashed_password)


class TokenService:
    """Issues and verifies signed bearer tokens."""

    def __init__(
        self,
        *,
        secret: str | None,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(days=7),
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_in=timedelta(days=settings.jwt_expiration_days),
        )

    def _require_secret(self) -> str:
        if not self._secret:
            raise RuntimeError("JWT_SECRET is not defined")
        return self._secret

    def issue(self, *, user_id: str, email: str, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "id": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._expires_in,
        }
        return jwt.encode(claims, self._require_secret(), algorithm=self._algorithm)

    def verify(self, token: str) -> AuthenticatedUser:
        """Decode ``token`` and return the identity it carries."""

        try:
            payload = jwt.decode(token, self._require_secret(), algorithms=[self._algorithm])
        except JWTError as exc:
            logger.debug("Rejected bearer token: %s", exc)
            raise InvalidTokenError("Token expired or invalid") from exc

        user_id = payload.get("id")
        email = payload.get("email")
        if not isinstance(user_id, str) or not isinstance(email, str):
            raise InvalidTokenError("Token expired or invalid")
        return AuthenticatedUser(id=user_id, email=email)


__all__ = [
    "AuthenticatedUser",
    "InvalidTokenError",
    "TokenService",
    "hash_password",
    "pwd_context",
    "verify_password",
]
