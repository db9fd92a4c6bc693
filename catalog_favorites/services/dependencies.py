"""FastAPI dependency wiring for the service layer.

Long-lived collaborators (settings, catalog client, token service, session
factory) are created once by :func:`catalog_favorites.main.create_app` and
stored on ``app.state``.  The factories below fetch them from the request and
build the per-request services around a fresh database session, keeping the
service modules free of web-layer concerns.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_favorites.db.connection import get_db
from catalog_favorites.db.repositories import (
    FavoriteRepository,
    ProductRepository,
    UserRepository,
)
from catalog_favorites.services.auth import (
    AuthenticatedUser,
    InvalidTokenError,
    TokenService,
)
from catalog_favorites.services.catalog_client import CatalogClient
from catalog_favorites.services.favorites_service import FavoritesService
from catalog_favorites.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False, description="JWT returned by /login")


def get_catalog_client(request: Request) -> CatalogClient:
    return request.app.state.catalog_client


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    """Verify the bearer token and return the caller's identity.

    Missing and invalid tokens are both reported as ``401`` so clients can
    treat them the same way (log in again).
    """

    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token is required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return tokens.verify(credentials.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_user_service(
    session: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    """Wire the user repository and token service together."""

    return UserService(users=UserRepository(session), tokens=tokens)


def get_favorites_service(
    session: AsyncSession = Depends(get_db),
    catalog: CatalogClient = Depends(get_catalog_client),
) -> FavoritesService:
    """FastAPI dependency that wires the orchestrator together."""

    return FavoritesService(
        catalog=catalog,
        favorites=FavoriteRepository(session),
        products=ProductRepository(session),
    )


__all__ = [
    "bearer_scheme",
    "get_catalog_client",
    "get_current_user",
    "get_favorites_service",
    "get_token_service",
    "get_user_service",
]
