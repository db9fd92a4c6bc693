"""Registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from catalog_favorites.schemas.error import ErrorResponse
from catalog_favorites.schemas.users import (
    LoginResponse,
    UserCreate,
    UserEnvelope,
    UserLogin,
    UserRead,
)
from catalog_favorites.services.dependencies import get_user_service
from catalog_favorites.services.user_service import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserService,
)

router = APIRouter()


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def register(
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Create an account. The password is stored hashed and never returned."""

    try:
        user = await service.register(
            name=payload.name, email=payload.email, password=payload.password
        )
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return UserEnvelope(message="User created successfully", user=UserRead.model_validate(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    payload: UserLogin,
    service: UserService = Depends(get_user_service),
) -> LoginResponse:
    """Exchange credentials for a bearer token."""

    try:
        token, user = await service.login(email=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    return LoginResponse(
        message="Logged in successfully",
        token=token,
        user=UserRead.model_validate(user),
    )
