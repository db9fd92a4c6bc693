"""Endpoints for reading, updating and deleting the caller's profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from catalog_favorites.schemas.error import ErrorResponse
from catalog_favorites.schemas.users import (
    MessageResponse,
    UserEnvelope,
    UserRead,
    UserUpdate,
)
from catalog_favorites.services.auth import AuthenticatedUser
from catalog_favorites.services.dependencies import get_current_user, get_user_service
from catalog_favorites.services.user_service import (
    EmailAlreadyRegisteredError,
    UserNotFoundError,
    UserService,
)

router = APIRouter()


@router.get(
    "",
    response_model=UserRead,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    try:
        user = await service.get_profile(current_user.id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return UserRead.model_validate(user)


@router.put(
    "",
    response_model=UserEnvelope,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_profile(
    payload: UserUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Change the caller's name and/or email."""

    try:
        user = await service.update_profile(
            current_user.id, name=payload.name, email=payload.email
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return UserEnvelope(message="Profile updated successfully", user=UserRead.model_validate(user))


@router.delete(
    "",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Delete the caller's account together with their favorites."""

    try:
        await service.delete_profile(current_user.id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MessageResponse(message="Profile deleted successfully")
