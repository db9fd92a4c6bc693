"""Request and response models for registration, login and profile management."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Partial profile update; at least one field must be supplied."""

    name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None

    @model_validator(mode="after")
    def _require_one_field(self) -> "UserUpdate":
        if self.name is None and self.email is None:
            raise ValueError("Provide at least one of 'name' or 'email'")
        return self


class UserRead(BaseModel):
    """Public view of a user. The password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class UserEnvelope(BaseModel):
    message: str
    user: UserRead


class LoginResponse(BaseModel):
    message: str
    token: str = Field(..., description="Bearer token valid for the configured lifetime.")
    user: UserRead


class MessageResponse(BaseModel):
    message: str
