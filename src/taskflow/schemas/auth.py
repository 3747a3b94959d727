"""Schemas describing authentication payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from ..models import ProfilePatch
from .envelope import ApiModel
from .user import UserPublic


class RegisterRequest(ApiModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {"name": "Alice Johnson", "email": "alice@example.com", "password": "secret123"}
        },
    )

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ProfileUpdateRequest(ProfilePatch):
    """Only ``name`` and ``email`` are read; any other key is ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChangePasswordRequest(ApiModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=6, max_length=128)


class AuthData(ApiModel):
    user: UserPublic
    token: str
    token_type: str = Field(default="bearer", frozen=True)
    expires_at: datetime


__all__ = [
    "AuthData",
    "ChangePasswordRequest",
    "LoginRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
]
