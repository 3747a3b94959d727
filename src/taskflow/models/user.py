"""User domain models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from .common import TimestampMixin, ensure_utc


def avatar_initials(name: str) -> str:
    """Upper-cased first letter of each word in ``name``."""
    return "".join(part[0] for part in name.split() if part).upper()


class UserBase(TimestampMixin):
    """Fields persisted for every user."""

    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=320)
    hashed_password: str
    tasks_completed: int = Field(default=0, ge=0)
    tasks_active: int = Field(default=0, ge=0)
    last_login: datetime | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("last_login", mode="after")
    @classmethod
    def _coerce_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class User(UserBase):
    """A stored user with its identifier."""

    id: str

    @property
    def avatar(self) -> str:
        return avatar_initials(self.name)


__all__ = ["User", "UserBase", "avatar_initials"]
