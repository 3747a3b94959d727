"""Shared model mixins and utilities."""

from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_object_id() -> str:
    return str(ObjectId())


def is_object_id(value: object) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


class TimestampMixin(BaseModel):
    """Mixin that provides created/updated timestamps."""

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _coerce_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or utcnow()


__all__ = ["TimestampMixin", "ensure_utc", "is_object_id", "new_object_id", "utcnow"]
