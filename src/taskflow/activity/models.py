from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ..models.common import ensure_utc, utcnow


class ActivityAction(str, Enum):
    """Audit event types recorded against user records."""

    LOGIN = "login"
    REGISTERED = "registered"
    PROFILE_UPDATED = "profile_updated"
    PASSWORD_CHANGED = "password_changed"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    METRICS_REFRESHED = "metrics_refreshed"


_ACTION_LABELS = {
    ActivityAction.LOGIN: "Login",
    ActivityAction.REGISTERED: "Registered",
    ActivityAction.PROFILE_UPDATED: "Profile updated",
    ActivityAction.PASSWORD_CHANGED: "Password changed",
    ActivityAction.USER_UPDATED: "User updated",
    ActivityAction.USER_DELETED: "User deleted",
    ActivityAction.METRICS_REFRESHED: "Metrics refreshed",
}


class ActivityEventBase(BaseModel):
    """Fields persisted for each audit event."""

    model_config = ConfigDict(str_strip_whitespace=True)

    action: ActivityAction = Field(description="Identifier describing the event type.")
    summary: str = Field(max_length=240, description="Human readable summary of the event.")
    user_id: str | None = Field(default=None, description="Identifier of the acting user, if known.")
    target_type: str = Field(default="user", max_length=40, description="Kind of record the event concerns.")
    target_id: str | None = Field(default=None, description="Identifier of the record the event concerns.")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Structured metadata attached to the event.")
    source: str | None = Field(default=None, max_length=40, description="Origin of the event (api, system).")
    created_at: datetime = Field(default_factory=utcnow, description="When the event occurred.")

    @field_validator("summary", mode="before")
    @classmethod
    def _clean_summary(cls, value: object) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("summary must not be empty")
        return text[:240]

    @field_validator("source", mode="before")
    @classmethod
    def _clean_source(cls, value: object) -> str | None:
        if value is None:
            return None
        source = str(value).strip().lower()
        return source or None

    @field_validator("metadata", mode="before")
    @classmethod
    def _ensure_metadata(cls, value: object) -> dict[str, Any]:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(key): val for key, val in value.items()}
        return {}

    @field_validator("created_at", mode="after")
    @classmethod
    def _coerce_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]


class ActivityEvent(ActivityEventBase):
    """A stored audit event."""

    id: str

    @computed_field(return_type=str)
    def action_label(self) -> str:
        return _ACTION_LABELS.get(self.action, self.action.value.replace("_", " ").title())


__all__ = ["ActivityAction", "ActivityEvent", "ActivityEventBase"]
