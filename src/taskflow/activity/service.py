from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TYPE_CHECKING

from .models import ActivityAction, ActivityEvent, ActivityEventBase

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..models import User
    from ..repositories.base import ActivityStore

logger = logging.getLogger(__name__)


def _ensure_tzaware(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def _serialise_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return _ensure_tzaware(value).isoformat()
    if isinstance(value, Mapping):
        return {str(key): _serialise_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialise_value(item) for item in value]
    return value


def _normalise_metadata(metadata: Mapping[str, Any] | None) -> dict[str, Any]:
    if not metadata:
        return {}
    return {str(key): _serialise_value(value) for key, value in metadata.items()}


class ActivityLogService:
    """Best-effort audit trail for changes to user records.

    Recording never raises: a store failure is logged and the caller carries
    on as if nothing happened.
    """

    def __init__(self, store: "ActivityStore", *, default_page_size: int = 25) -> None:
        self._store = store
        self._default_page_size = max(default_page_size, 1)

    async def record_event(
        self,
        *,
        action: ActivityAction,
        summary: str,
        actor_id: str | None = None,
        target_id: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        source: str | None = "api",
    ) -> ActivityEvent | None:
        try:
            event = ActivityEventBase(
                action=action,
                summary=summary,
                user_id=actor_id,
                target_id=target_id,
                metadata=_normalise_metadata(metadata),
                source=source,
            )
            return await self._store.add(event)
        except Exception:
            logger.warning(
                "Failed to record activity event",
                extra={"action": action.value, "target_id": target_id},
                exc_info=True,
            )
            return None

    async def record_login(self, user: "User") -> ActivityEvent | None:
        return await self.record_event(
            action=ActivityAction.LOGIN,
            summary=f"{user.name} signed in",
            actor_id=user.id,
            target_id=user.id,
        )

    async def record_registration(self, user: "User") -> ActivityEvent | None:
        return await self.record_event(
            action=ActivityAction.REGISTERED,
            summary=f"{user.name} created an account",
            actor_id=user.id,
            target_id=user.id,
        )

    async def record_user_change(
        self,
        *,
        action: ActivityAction,
        actor_id: str | None,
        user: "User",
        changes: Mapping[str, Any] | None = None,
    ) -> ActivityEvent | None:
        fields: Sequence[str] = tuple(sorted(changes.keys())) if changes else ()
        label = action.value.replace("_", " ")
        summary = f"{label.capitalize()} for {user.name}"
        if fields:
            summary = f"{summary} ({', '.join(fields)})"
        return await self.record_event(
            action=action,
            summary=summary,
            actor_id=actor_id,
            target_id=user.id,
            metadata={"changes": changes or {}},
        )

    async def list_for_user(self, user_id: str, *, limit: int | None = None) -> list[ActivityEvent]:
        page_size = self._default_page_size if limit is None else max(int(limit), 1)
        return await self._store.list_for_user(user_id, limit=page_size)


__all__ = ["ActivityLogService"]
