"""User directory operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from ..activity import ActivityAction, ActivityEvent, ActivityLogService
from ..errors import DuplicateEmailError, NotFoundError, ValidationError
from ..models import User, UserPatch, utcnow
from ..repositories.base import UserFilters, UserStore
from .common import changed_fields, merge_changes
from .counters import TaskCounterSync

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
ACTIVE_WINDOW = timedelta(days=30)


@dataclass(slots=True)
class UserPage:
    users: list[User]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


@dataclass(slots=True)
class UserStatisticsResult:
    total_users: int
    active_users: int
    total_tasks_completed: int
    total_tasks_active: int
    average_tasks_completed: float


class UserService:
    """Global, non-owner-scoped access to user records."""

    def __init__(
        self,
        users: UserStore,
        activity: ActivityLogService,
        counters: TaskCounterSync,
    ) -> None:
        self._users = users
        self._activity = activity
        self._counters = counters

    async def list_users(
        self,
        filters: UserFilters | None = None,
        *,
        page: int = 1,
        limit: int = 10,
    ) -> UserPage:
        filters = filters or UserFilters()
        page = max(page, 1)
        limit = max(limit, 1)
        users = await self._users.list(filters, skip=(page - 1) * limit, limit=limit)
        total = await self._users.count(filters)
        return UserPage(users=users, total=total, page=page, limit=limit)

    async def search_users(self, query: str | None, *, limit: int = 10) -> list[User]:
        text = (query or "").strip()
        if len(text) < MIN_SEARCH_LENGTH:
            raise ValidationError("Search query must be at least 2 characters long.")
        return await self._users.search(text, limit=max(limit, 1))

    async def get_user(self, user_id: str) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    async def update_user(self, user_id: str, patch: UserPatch, *, actor_id: str | None) -> User:
        current = await self.get_user(user_id)
        changes = patch.changes()
        if "email" in changes:
            existing = await self._users.get_by_email(changes["email"])
            if existing is not None and existing.id != user_id:
                raise ValidationError("Email is already in use.")
        merged = merge_changes(current, changes, now=utcnow())
        try:
            user = await self._users.update(user_id, changed_fields(merged, changes))
        except DuplicateEmailError as exc:
            raise ValidationError("Email is already in use.") from exc
        if user is None:
            raise NotFoundError("User not found.")
        await self._activity.record_user_change(
            action=ActivityAction.USER_UPDATED,
            actor_id=actor_id,
            user=user,
            changes=changes,
        )
        return user

    async def delete_user(self, user_id: str, *, actor_id: str | None) -> None:
        user = await self.get_user(user_id)
        if not await self._users.delete(user_id):
            raise NotFoundError("User not found.")
        logger.info("User deleted", extra={"target_user_id": user_id})
        await self._activity.record_user_change(
            action=ActivityAction.USER_DELETED,
            actor_id=actor_id,
            user=user,
        )

    async def get_statistics(self) -> UserStatisticsResult:
        counts = await self._users.statistics(active_since=utcnow() - ACTIVE_WINDOW)
        return UserStatisticsResult(
            total_users=int(counts["total_users"]),
            active_users=int(counts["active_users"]),
            total_tasks_completed=int(counts["total_tasks_completed"]),
            total_tasks_active=int(counts["total_tasks_active"]),
            average_tasks_completed=round(float(counts["average_tasks_completed"]), 2),
        )

    async def refresh_metrics(self, user_id: str, *, actor_id: str | None) -> User:
        """Recompute the user's task counters from their assigned tasks."""
        await self.get_user(user_id)
        user = await self._counters.recompute(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        await self._activity.record_user_change(
            action=ActivityAction.METRICS_REFRESHED,
            actor_id=actor_id,
            user=user,
            changes={"tasks_completed": user.tasks_completed, "tasks_active": user.tasks_active},
        )
        return user

    async def recent_activity(self, user_id: str, *, limit: int | None = None) -> list[ActivityEvent]:
        await self.get_user(user_id)
        return await self._activity.list_for_user(user_id, limit=limit)


__all__ = ["UserPage", "UserService", "UserStatisticsResult"]
