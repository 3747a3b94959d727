"""Keep users' denormalised task counters in line with their tasks."""

from __future__ import annotations

import logging

from ..core.events import EventBus, TaskMutated
from ..models import User, utcnow
from ..repositories.base import TaskStore, UserStore

logger = logging.getLogger(__name__)


class TaskCounterSync:
    """Recompute ``tasks_completed`` and ``tasks_active`` for affected users.

    Counts are by assignee: completed tasks assigned to the user, and open
    tasks assigned to the user. Runs after the task write has been committed
    and is not transactional with it; the next mutation reconciles any drift.
    """

    def __init__(self, users: UserStore, tasks: TaskStore) -> None:
        self._users = users
        self._tasks = tasks

    def register(self, bus: EventBus) -> None:
        bus.subscribe(TaskMutated, self.handle)

    async def handle(self, event: TaskMutated) -> None:
        for user_id in dict.fromkeys(event.affected_user_ids):
            try:
                await self.recompute(user_id)
            except Exception:
                logger.exception(
                    "Task counter sync failed",
                    extra={"target_user_id": user_id, "task_id": event.task_id, "mutation": event.kind.value},
                )

    async def recompute(self, user_id: str) -> User | None:
        user = await self._users.get(user_id)
        if user is None:
            logger.warning("Skipping counter sync for unknown user", extra={"target_user_id": user_id})
            return None
        completed = await self._tasks.count_for_assignee(user_id, completed=True)
        active = await self._tasks.count_for_assignee(user_id, completed=False)
        if (user.tasks_completed, user.tasks_active) == (completed, active):
            return user
        saved = await self._users.update_counters(user_id, completed=completed, active=active, at=utcnow())
        logger.debug(
            "Task counters updated",
            extra={"target_user_id": user_id, "tasks_completed": completed, "tasks_active": active},
        )
        return saved


__all__ = ["TaskCounterSync"]
