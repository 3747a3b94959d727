"""Service layer encapsulating task-related operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from ..core.events import EventPublisher, TaskMutated, TaskMutation
from ..errors import NotFoundError, ValidationError
from ..models import Task, TaskBase, TaskDraft, TaskPatch, utcnow
from ..repositories.base import ProjectStore, TaskFilters, TaskStore
from .common import build_model, merge_changes, require_fields

logger = logging.getLogger(__name__)

DEFAULT_UPCOMING_DAYS = 7


@dataclass(slots=True)
class TaskStatisticsResult:
    """Aggregate counts over one owner's tasks."""

    total: int
    completed: int
    pending: int
    starred: int
    overdue: int


@dataclass(slots=True)
class PriorityBreakdown:
    priority: str
    count: int
    completed: int


class TaskService:
    """Owner-scoped task operations.

    Every lookup filters on both the task id and the owner id, so a task that
    belongs to someone else is indistinguishable from one that does not exist.
    Writes that can move per-user task counters publish ``TaskMutated``.
    A task may only link to a project of the same owner.
    """

    def __init__(self, tasks: TaskStore, events: EventPublisher, projects: ProjectStore) -> None:
        self._tasks = tasks
        self._events = events
        self._projects = projects

    async def _publish(self, kind: TaskMutation, task: Task, *extra_user_ids: str) -> None:
        affected = tuple(dict.fromkeys((task.owner_id, task.assignee_id, *extra_user_ids)))
        await self._events.publish(
            TaskMutated(task_id=task.id, owner_id=task.owner_id, kind=kind, affected_user_ids=affected)
        )

    async def list_tasks(self, owner_id: str, filters: TaskFilters | None = None) -> list[Task]:
        """Return the owner's tasks, newest first, capped at ``filters.limit``."""
        return await self._tasks.list_for_owner(owner_id, filters or TaskFilters())

    async def get_task(self, task_id: str, owner_id: str) -> Task:
        task = await self._tasks.get_for_owner(task_id, owner_id)
        if task is None:
            raise NotFoundError("Task not found.")
        return task

    async def create_task(self, owner_id: str, draft: TaskDraft) -> Task:
        require_fields(draft.missing_fields(), "Title, due date, and assignee are required.")
        if draft.project_id and await self._projects.get_for_owner(draft.project_id, owner_id) is None:
            raise ValidationError("Project not found.", details={"project_id": draft.project_id})
        now = utcnow()
        base = build_model(
            TaskBase,
            {**draft.changes(), "owner_id": owner_id, "created_at": now, "updated_at": now},
        )
        task = await self._tasks.add(base)
        logger.info("Task created", extra={"task_id": task.id})
        await self._publish(TaskMutation.CREATED, task)
        return task

    async def update_task(self, task_id: str, owner_id: str, patch: TaskPatch) -> Task:
        """Apply ``patch``; a provided ``completed`` flag goes through the lockstep rule."""
        current = await self.get_task(task_id, owner_id)
        changes = patch.changes()
        completed = changes.pop("completed", None)
        now = utcnow()

        task = merge_changes(current, changes, now=now)
        if completed is not None:
            task.mark_completed(completed, now=now)
        task = await self._tasks.save(task)

        reassigned = task.assignee_id != current.assignee_id
        if completed is not None or reassigned:
            await self._publish(TaskMutation.UPDATED, task, current.assignee_id)
        return task

    async def toggle_completion(self, task_id: str, owner_id: str) -> Task:
        task = await self.get_task(task_id, owner_id)
        now = utcnow()
        task.mark_completed(not task.completed, now=now)
        task.touch(now)
        task = await self._tasks.save(task)
        await self._publish(TaskMutation.TOGGLED, task)
        return task

    async def toggle_star(self, task_id: str, owner_id: str) -> Task:
        task = await self.get_task(task_id, owner_id)
        task.starred = not task.starred
        task.touch()
        return await self._tasks.save(task)

    async def delete_task(self, task_id: str, owner_id: str) -> None:
        task = await self.get_task(task_id, owner_id)
        if not await self._tasks.delete_for_owner(task_id, owner_id):
            raise NotFoundError("Task not found.")
        logger.info("Task deleted", extra={"task_id": task_id})
        await self._publish(TaskMutation.DELETED, task)

    async def get_statistics(self, owner_id: str) -> TaskStatisticsResult:
        counts = await self._tasks.statistics(owner_id, now=utcnow())
        return TaskStatisticsResult(**counts)

    async def get_priority_breakdown(self, owner_id: str) -> list[PriorityBreakdown]:
        rows = await self._tasks.priority_breakdown(owner_id)
        return [PriorityBreakdown(**row) for row in rows]

    async def list_upcoming(self, owner_id: str, days: int = DEFAULT_UPCOMING_DAYS) -> list[Task]:
        """Open tasks due between now and ``days`` from now, soonest first."""
        now = utcnow()
        return await self._tasks.due_between(owner_id, start=now, end=now + timedelta(days=days))


__all__ = ["PriorityBreakdown", "TaskService", "TaskStatisticsResult"]
