"""Process-local stores used when ``storage_backend`` is ``memory``.

They mirror the Mongo stores query for query: the test suite runs against
them, and they let the API run locally without a database. Records are copied
on the way in and out so callers never share state with the store.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel

from ..activity.models import ActivityEvent, ActivityEventBase
from ..errors import DuplicateEmailError
from ..models import (
    Project,
    ProjectBase,
    ProjectStatus,
    Task,
    TaskBase,
    TaskPriority,
    User,
    UserBase,
    is_object_id,
    new_object_id,
)
from . import queries
from .base import ProjectFilters, Repositories, TaskFilters, UserFilters

RecordT = TypeVar("RecordT", bound=BaseModel)


def _matcher(text: str | None) -> re.Pattern[str] | None:
    if text is None or not text.strip():
        return None
    return re.compile(re.escape(text.strip()), re.IGNORECASE)


def _matches_any(pattern: re.Pattern[str] | None, values: Iterable[str | None]) -> bool:
    if pattern is None:
        return True
    return any(value is not None and pattern.search(value) for value in values)


def _newest_first(records: Iterable[RecordT]) -> list[RecordT]:
    # Reverse insertion order first so equal timestamps still list newest first.
    return sorted(reversed(list(records)), key=lambda record: record.created_at, reverse=True)


def _copy(record: RecordT) -> RecordT:
    return record.model_copy(deep=True)


class InMemoryUserStore:
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def _email_taken(self, email: str, *, exclude_id: str | None = None) -> bool:
        return any(
            user.email == email and user.id != exclude_id for user in self._users.values()
        )

    async def add(self, user: UserBase) -> User:
        if self._email_taken(user.email):
            raise DuplicateEmailError()
        stored = User(id=new_object_id(), **user.model_dump())
        self._users[stored.id] = stored
        return _copy(stored)

    async def get(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return _copy(user) if user else None

    async def get_by_email(self, email: str) -> User | None:
        normalised = email.strip().lower()
        for user in self._users.values():
            if user.email == normalised:
                return _copy(user)
        return None

    async def update(self, user_id: str, fields: Mapping[str, Any]) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        if "email" in fields and self._email_taken(fields["email"], exclude_id=user_id):
            raise DuplicateEmailError("Email is already in use.")
        for name, value in fields.items():
            setattr(user, name, value)
        return _copy(user)

    async def update_counters(
        self, user_id: str, *, completed: int, active: int, at: datetime
    ) -> User | None:
        return await self.update(
            user_id, {"tasks_completed": completed, "tasks_active": active, "updated_at": at}
        )

    async def touch_login(self, user_id: str, at: datetime) -> User | None:
        return await self.update(user_id, {"last_login": at, "updated_at": at})

    async def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def _filtered(self, filters: UserFilters) -> list[User]:
        pattern = _matcher(filters.search)
        return [user for user in self._users.values() if _matches_any(pattern, (user.name, user.email))]

    async def list(self, filters: UserFilters, *, skip: int, limit: int) -> list[User]:
        ordered = _newest_first(self._filtered(filters))
        return [_copy(user) for user in ordered[skip : skip + limit]]

    async def count(self, filters: UserFilters) -> int:
        return len(self._filtered(filters))

    async def search(self, query: str, *, limit: int) -> list[User]:
        matches = sorted(self._filtered(UserFilters(search=query)), key=lambda user: user.name)
        return [_copy(user) for user in matches[:limit]]

    async def statistics(self, *, active_since: datetime) -> dict[str, Any]:
        users = list(self._users.values())
        if not users:
            return queries.first_group([], queries.USER_STATISTIC_KEYS)
        completed = sum(user.tasks_completed for user in users)
        return {
            "total_users": len(users),
            "active_users": sum(
                1 for user in users if user.last_login is not None and user.last_login >= active_since
            ),
            "total_tasks_completed": completed,
            "total_tasks_active": sum(user.tasks_active for user in users),
            "average_tasks_completed": completed / len(users),
        }


class InMemoryTaskStore:
    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def _owned(self, owner_id: str) -> list[Task]:
        return [task for task in self._tasks.values() if task.owner_id == owner_id]

    async def add(self, task: TaskBase) -> Task:
        stored = Task(id=new_object_id(), **task.model_dump())
        self._tasks[stored.id] = stored
        return _copy(stored)

    async def get_for_owner(self, task_id: str, owner_id: str) -> Task | None:
        if not is_object_id(task_id):
            return None
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return None
        return _copy(task)

    async def list_for_owner(self, owner_id: str, filters: TaskFilters) -> list[Task]:
        pattern = _matcher(filters.search)
        selected = [
            task
            for task in self._owned(owner_id)
            if (filters.completed is None or task.completed == filters.completed)
            and (filters.priority is None or task.priority == filters.priority)
            and (filters.category is None or task.category == filters.category)
            and (filters.starred is None or task.starred == filters.starred)
            and _matches_any(pattern, (task.title, task.description, task.assignee_id))
        ]
        return [_copy(task) for task in _newest_first(selected)[: filters.limit]]

    async def save(self, task: Task) -> Task:
        self._tasks[task.id] = _copy(task)
        return _copy(task)

    async def delete_for_owner(self, task_id: str, owner_id: str) -> bool:
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return False
        del self._tasks[task_id]
        return True

    async def statistics(self, owner_id: str, *, now: datetime) -> dict[str, int]:
        tasks = self._owned(owner_id)
        completed = sum(1 for task in tasks if task.completed)
        return {
            "total": len(tasks),
            "completed": completed,
            "pending": len(tasks) - completed,
            "starred": sum(1 for task in tasks if task.starred),
            "overdue": sum(1 for task in tasks if task.is_overdue_at(now)),
        }

    async def priority_breakdown(self, owner_id: str) -> list[dict[str, Any]]:
        rows: dict[str, dict[str, Any]] = {}
        for task in self._owned(owner_id):
            priority = TaskPriority(task.priority).value
            row = rows.setdefault(priority, {"priority": priority, "count": 0, "completed": 0})
            row["count"] += 1
            if task.completed:
                row["completed"] += 1
        return [rows[key] for key in sorted(rows)]

    async def due_between(self, owner_id: str, *, start: datetime, end: datetime) -> list[Task]:
        selected = [
            task
            for task in self._owned(owner_id)
            if not task.completed and start <= task.due_date <= end
        ]
        return [_copy(task) for task in sorted(selected, key=lambda task: task.due_date)]

    async def count_for_assignee(self, assignee_id: str, *, completed: bool) -> int:
        return sum(
            1
            for task in self._tasks.values()
            if task.assignee_id == assignee_id and task.completed == completed
        )


class InMemoryProjectStore:
    def __init__(self) -> None:
        self._projects: dict[str, Project] = {}

    def _owned(self, owner_id: str) -> list[Project]:
        return [project for project in self._projects.values() if project.owner_id == owner_id]

    async def add(self, project: ProjectBase) -> Project:
        stored = Project(id=new_object_id(), **project.model_dump())
        self._projects[stored.id] = stored
        return _copy(stored)

    async def get_for_owner(self, project_id: str, owner_id: str) -> Project | None:
        if not is_object_id(project_id):
            return None
        project = self._projects.get(project_id)
        if project is None or project.owner_id != owner_id:
            return None
        return _copy(project)

    async def list_for_owner(self, owner_id: str, filters: ProjectFilters) -> list[Project]:
        pattern = _matcher(filters.search)
        selected = [
            project
            for project in self._owned(owner_id)
            if (filters.status is None or project.status == filters.status)
            and (filters.priority is None or project.priority == filters.priority)
            and (filters.category is None or project.category == filters.category)
            and _matches_any(
                pattern,
                (project.name, project.description, project.category.value, project.project_manager),
            )
        ]
        return [_copy(project) for project in _newest_first(selected)[: filters.limit]]

    async def save(self, project: Project) -> Project:
        self._projects[project.id] = _copy(project)
        return _copy(project)

    async def delete_for_owner(self, project_id: str, owner_id: str) -> bool:
        project = self._projects.get(project_id)
        if project is None or project.owner_id != owner_id:
            return False
        del self._projects[project_id]
        return True

    async def statistics(self, owner_id: str, *, now: datetime) -> dict[str, int]:
        projects = self._owned(owner_id)
        return {
            "total": len(projects),
            "active": sum(1 for project in projects if project.status is ProjectStatus.ACTIVE),
            "completed": sum(1 for project in projects if project.status is ProjectStatus.COMPLETED),
            "planning": sum(1 for project in projects if project.status is ProjectStatus.PLANNING),
            "overdue": sum(1 for project in projects if project.is_overdue_at(now)),
        }

    async def status_breakdown(self, owner_id: str) -> list[dict[str, Any]]:
        counts: dict[str, int] = {}
        for project in self._owned(owner_id):
            key = ProjectStatus(project.status).value
            counts[key] = counts.get(key, 0) + 1
        return [{"status": key, "count": counts[key]} for key in sorted(counts)]

    async def deadlines_between(self, owner_id: str, *, start: datetime, end: datetime) -> list[Project]:
        selected = [
            project
            for project in self._owned(owner_id)
            if project.status is not ProjectStatus.COMPLETED and start <= project.deadline <= end
        ]
        return [_copy(project) for project in sorted(selected, key=lambda project: project.deadline)]


class InMemoryActivityStore:
    def __init__(self) -> None:
        self._events: list[ActivityEvent] = []

    async def add(self, event: ActivityEventBase) -> ActivityEvent:
        stored = ActivityEvent(id=new_object_id(), **event.model_dump())
        self._events.append(stored)
        return _copy(stored)

    async def list_for_user(self, user_id: str, *, limit: int) -> list[ActivityEvent]:
        selected = [
            event for event in self._events if user_id in (event.user_id, event.target_id)
        ]
        return [_copy(event) for event in _newest_first(selected)[:limit]]


def build_memory_repositories() -> Repositories:
    return Repositories(
        users=InMemoryUserStore(),
        tasks=InMemoryTaskStore(),
        projects=InMemoryProjectStore(),
        activity=InMemoryActivityStore(),
    )


__all__ = [
    "InMemoryActivityStore",
    "InMemoryProjectStore",
    "InMemoryTaskStore",
    "InMemoryUserStore",
    "build_memory_repositories",
]
