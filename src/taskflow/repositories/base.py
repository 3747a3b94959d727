"""Storage contracts shared by the Mongo and in-memory backends."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Protocol

from ..activity.models import ActivityEvent, ActivityEventBase
from ..models import (
    Project,
    ProjectBase,
    ProjectCategory,
    ProjectPriority,
    ProjectStatus,
    Task,
    TaskBase,
    TaskCategory,
    TaskPriority,
    User,
    UserBase,
)

DEFAULT_LIST_LIMIT = 100


@dataclass(slots=True)
class TaskFilters:
    completed: bool | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    starred: bool | None = None
    search: str | None = None
    limit: int = DEFAULT_LIST_LIMIT


@dataclass(slots=True)
class ProjectFilters:
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    category: ProjectCategory | None = None
    search: str | None = None
    limit: int = DEFAULT_LIST_LIMIT


@dataclass(slots=True)
class UserFilters:
    search: str | None = None


class UserStore(Protocol):
    """Credential store and user directory.

    Writes after ``add`` set only the fields they name. ``add`` and ``update``
    raise ``DuplicateEmailError`` when the email is taken by another user;
    the update methods return ``None`` for an unknown id.
    """

    async def add(self, user: UserBase) -> User: ...

    async def get(self, user_id: str) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def update(self, user_id: str, fields: Mapping[str, Any]) -> User | None: ...

    async def update_counters(
        self, user_id: str, *, completed: int, active: int, at: datetime
    ) -> User | None: ...

    async def touch_login(self, user_id: str, at: datetime) -> User | None: ...

    async def delete(self, user_id: str) -> bool: ...

    async def list(self, filters: UserFilters, *, skip: int, limit: int) -> list[User]: ...

    async def count(self, filters: UserFilters) -> int: ...

    async def search(self, query: str, *, limit: int) -> list[User]: ...

    async def statistics(self, *, active_since: datetime) -> dict[str, Any]: ...


class TaskStore(Protocol):
    """Task persistence. Every read and write is scoped by owner id."""

    async def add(self, task: TaskBase) -> Task: ...

    async def get_for_owner(self, task_id: str, owner_id: str) -> Task | None: ...

    async def list_for_owner(self, owner_id: str, filters: TaskFilters) -> list[Task]: ...

    async def save(self, task: Task) -> Task: ...

    async def delete_for_owner(self, task_id: str, owner_id: str) -> bool: ...

    async def statistics(self, owner_id: str, *, now: datetime) -> dict[str, int]: ...

    async def priority_breakdown(self, owner_id: str) -> list[dict[str, Any]]: ...

    async def due_between(self, owner_id: str, *, start: datetime, end: datetime) -> list[Task]: ...

    async def count_for_assignee(self, assignee_id: str, *, completed: bool) -> int: ...


class ProjectStore(Protocol):
    """Project persistence. Every read and write is scoped by owner id."""

    async def add(self, project: ProjectBase) -> Project: ...

    async def get_for_owner(self, project_id: str, owner_id: str) -> Project | None: ...

    async def list_for_owner(self, owner_id: str, filters: ProjectFilters) -> list[Project]: ...

    async def save(self, project: Project) -> Project: ...

    async def delete_for_owner(self, project_id: str, owner_id: str) -> bool: ...

    async def statistics(self, owner_id: str, *, now: datetime) -> dict[str, int]: ...

    async def status_breakdown(self, owner_id: str) -> list[dict[str, Any]]: ...

    async def deadlines_between(self, owner_id: str, *, start: datetime, end: datetime) -> list[Project]: ...


class ActivityStore(Protocol):
    async def add(self, event: ActivityEventBase) -> ActivityEvent: ...

    async def list_for_user(self, user_id: str, *, limit: int) -> list[ActivityEvent]: ...


@dataclass(slots=True)
class Repositories:
    """The set of stores the services run against."""

    users: UserStore
    tasks: TaskStore
    projects: ProjectStore
    activity: ActivityStore


__all__ = [
    "DEFAULT_LIST_LIMIT",
    "ActivityStore",
    "ProjectFilters",
    "ProjectStore",
    "Repositories",
    "TaskFilters",
    "TaskStore",
    "UserFilters",
    "UserStore",
]
