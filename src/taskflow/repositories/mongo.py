"""Beanie-backed stores used when ``storage_backend`` is ``mongo``."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from beanie import PydanticObjectId
from beanie.operators import Set
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from ..activity.models import ActivityEvent, ActivityEventBase
from ..db.documents import ActivityEventDocument, ProjectDocument, TaskDocument, UserDocument
from ..errors import DuplicateEmailError
from ..models import Project, ProjectBase, Task, TaskBase, User, UserBase
from . import queries
from .base import ProjectFilters, Repositories, TaskFilters, UserFilters


def _object_id(value: str) -> PydanticObjectId | None:
    if not ObjectId.is_valid(value):
        return None
    return PydanticObjectId(value)


class MongoUserStore:
    async def add(self, user: UserBase) -> User:
        document = UserDocument(**user.model_dump())
        try:
            await document.insert()
        except DuplicateKeyError as exc:
            raise DuplicateEmailError() from exc
        return document.to_entity()

    async def get(self, user_id: str) -> User | None:
        object_id = _object_id(user_id)
        if object_id is None:
            return None
        document = await UserDocument.get(object_id)
        return document.to_entity() if document else None

    async def get_by_email(self, email: str) -> User | None:
        document = await UserDocument.find_one({"email": email.strip().lower()})
        return document.to_entity() if document else None

    async def update(self, user_id: str, fields: Mapping[str, Any]) -> User | None:
        object_id = _object_id(user_id)
        if object_id is None:
            return None
        if fields:
            try:
                await UserDocument.find_one({"_id": object_id}).update(Set(dict(fields)))
            except DuplicateKeyError as exc:
                raise DuplicateEmailError("Email is already in use.") from exc
        return await self.get(user_id)

    async def update_counters(
        self, user_id: str, *, completed: int, active: int, at: datetime
    ) -> User | None:
        return await self.update(
            user_id, {"tasks_completed": completed, "tasks_active": active, "updated_at": at}
        )

    async def touch_login(self, user_id: str, at: datetime) -> User | None:
        return await self.update(user_id, {"last_login": at, "updated_at": at})

    async def delete(self, user_id: str) -> bool:
        object_id = _object_id(user_id)
        if object_id is None:
            return False
        result = await UserDocument.get_pymongo_collection().delete_one({"_id": object_id})
        return result.deleted_count == 1

    async def list(self, filters: UserFilters, *, skip: int, limit: int) -> list[User]:
        documents = (
            await UserDocument.find(queries.user_list_filter(filters))
            .sort("-created_at")
            .skip(skip)
            .limit(limit)
            .to_list()
        )
        return [document.to_entity() for document in documents]

    async def count(self, filters: UserFilters) -> int:
        return await UserDocument.find(queries.user_list_filter(filters)).count()

    async def search(self, query: str, *, limit: int) -> list[User]:
        documents = (
            await UserDocument.find(queries.user_list_filter(UserFilters(search=query)))
            .sort("name")
            .limit(limit)
            .to_list()
        )
        return [document.to_entity() for document in documents]

    async def statistics(self, *, active_since: datetime) -> dict[str, Any]:
        rows = await UserDocument.aggregate(queries.user_statistics_pipeline(active_since)).to_list()
        return queries.first_group(rows, queries.USER_STATISTIC_KEYS)


class MongoTaskStore:
    async def add(self, task: TaskBase) -> Task:
        document = TaskDocument(**task.model_dump())
        await document.insert()
        return document.to_entity()

    async def get_for_owner(self, task_id: str, owner_id: str) -> Task | None:
        scope = queries.owner_scope(task_id, owner_id)
        if scope is None:
            return None
        document = await TaskDocument.find_one(scope)
        return document.to_entity() if document else None

    async def list_for_owner(self, owner_id: str, filters: TaskFilters) -> list[Task]:
        documents = (
            await TaskDocument.find(queries.task_list_filter(owner_id, filters))
            .sort("-created_at")
            .limit(filters.limit)
            .to_list()
        )
        return [document.to_entity() for document in documents]

    async def save(self, task: Task) -> Task:
        document = TaskDocument.from_entity(task)
        await document.save()
        return document.to_entity()

    async def delete_for_owner(self, task_id: str, owner_id: str) -> bool:
        scope = queries.owner_scope(task_id, owner_id)
        if scope is None:
            return False
        result = await TaskDocument.get_pymongo_collection().delete_one(scope)
        return result.deleted_count == 1

    async def statistics(self, owner_id: str, *, now: datetime) -> dict[str, int]:
        rows = await TaskDocument.aggregate(queries.task_statistics_pipeline(owner_id, now)).to_list()
        return queries.first_group(rows, queries.TASK_STATISTIC_KEYS)

    async def priority_breakdown(self, owner_id: str) -> list[dict[str, Any]]:
        rows = await TaskDocument.aggregate(queries.task_priority_pipeline(owner_id)).to_list()
        return queries.group_rows(rows, "priority")

    async def due_between(self, owner_id: str, *, start: datetime, end: datetime) -> list[Task]:
        documents = (
            await TaskDocument.find(queries.task_due_filter(owner_id, start, end))
            .sort("due_date")
            .to_list()
        )
        return [document.to_entity() for document in documents]

    async def count_for_assignee(self, assignee_id: str, *, completed: bool) -> int:
        return await TaskDocument.find({"assignee_id": assignee_id, "completed": completed}).count()


class MongoProjectStore:
    async def add(self, project: ProjectBase) -> Project:
        document = ProjectDocument(**project.model_dump())
        await document.insert()
        return document.to_entity()

    async def get_for_owner(self, project_id: str, owner_id: str) -> Project | None:
        scope = queries.owner_scope(project_id, owner_id)
        if scope is None:
            return None
        document = await ProjectDocument.find_one(scope)
        return document.to_entity() if document else None

    async def list_for_owner(self, owner_id: str, filters: ProjectFilters) -> list[Project]:
        documents = (
            await ProjectDocument.find(queries.project_list_filter(owner_id, filters))
            .sort("-created_at")
            .limit(filters.limit)
            .to_list()
        )
        return [document.to_entity() for document in documents]

    async def save(self, project: Project) -> Project:
        document = ProjectDocument.from_entity(project)
        await document.save()
        return document.to_entity()

    async def delete_for_owner(self, project_id: str, owner_id: str) -> bool:
        scope = queries.owner_scope(project_id, owner_id)
        if scope is None:
            return False
        result = await ProjectDocument.get_pymongo_collection().delete_one(scope)
        return result.deleted_count == 1

    async def statistics(self, owner_id: str, *, now: datetime) -> dict[str, int]:
        rows = await ProjectDocument.aggregate(queries.project_statistics_pipeline(owner_id, now)).to_list()
        return queries.first_group(rows, queries.PROJECT_STATISTIC_KEYS)

    async def status_breakdown(self, owner_id: str) -> list[dict[str, Any]]:
        rows = await ProjectDocument.aggregate(queries.project_status_pipeline(owner_id)).to_list()
        return queries.group_rows(rows, "status")

    async def deadlines_between(self, owner_id: str, *, start: datetime, end: datetime) -> list[Project]:
        documents = (
            await ProjectDocument.find(queries.project_deadline_filter(owner_id, start, end))
            .sort("deadline")
            .to_list()
        )
        return [document.to_entity() for document in documents]


class MongoActivityStore:
    async def add(self, event: ActivityEventBase) -> ActivityEvent:
        document = ActivityEventDocument(**event.model_dump())
        await document.insert()
        return document.to_entity()

    async def list_for_user(self, user_id: str, *, limit: int) -> list[ActivityEvent]:
        documents = (
            await ActivityEventDocument.find({"$or": [{"user_id": user_id}, {"target_id": user_id}]})
            .sort("-created_at")
            .limit(limit)
            .to_list()
        )
        return [document.to_entity() for document in documents]


def build_mongo_repositories() -> Repositories:
    return Repositories(
        users=MongoUserStore(),
        tasks=MongoTaskStore(),
        projects=MongoProjectStore(),
        activity=MongoActivityStore(),
    )


__all__ = [
    "MongoActivityStore",
    "MongoProjectStore",
    "MongoTaskStore",
    "MongoUserStore",
    "build_mongo_repositories",
]
