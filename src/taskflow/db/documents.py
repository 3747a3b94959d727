"""Beanie documents backing the Mongo storage backend."""

from __future__ import annotations

from beanie import Document, PydanticObjectId
from pymongo import ASCENDING, DESCENDING, IndexModel

from ..activity.models import ActivityEvent, ActivityEventBase
from ..models import Project, ProjectBase, Task, TaskBase, User, UserBase

_ENTITY_EXCLUDE = {"id", "revision_id"}


class UserDocument(Document, UserBase):
    class Settings:
        name = "users"
        indexes = [
            IndexModel([("email", ASCENDING)], name="users_email_unique", unique=True),
            IndexModel([("created_at", DESCENDING)], name="users_created_at"),
        ]

    def to_entity(self) -> User:
        return User(id=str(self.id), **self.model_dump(exclude=_ENTITY_EXCLUDE))


class TaskDocument(Document, TaskBase):
    class Settings:
        name = "tasks"
        indexes = [
            IndexModel([("owner_id", ASCENDING), ("created_at", DESCENDING)], name="tasks_owner_created"),
            IndexModel([("owner_id", ASCENDING), ("due_date", ASCENDING)], name="tasks_owner_due"),
            IndexModel([("assignee_id", ASCENDING), ("completed", ASCENDING)], name="tasks_assignee_completed"),
        ]

    @classmethod
    def from_entity(cls, task: Task) -> "TaskDocument":
        return cls(id=PydanticObjectId(task.id), **task.model_dump(exclude={"id"}))

    def to_entity(self) -> Task:
        return Task(id=str(self.id), **self.model_dump(exclude=_ENTITY_EXCLUDE))


class ProjectDocument(Document, ProjectBase):
    class Settings:
        name = "projects"
        indexes = [
            IndexModel([("owner_id", ASCENDING), ("created_at", DESCENDING)], name="projects_owner_created"),
            IndexModel([("owner_id", ASCENDING), ("deadline", ASCENDING)], name="projects_owner_deadline"),
        ]

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectDocument":
        return cls(id=PydanticObjectId(project.id), **project.model_dump(exclude={"id"}))

    def to_entity(self) -> Project:
        return Project(id=str(self.id), **self.model_dump(exclude=_ENTITY_EXCLUDE))


class ActivityEventDocument(Document, ActivityEventBase):
    """Audit events; expiry is enforced by a TTL index on ``created_at``."""

    class Settings:
        name = "activity_events"

    def to_entity(self) -> ActivityEvent:
        return ActivityEvent(id=str(self.id), **self.model_dump(exclude=_ENTITY_EXCLUDE))


DOCUMENT_MODELS = [UserDocument, TaskDocument, ProjectDocument, ActivityEventDocument]

__all__ = [
    "DOCUMENT_MODELS",
    "ActivityEventDocument",
    "ProjectDocument",
    "TaskDocument",
    "UserDocument",
]
