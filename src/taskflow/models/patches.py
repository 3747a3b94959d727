"""Typed drafts and patches accepted by the services.

Each patch lists exactly the fields a caller may change. Unknown keys are
dropped, and a field left unset is left untouched.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .enums import (
    ProjectCategory,
    ProjectPriority,
    ProjectStatus,
    TaskCategory,
    TaskPriority,
)


class _Patch(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    # Fields that may be cleared by sending null.
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        """Explicitly provided fields, minus nulls for non-nullable fields."""
        provided = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in provided.items()
            if value is not None or key in self.nullable_fields
        }


class TaskDraft(_Patch):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    due_date: datetime | None = None
    assignee_id: str | None = None
    project_id: str | None = None
    starred: bool | None = None

    def missing_fields(self) -> list[str]:
        required = {"title": self.title, "due_date": self.due_date, "assignee_id": self.assignee_id}
        return [name for name, value in required.items() if value is None or value == ""]


class TaskPatch(_Patch):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    due_date: datetime | None = None
    assignee_id: str | None = Field(default=None, min_length=1)
    completed: bool | None = None
    starred: bool | None = None


class ProjectDraft(_Patch):
    name: str | None = Field(default=None, max_length=150)
    description: str | None = Field(default=None, max_length=1000)
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    category: ProjectCategory | None = None
    budget: str | None = Field(default=None, max_length=100)
    start_date: datetime | None = None
    deadline: datetime | None = None
    team: list[str] = Field(default_factory=list)
    project_manager: str | None = Field(default=None, max_length=100)
    client: str | None = Field(default=None, max_length=150)

    def missing_fields(self) -> list[str]:
        required = {
            "name": self.name,
            "description": self.description,
            "deadline": self.deadline,
            "project_manager": self.project_manager,
        }
        return [name for name, value in required.items() if value is None or value == ""]


class ProjectPatch(_Patch):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"budget", "client"})

    name: str | None = Field(default=None, min_length=1, max_length=150)
    description: str | None = Field(default=None, min_length=1, max_length=1000)
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    category: ProjectCategory | None = None
    budget: str | None = Field(default=None, max_length=100)
    start_date: datetime | None = None
    deadline: datetime | None = None
    team: list[str] | None = None
    project_manager: str | None = Field(default=None, min_length=1, max_length=100)
    client: str | None = Field(default=None, max_length=150)


class ProfilePatch(_Patch):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None


class UserPatch(ProfilePatch):
    """Directory edits are limited to the same fields as a profile edit."""


__all__ = [
    "ProfilePatch",
    "ProjectDraft",
    "ProjectPatch",
    "TaskDraft",
    "TaskPatch",
    "UserPatch",
]
