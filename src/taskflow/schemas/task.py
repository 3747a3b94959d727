"""Task-related schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import TaskCategory, TaskDraft, TaskPatch, TaskPriority, TaskStatus
from .envelope import ApiModel

_ASSIGNEE_ALIASES = AliasChoices("assigneeId", "assignee_id", "assignee")

TASK_READ_EXAMPLE = {
    "id": "665f1d4a8b3e4a0012345679",
    "title": "Draft release notes",
    "description": "Outline the public API.",
    "completed": False,
    "starred": False,
    "priority": TaskPriority.MEDIUM.value,
    "category": TaskCategory.DEVELOPMENT.value,
    "dueDate": "2024-06-05T17:00:00Z",
    "assigneeId": "665f1c2e8b3e4a0012345678",
    "projectId": None,
    "ownerId": "665f1c2e8b3e4a0012345678",
    "status": TaskStatus.TODO.value,
    "completedAt": None,
    "isOverdue": False,
    "createdAt": "2024-06-04T09:30:00Z",
    "updatedAt": "2024-06-04T09:30:00Z",
}


class TaskCreateRequest(TaskDraft):
    """Payload for creating a task. ``assignee`` is accepted for ``assigneeId``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Draft release notes",
                "dueDate": "2024-06-05T17:00:00Z",
                "assigneeId": "665f1c2e8b3e4a0012345678",
                "priority": TaskPriority.HIGH.value,
            }
        },
    )

    assignee_id: str | None = Field(default=None, validation_alias=_ASSIGNEE_ALIASES)


class TaskUpdateRequest(TaskPatch):
    """Partial update; fields outside the patch are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    assignee_id: str | None = Field(default=None, min_length=1, validation_alias=_ASSIGNEE_ALIASES)


class TaskRead(ApiModel):
    model_config = ConfigDict(json_schema_extra={"example": TASK_READ_EXAMPLE})

    id: str
    title: str
    description: str
    completed: bool
    starred: bool
    priority: TaskPriority
    category: TaskCategory
    due_date: datetime
    assignee_id: str
    project_id: str | None = None
    owner_id: str
    status: TaskStatus
    completed_at: datetime | None = None
    is_overdue: bool
    created_at: datetime
    updated_at: datetime


class TaskData(ApiModel):
    task: TaskRead


class TaskListData(ApiModel):
    tasks: list[TaskRead]
    count: int = Field(ge=0)


class TaskStatistics(ApiModel):
    total: int = Field(ge=0)
    completed: int = Field(ge=0)
    pending: int = Field(ge=0)
    starred: int = Field(ge=0)
    overdue: int = Field(ge=0)


class TaskStatisticsData(ApiModel):
    stats: TaskStatistics


class PriorityCount(ApiModel):
    priority: TaskPriority
    count: int = Field(ge=0)
    completed: int = Field(ge=0)


class PriorityBreakdownData(ApiModel):
    priorities: list[PriorityCount]


__all__ = [
    "PriorityBreakdownData",
    "PriorityCount",
    "TaskCreateRequest",
    "TaskData",
    "TaskListData",
    "TaskRead",
    "TaskStatistics",
    "TaskStatisticsData",
    "TaskUpdateRequest",
]
