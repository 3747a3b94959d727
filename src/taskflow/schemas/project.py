"""Project-related schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import (
    ProjectCategory,
    ProjectDraft,
    ProjectPatch,
    ProjectPriority,
    ProjectStatus,
)
from .envelope import ApiModel


class ProjectCreateRequest(ProjectDraft):
    """Payload for creating a project.

    ``team`` entries may be user ids, emails or plain names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Website relaunch",
                "description": "Replace the marketing site.",
                "deadline": "2024-09-30T00:00:00Z",
                "projectManager": "Alice Johnson",
                "team": ["bob@example.com", "Carol"],
            }
        },
    )


class ProjectUpdateRequest(ProjectPatch):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TeamMemberRequest(ApiModel):
    member: str = Field(min_length=1, max_length=320, description="User id, email or display name")


class TeamMemberRead(ApiModel):
    user_id: str | None = None
    name: str


class ProjectRead(ApiModel):
    """A project as shown to clients.

    Task counters and progress are not derived from tasks and are always 0.
    """

    id: str
    name: str
    description: str
    status: ProjectStatus
    priority: ProjectPriority
    category: ProjectCategory
    budget: str | None = None
    start_date: datetime
    deadline: datetime
    completed_at: datetime | None = None
    team: list[TeamMemberRead]
    project_manager: str
    client: str | None = None
    owner_id: str
    is_overdue: bool
    task_count: int = 0
    completed_task_count: int = 0
    progress: int = 0
    created_at: datetime
    updated_at: datetime


class ProjectData(ApiModel):
    project: ProjectRead


class ProjectListData(ApiModel):
    projects: list[ProjectRead]
    count: int = Field(ge=0)


class ProjectStatistics(ApiModel):
    total: int = Field(ge=0)
    active: int = Field(ge=0)
    completed: int = Field(ge=0)
    planning: int = Field(ge=0)
    overdue: int = Field(ge=0)


class ProjectStatisticsData(ApiModel):
    stats: ProjectStatistics


class StatusCount(ApiModel):
    status: ProjectStatus
    count: int = Field(ge=0)


class StatusBreakdownData(ApiModel):
    statuses: list[StatusCount]


__all__ = [
    "ProjectCreateRequest",
    "ProjectData",
    "ProjectListData",
    "ProjectRead",
    "ProjectStatistics",
    "ProjectStatisticsData",
    "ProjectUpdateRequest",
    "StatusBreakdownData",
    "StatusCount",
    "TeamMemberRead",
    "TeamMemberRequest",
]
