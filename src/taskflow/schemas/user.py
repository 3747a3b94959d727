"""User-facing schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import UserPatch
from .envelope import ApiModel

USER_PUBLIC_EXAMPLE = {
    "id": "665f1c2e8b3e4a0012345678",
    "name": "Alice Johnson",
    "email": "alice@example.com",
    "avatar": "AJ",
    "tasksCompleted": 3,
    "tasksActive": 2,
    "lastLogin": "2024-06-04T09:30:00Z",
    "createdAt": "2024-06-01T12:00:00Z",
    "updatedAt": "2024-06-04T09:30:00Z",
}


class UserPublic(ApiModel):
    """A user as shown to clients. The password hash is never included."""

    model_config = ConfigDict(json_schema_extra={"example": USER_PUBLIC_EXAMPLE})

    id: str
    name: str
    email: str
    avatar: str
    tasks_completed: int
    tasks_active: int
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserUpdateRequest(UserPatch):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserData(ApiModel):
    user: UserPublic


class Pagination(ApiModel):
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    pages: int = Field(ge=0)


class UserListData(ApiModel):
    users: list[UserPublic]
    pagination: Pagination


class UserSearchData(ApiModel):
    users: list[UserPublic]


class UserStatistics(ApiModel):
    total_users: int = Field(ge=0)
    active_users: int = Field(ge=0)
    total_tasks_completed: int = Field(ge=0)
    total_tasks_active: int = Field(ge=0)
    average_tasks_completed: float = Field(ge=0)


class UserStatisticsData(ApiModel):
    stats: UserStatistics


__all__ = [
    "Pagination",
    "UserData",
    "UserListData",
    "UserPublic",
    "UserSearchData",
    "UserStatistics",
    "UserStatisticsData",
    "UserUpdateRequest",
]
