"""Request and response schemas."""

from __future__ import annotations

from .activity import ActivityEventRead, ActivityListData
from .auth import AuthData, ChangePasswordRequest, LoginRequest, ProfileUpdateRequest, RegisterRequest
from .envelope import ApiModel, Envelope, ErrorResponse
from .project import (
    ProjectCreateRequest,
    ProjectData,
    ProjectListData,
    ProjectRead,
    ProjectStatistics,
    ProjectStatisticsData,
    ProjectUpdateRequest,
    StatusBreakdownData,
    StatusCount,
    TeamMemberRead,
    TeamMemberRequest,
)
from .system import HealthCheckResponse, RootResponse
from .task import (
    PriorityBreakdownData,
    PriorityCount,
    TaskCreateRequest,
    TaskData,
    TaskListData,
    TaskRead,
    TaskStatistics,
    TaskStatisticsData,
    TaskUpdateRequest,
)
from .user import (
    Pagination,
    UserData,
    UserListData,
    UserPublic,
    UserSearchData,
    UserStatistics,
    UserStatisticsData,
    UserUpdateRequest,
)

__all__ = [
    "ActivityEventRead",
    "ActivityListData",
    "ApiModel",
    "AuthData",
    "ChangePasswordRequest",
    "Envelope",
    "ErrorResponse",
    "HealthCheckResponse",
    "LoginRequest",
    "Pagination",
    "PriorityBreakdownData",
    "PriorityCount",
    "ProfileUpdateRequest",
    "ProjectCreateRequest",
    "ProjectData",
    "ProjectListData",
    "ProjectRead",
    "ProjectStatistics",
    "ProjectStatisticsData",
    "ProjectUpdateRequest",
    "RegisterRequest",
    "RootResponse",
    "StatusBreakdownData",
    "StatusCount",
    "TaskCreateRequest",
    "TaskData",
    "TaskListData",
    "TaskRead",
    "TaskStatistics",
    "TaskStatisticsData",
    "TaskUpdateRequest",
    "TeamMemberRead",
    "TeamMemberRequest",
    "UserData",
    "UserListData",
    "UserPublic",
    "UserSearchData",
    "UserStatistics",
    "UserStatisticsData",
    "UserUpdateRequest",
]
