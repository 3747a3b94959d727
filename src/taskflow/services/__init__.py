"""Business services sitting between the routers and the stores."""

from __future__ import annotations

from .auth import AuthResult, AuthService
from .counters import TaskCounterSync
from .projects import ProjectService, ProjectStatisticsResult, StatusBreakdown
from .tasks import PriorityBreakdown, TaskService, TaskStatisticsResult
from .users import UserPage, UserService, UserStatisticsResult

__all__ = [
    "AuthResult",
    "AuthService",
    "PriorityBreakdown",
    "ProjectService",
    "ProjectStatisticsResult",
    "StatusBreakdown",
    "TaskCounterSync",
    "TaskService",
    "TaskStatisticsResult",
    "UserPage",
    "UserService",
    "UserStatisticsResult",
]
