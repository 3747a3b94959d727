"""Domain models."""

from __future__ import annotations

from .common import TimestampMixin, ensure_utc, is_object_id, new_object_id, utcnow
from .enums import (
    ProjectCategory,
    ProjectPriority,
    ProjectStatus,
    TaskCategory,
    TaskPriority,
    TaskStatus,
)
from .patches import ProfilePatch, ProjectDraft, ProjectPatch, TaskDraft, TaskPatch, UserPatch
from .project import Project, ProjectBase, TeamMember
from .task import Task, TaskBase
from .user import User, UserBase, avatar_initials

__all__ = [
    "ProfilePatch",
    "Project",
    "ProjectBase",
    "ProjectCategory",
    "ProjectDraft",
    "ProjectPatch",
    "ProjectPriority",
    "ProjectStatus",
    "Task",
    "TaskBase",
    "TaskCategory",
    "TaskDraft",
    "TaskPatch",
    "TaskPriority",
    "TaskStatus",
    "TeamMember",
    "TimestampMixin",
    "User",
    "UserBase",
    "UserPatch",
    "avatar_initials",
    "ensure_utc",
    "is_object_id",
    "new_object_id",
    "utcnow",
]
