"""Enumerations shared by tasks and projects."""

from __future__ import annotations

from enum import Enum


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCategory(str, Enum):
    BUSINESS = "Business"
    DEVELOPMENT = "Development"
    DESIGN = "Design"
    FINANCE = "Finance"
    SECURITY = "Security"
    MARKETING = "Marketing"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ProjectCategory(str, Enum):
    DEVELOPMENT = "Development"
    DESIGN = "Design"
    SECURITY = "Security"
    ANALYTICS = "Analytics"
    MOBILE = "Mobile"
    MARKETING = "Marketing"


__all__ = [
    "ProjectCategory",
    "ProjectPriority",
    "ProjectStatus",
    "TaskCategory",
    "TaskPriority",
    "TaskStatus",
]
