"""Task domain models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from .common import TimestampMixin, ensure_utc, utcnow
from .enums import TaskCategory, TaskPriority, TaskStatus


class TaskBase(TimestampMixin):
    """Fields persisted for every task.

    ``completed``, ``status`` and ``completed_at`` move together. Change
    completion only through :meth:`mark_completed`.
    """

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    completed: bool = False
    starred: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.BUSINESS
    due_date: datetime
    assignee_id: str = Field(min_length=1)
    project_id: str | None = None
    owner_id: str
    status: TaskStatus = TaskStatus.TODO
    completed_at: datetime | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("due_date", "completed_at", mode="after")
    @classmethod
    def _coerce_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    def mark_completed(self, completed: bool, *, now: datetime | None = None) -> bool:
        """Set completion state, returning ``True`` when anything changed."""
        if completed == self.completed:
            return False
        self.completed = completed
        if completed:
            self.status = TaskStatus.COMPLETED
            self.completed_at = now or utcnow()
        else:
            self.status = TaskStatus.TODO
            self.completed_at = None
        return True

    def is_overdue_at(self, now: datetime) -> bool:
        return not self.completed and self.due_date < now


class Task(TaskBase):
    """A stored task with its identifier."""

    id: str

    @property
    def is_overdue(self) -> bool:
        return self.is_overdue_at(utcnow())


__all__ = ["Task", "TaskBase"]
