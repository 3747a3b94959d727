"""Project domain models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .common import TimestampMixin, ensure_utc, utcnow
from .enums import ProjectCategory, ProjectPriority, ProjectStatus


class TeamMember(BaseModel):
    """A project team member.

    ``user_id`` is set when the member was resolved against the user
    directory; ``name`` is always present for display.
    """

    user_id: str | None = None
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    def matches(self, other: "TeamMember") -> bool:
        if self.user_id and other.user_id:
            return self.user_id == other.user_id
        return self.name.casefold() == other.name.casefold()


class ProjectBase(TimestampMixin):
    """Fields persisted for every project.

    ``completed_at`` is set exactly while ``status`` is completed. Change
    status only through :meth:`apply_status`.
    """

    name: str = Field(min_length=1, max_length=150)
    description: str = Field(min_length=1, max_length=1000)
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: ProjectPriority = ProjectPriority.MEDIUM
    category: ProjectCategory = ProjectCategory.DEVELOPMENT
    budget: str | None = Field(default=None, max_length=100)
    start_date: datetime = Field(default_factory=utcnow)
    deadline: datetime
    completed_at: datetime | None = None
    team: list[TeamMember] = Field(default_factory=list)
    project_manager: str = Field(min_length=1, max_length=100)
    client: str | None = Field(default=None, max_length=150)
    owner_id: str

    @field_validator("name", "description", "project_manager", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("start_date", "deadline", "completed_at", mode="after")
    @classmethod
    def _coerce_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    def apply_status(self, status: ProjectStatus, *, now: datetime | None = None) -> None:
        if status == self.status:
            return
        self.status = status
        if status is ProjectStatus.COMPLETED:
            self.completed_at = now or utcnow()
        else:
            self.completed_at = None

    def has_member(self, member: TeamMember) -> bool:
        return any(existing.matches(member) for existing in self.team)

    def is_overdue_at(self, now: datetime) -> bool:
        return self.status is not ProjectStatus.COMPLETED and self.deadline < now


class Project(ProjectBase):
    """A stored project with its identifier."""

    id: str

    @property
    def is_overdue(self) -> bool:
        return self.is_overdue_at(utcnow())


__all__ = ["Project", "ProjectBase", "TeamMember"]
