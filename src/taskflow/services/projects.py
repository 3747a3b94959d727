"""Service layer encapsulating project-related operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from ..errors import NotFoundError, ValidationError
from ..models import (
    Project,
    ProjectBase,
    ProjectDraft,
    ProjectPatch,
    ProjectStatus,
    TeamMember,
    is_object_id,
    utcnow,
)
from ..repositories.base import ProjectFilters, ProjectStore, UserStore
from .common import build_model, merge_changes, require_fields

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_DAYS = 30


@dataclass(slots=True)
class ProjectStatisticsResult:
    total: int
    active: int
    completed: int
    planning: int
    overdue: int


@dataclass(slots=True)
class StatusBreakdown:
    status: str
    count: int


class ProjectService:
    """Owner-scoped project operations, including team membership.

    Team members are resolved once, here: a user id or email that names a
    user in the directory becomes a linked member carrying that user's name;
    anything else is kept as a name-only member.
    """

    def __init__(self, projects: ProjectStore, users: UserStore) -> None:
        self._projects = projects
        self._users = users

    async def resolve_member(self, reference: str) -> TeamMember:
        value = reference.strip()
        if not value:
            raise ValidationError("Member is required.")
        user = None
        if is_object_id(value):
            user = await self._users.get(value)
        elif "@" in value:
            user = await self._users.get_by_email(value)
        if user is not None:
            return TeamMember(user_id=user.id, name=user.name)
        return TeamMember(name=value)

    async def resolve_team(self, references: list[str]) -> list[TeamMember]:
        """Resolve ``references`` in order, dropping repeats of the same member."""
        team: list[TeamMember] = []
        for reference in references:
            member = await self.resolve_member(reference)
            if not any(existing.matches(member) for existing in team):
                team.append(member)
        return team

    async def list_projects(self, owner_id: str, filters: ProjectFilters | None = None) -> list[Project]:
        return await self._projects.list_for_owner(owner_id, filters or ProjectFilters())

    async def get_project(self, project_id: str, owner_id: str) -> Project:
        project = await self._projects.get_for_owner(project_id, owner_id)
        if project is None:
            raise NotFoundError("Project not found.")
        return project

    async def create_project(self, owner_id: str, draft: ProjectDraft) -> Project:
        require_fields(
            draft.missing_fields(),
            "Name, description, deadline, and project manager are required.",
        )
        now = utcnow()
        fields = draft.changes()
        fields.pop("team", None)
        status = fields.pop("status", ProjectStatus.PLANNING)
        team = await self.resolve_team(draft.team)

        base = build_model(
            ProjectBase,
            {**fields, "team": team, "owner_id": owner_id, "created_at": now, "updated_at": now},
        )
        base.apply_status(status, now=now)
        project = await self._projects.add(base)
        logger.info("Project created", extra={"project_id": project.id})
        return project

    async def update_project(self, project_id: str, owner_id: str, patch: ProjectPatch) -> Project:
        current = await self.get_project(project_id, owner_id)
        changes = patch.changes()
        status = changes.pop("status", None)
        if "team" in changes:
            changes["team"] = await self.resolve_team(changes["team"])
        now = utcnow()

        project = merge_changes(current, changes, now=now)
        if status is not None:
            project.apply_status(status, now=now)
        return await self._projects.save(project)

    async def delete_project(self, project_id: str, owner_id: str) -> None:
        if not await self._projects.delete_for_owner(project_id, owner_id):
            raise NotFoundError("Project not found.")
        logger.info("Project deleted", extra={"project_id": project_id})

    async def add_team_member(self, project_id: str, owner_id: str, reference: str) -> Project:
        """Add a member; adding someone already on the team changes nothing."""
        project = await self.get_project(project_id, owner_id)
        member = await self.resolve_member(reference)
        if project.has_member(member):
            return project
        project.team.append(member)
        project.touch()
        return await self._projects.save(project)

    async def remove_team_member(self, project_id: str, owner_id: str, reference: str) -> Project:
        """Remove a member by user id, email or name; absent members are ignored."""
        project = await self.get_project(project_id, owner_id)
        value = reference.strip()
        member = await self.resolve_member(value) if value else None
        remaining = [
            existing
            for existing in project.team
            if not (
                existing.user_id == value
                or existing.name.casefold() == value.casefold()
                or (member is not None and existing.matches(member))
            )
        ]
        if len(remaining) == len(project.team):
            return project
        project.team = remaining
        project.touch()
        return await self._projects.save(project)

    async def get_statistics(self, owner_id: str) -> ProjectStatisticsResult:
        counts = await self._projects.statistics(owner_id, now=utcnow())
        return ProjectStatisticsResult(**counts)

    async def get_status_breakdown(self, owner_id: str) -> list[StatusBreakdown]:
        rows = await self._projects.status_breakdown(owner_id)
        return [StatusBreakdown(**row) for row in rows]

    async def list_upcoming_deadlines(self, owner_id: str, days: int = DEFAULT_DEADLINE_DAYS) -> list[Project]:
        now = utcnow()
        return await self._projects.deadlines_between(owner_id, start=now, end=now + timedelta(days=days))


__all__ = ["ProjectService", "ProjectStatisticsResult", "StatusBreakdown"]
