"""Routes handling the caller's projects and their teams."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from ...deps import CurrentUserDependency, ProjectServiceDependency
from ...models import Project, ProjectCategory, ProjectPriority, ProjectStatus
from ...repositories.base import ProjectFilters
from ...schemas import (
    Envelope,
    ProjectCreateRequest,
    ProjectData,
    ProjectListData,
    ProjectRead,
    ProjectStatistics,
    ProjectStatisticsData,
    ProjectUpdateRequest,
    StatusBreakdownData,
    StatusCount,
    TeamMemberRequest,
)

router = APIRouter(prefix="/projects", tags=["projects"])

StatusQuery = Annotated[
    ProjectStatus | None,
    Query(description="Filter results to projects in the supplied status."),
]
PriorityQuery = Annotated[
    ProjectPriority | None,
    Query(description="Filter results to projects with the supplied priority."),
]
CategoryQuery = Annotated[
    ProjectCategory | None,
    Query(description="Filter results to projects in the supplied category."),
]
SearchQuery = Annotated[
    str | None,
    Query(
        max_length=200,
        description="Case-insensitive text matched against name, description, category and manager.",
    ),
]
LimitQuery = Annotated[
    int,
    Query(
        ge=1,
        le=500,
        description="Maximum number of projects to return in a single response.",
    ),
]
DaysQuery = Annotated[
    int,
    Query(
        ge=1,
        le=365,
        description="Size of the look-ahead window in days.",
    ),
]


def _map_project(project: Project) -> ProjectRead:
    return ProjectRead.model_validate(project)


def _project_list(projects: list[Project]) -> ProjectListData:
    return ProjectListData(projects=[_map_project(project) for project in projects], count=len(projects))


@router.get(
    "",
    response_model=Envelope[ProjectListData],
    summary="List the caller's projects, newest first",
)
async def list_projects(
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
    status: StatusQuery = None,
    priority: PriorityQuery = None,
    category: CategoryQuery = None,
    search: SearchQuery = None,
    limit: LimitQuery = 100,
) -> Envelope[ProjectListData]:
    filters = ProjectFilters(
        status=status,
        priority=priority,
        category=category,
        search=search,
        limit=limit,
    )
    projects = await project_service.list_projects(current_user.id, filters)
    return Envelope[ProjectListData](data=_project_list(projects))


@router.post(
    "/create",
    response_model=Envelope[ProjectData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new project",
)
async def create_project(
    payload: ProjectCreateRequest,
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[ProjectData]:
    project = await project_service.create_project(current_user.id, payload)
    return Envelope[ProjectData](
        message="Project created successfully",
        data=ProjectData(project=_map_project(project)),
    )


@router.get(
    "/stats",
    response_model=Envelope[ProjectStatisticsData],
    summary="Aggregate project statistics for the caller",
)
async def get_project_statistics(
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[ProjectStatisticsData]:
    stats = await project_service.get_statistics(current_user.id)
    return Envelope[ProjectStatisticsData](
        data=ProjectStatisticsData(stats=ProjectStatistics.model_validate(stats)),
    )


@router.get(
    "/statuses",
    response_model=Envelope[StatusBreakdownData],
    summary="Count the caller's projects per status",
)
async def get_status_breakdown(
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[StatusBreakdownData]:
    rows = await project_service.get_status_breakdown(current_user.id)
    statuses = [StatusCount.model_validate(row) for row in rows]
    return Envelope[StatusBreakdownData](data=StatusBreakdownData(statuses=statuses))


@router.get(
    "/deadlines",
    response_model=Envelope[ProjectListData],
    summary="List unfinished projects with a deadline in the next few days",
)
async def list_upcoming_deadlines(
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
    days: DaysQuery = 30,
) -> Envelope[ProjectListData]:
    projects = await project_service.list_upcoming_deadlines(current_user.id, days=days)
    return Envelope[ProjectListData](data=_project_list(projects))


@router.get(
    "/{project_id}",
    response_model=Envelope[ProjectData],
    summary="Retrieve a project by id",
)
async def get_project(
    project_id: str,
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[ProjectData]:
    project = await project_service.get_project(project_id, current_user.id)
    return Envelope[ProjectData](data=ProjectData(project=_map_project(project)))


@router.put(
    "/{project_id}",
    response_model=Envelope[ProjectData],
    summary="Update an existing project",
)
async def update_project(
    project_id: str,
    payload: ProjectUpdateRequest,
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[ProjectData]:
    project = await project_service.update_project(project_id, current_user.id, payload)
    return Envelope[ProjectData](
        message="Project updated successfully",
        data=ProjectData(project=_map_project(project)),
    )


@router.delete(
    "/{project_id}",
    response_model=Envelope[None],
    summary="Delete a project",
)
async def delete_project(
    project_id: str,
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[None]:
    await project_service.delete_project(project_id, current_user.id)
    return Envelope[None](message="Project deleted successfully")


@router.post(
    "/{project_id}/team/add",
    response_model=Envelope[ProjectData],
    summary="Add a member to the project team",
)
async def add_team_member(
    project_id: str,
    payload: TeamMemberRequest,
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[ProjectData]:
    project = await project_service.add_team_member(project_id, current_user.id, payload.member)
    return Envelope[ProjectData](
        message="Team member added successfully",
        data=ProjectData(project=_map_project(project)),
    )


@router.post(
    "/{project_id}/team/remove",
    response_model=Envelope[ProjectData],
    summary="Remove a member from the project team",
)
async def remove_team_member(
    project_id: str,
    payload: TeamMemberRequest,
    current_user: CurrentUserDependency,
    project_service: ProjectServiceDependency,
) -> Envelope[ProjectData]:
    project = await project_service.remove_team_member(project_id, current_user.id, payload.member)
    return Envelope[ProjectData](
        message="Team member removed successfully",
        data=ProjectData(project=_map_project(project)),
    )
