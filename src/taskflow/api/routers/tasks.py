"""Routes handling the caller's tasks."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from ...deps import CurrentUserDependency, TaskServiceDependency
from ...models import Task, TaskCategory, TaskPriority
from ...repositories.base import TaskFilters
from ...schemas import (
    Envelope,
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

router = APIRouter(prefix="/tasks", tags=["tasks"])

CompletedQuery = Annotated[
    bool | None,
    Query(description="Filter results to completed (true) or open (false) tasks."),
]
PriorityQuery = Annotated[
    TaskPriority | None,
    Query(description="Filter results to tasks with the supplied priority."),
]
CategoryQuery = Annotated[
    TaskCategory | None,
    Query(description="Filter results to tasks in the supplied category."),
]
StarredQuery = Annotated[
    bool | None,
    Query(description="Filter results to starred (true) or unstarred (false) tasks."),
]
SearchQuery = Annotated[
    str | None,
    Query(
        max_length=200,
        description="Case-insensitive text matched against title, description and assignee.",
    ),
]
LimitQuery = Annotated[
    int,
    Query(
        ge=1,
        le=500,
        description="Maximum number of tasks to return in a single response.",
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


def _map_task(task: Task) -> TaskRead:
    return TaskRead.model_validate(task)


def _task_list(tasks: list[Task]) -> TaskListData:
    return TaskListData(tasks=[_map_task(task) for task in tasks], count=len(tasks))


@router.get(
    "",
    response_model=Envelope[TaskListData],
    summary="List the caller's tasks, newest first",
)
async def list_tasks(
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
    completed: CompletedQuery = None,
    priority: PriorityQuery = None,
    category: CategoryQuery = None,
    starred: StarredQuery = None,
    search: SearchQuery = None,
    limit: LimitQuery = 100,
) -> Envelope[TaskListData]:
    filters = TaskFilters(
        completed=completed,
        priority=priority,
        category=category,
        starred=starred,
        search=search,
        limit=limit,
    )
    tasks = await task_service.list_tasks(current_user.id, filters)
    return Envelope[TaskListData](data=_task_list(tasks))


@router.post(
    "",
    response_model=Envelope[TaskData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    payload: TaskCreateRequest,
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[TaskData]:
    task = await task_service.create_task(current_user.id, payload)
    return Envelope[TaskData](message="Task created successfully", data=TaskData(task=_map_task(task)))


@router.get(
    "/stats",
    response_model=Envelope[TaskStatisticsData],
    summary="Aggregate task statistics for the caller",
)
async def get_task_statistics(
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[TaskStatisticsData]:
    stats = await task_service.get_statistics(current_user.id)
    return Envelope[TaskStatisticsData](data=TaskStatisticsData(stats=TaskStatistics.model_validate(stats)))


@router.get(
    "/priorities",
    response_model=Envelope[PriorityBreakdownData],
    summary="Count the caller's tasks per priority",
)
async def get_priority_breakdown(
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[PriorityBreakdownData]:
    rows = await task_service.get_priority_breakdown(current_user.id)
    priorities = [PriorityCount.model_validate(row) for row in rows]
    return Envelope[PriorityBreakdownData](data=PriorityBreakdownData(priorities=priorities))


@router.get(
    "/upcoming",
    response_model=Envelope[TaskListData],
    summary="List open tasks due within the next few days",
)
async def list_upcoming_tasks(
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
    days: DaysQuery = 7,
) -> Envelope[TaskListData]:
    tasks = await task_service.list_upcoming(current_user.id, days=days)
    return Envelope[TaskListData](data=_task_list(tasks))


@router.get(
    "/{task_id}",
    response_model=Envelope[TaskData],
    summary="Retrieve a task by id",
)
async def get_task(
    task_id: str,
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[TaskData]:
    task = await task_service.get_task(task_id, current_user.id)
    return Envelope[TaskData](data=TaskData(task=_map_task(task)))


@router.put(
    "/{task_id}",
    response_model=Envelope[TaskData],
    summary="Update an existing task",
)
async def update_task(
    task_id: str,
    payload: TaskUpdateRequest,
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[TaskData]:
    task = await task_service.update_task(task_id, current_user.id, payload)
    return Envelope[TaskData](message="Task updated successfully", data=TaskData(task=_map_task(task)))


@router.delete(
    "/{task_id}",
    response_model=Envelope[None],
    summary="Delete a task",
)
async def delete_task(
    task_id: str,
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[None]:
    await task_service.delete_task(task_id, current_user.id)
    return Envelope[None](message="Task deleted successfully")


@router.patch(
    "/{task_id}/toggle",
    response_model=Envelope[TaskData],
    summary="Flip a task between completed and open",
)
async def toggle_task(
    task_id: str,
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[TaskData]:
    task = await task_service.toggle_completion(task_id, current_user.id)
    return Envelope[TaskData](message="Task toggled successfully", data=TaskData(task=_map_task(task)))


@router.patch(
    "/{task_id}/star",
    response_model=Envelope[TaskData],
    summary="Flip a task's starred flag",
)
async def star_task(
    task_id: str,
    current_user: CurrentUserDependency,
    task_service: TaskServiceDependency,
) -> Envelope[TaskData]:
    task = await task_service.toggle_star(task_id, current_user.id)
    return Envelope[TaskData](message="Task starred/unstarred successfully", data=TaskData(task=_map_task(task)))
