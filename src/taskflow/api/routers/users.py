"""Routes exposing the shared user directory."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from ...deps import CurrentUserDependency, UserServiceDependency
from ...models import User
from ...repositories.base import UserFilters
from ...schemas import (
    ActivityEventRead,
    ActivityListData,
    Envelope,
    Pagination,
    UserData,
    UserListData,
    UserPublic,
    UserSearchData,
    UserStatistics,
    UserStatisticsData,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["users"])

PageQuery = Annotated[
    int,
    Query(ge=1, description="1-based page number."),
]
PageSizeQuery = Annotated[
    int,
    Query(ge=1, le=100, description="Number of users per page."),
]
SearchQuery = Annotated[
    str | None,
    Query(max_length=200, description="Case-insensitive text matched against name and email."),
]
TermQuery = Annotated[
    str | None,
    Query(max_length=200, description="Search text; at least two characters."),
]
ActivityLimitQuery = Annotated[
    int,
    Query(ge=1, le=100, description="Maximum number of activity events to return."),
]


def _map_user(user: User) -> UserPublic:
    return UserPublic.model_validate(user)


@router.get(
    "",
    response_model=Envelope[UserListData],
    summary="List users, newest first, one page at a time",
)
async def list_users(
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
    page: PageQuery = 1,
    limit: PageSizeQuery = 10,
    search: SearchQuery = None,
) -> Envelope[UserListData]:
    result = await user_service.list_users(UserFilters(search=search), page=page, limit=limit)
    return Envelope[UserListData](
        data=UserListData(
            users=[_map_user(user) for user in result.users],
            pagination=Pagination(
                page=result.page,
                limit=result.limit,
                total=result.total,
                pages=result.pages,
            ),
        )
    )


@router.get(
    "/search",
    response_model=Envelope[UserSearchData],
    summary="Search users by name or email",
)
async def search_users(
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
    q: TermQuery = None,
    limit: PageSizeQuery = 10,
) -> Envelope[UserSearchData]:
    users = await user_service.search_users(q, limit=limit)
    return Envelope[UserSearchData](data=UserSearchData(users=[_map_user(user) for user in users]))


@router.get(
    "/stats",
    response_model=Envelope[UserStatisticsData],
    summary="Aggregate statistics across all users",
)
async def get_user_statistics(
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
) -> Envelope[UserStatisticsData]:
    stats = await user_service.get_statistics()
    return Envelope[UserStatisticsData](data=UserStatisticsData(stats=UserStatistics.model_validate(stats)))


@router.get(
    "/{user_id}",
    response_model=Envelope[UserData],
    summary="Retrieve a user by id",
)
async def get_user(
    user_id: str,
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
) -> Envelope[UserData]:
    user = await user_service.get_user(user_id)
    return Envelope[UserData](data=UserData(user=_map_user(user)))


@router.put(
    "/{user_id}",
    response_model=Envelope[UserData],
    summary="Update a user's name or email",
)
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
) -> Envelope[UserData]:
    user = await user_service.update_user(user_id, payload, actor_id=current_user.id)
    return Envelope[UserData](message="User updated successfully", data=UserData(user=_map_user(user)))


@router.delete(
    "/{user_id}",
    response_model=Envelope[None],
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
) -> Envelope[None]:
    await user_service.delete_user(user_id, actor_id=current_user.id)
    return Envelope[None](message="User deleted successfully")


@router.put(
    "/{user_id}/metrics",
    response_model=Envelope[UserData],
    summary="Recompute a user's task counters from their assigned tasks",
)
async def refresh_user_metrics(
    user_id: str,
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
) -> Envelope[UserData]:
    user = await user_service.refresh_metrics(user_id, actor_id=current_user.id)
    return Envelope[UserData](message="User metrics updated successfully", data=UserData(user=_map_user(user)))


@router.get(
    "/{user_id}/activity",
    response_model=Envelope[ActivityListData],
    summary="List a user's most recent activity events",
)
async def list_user_activity(
    user_id: str,
    current_user: CurrentUserDependency,
    user_service: UserServiceDependency,
    limit: ActivityLimitQuery = 25,
) -> Envelope[ActivityListData]:
    events = await user_service.recent_activity(user_id, limit=limit)
    return Envelope[ActivityListData](
        data=ActivityListData(events=[ActivityEventRead.model_validate(event) for event in events]),
    )
