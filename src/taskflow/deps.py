"""Reusable FastAPI dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from .activity import ActivityLogService
from .core.config import Settings
from .core.context import bind_user_id
from .core.events import EventBus
from .core.security import TokenService
from .errors import InvalidTokenError, UnauthorizedError
from .models import User
from .repositories import Repositories
from .services import AuthService, ProjectService, TaskCounterSync, TaskService, UserService

BEARER_PREFIX = "Bearer "


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def get_event_bus(request: Request) -> EventBus:
    return request.app.state.event_bus


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_counter_sync(request: Request) -> TaskCounterSync:
    return request.app.state.counter_sync


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
RepositoriesDependency = Annotated[Repositories, Depends(get_repositories)]
EventBusDependency = Annotated[EventBus, Depends(get_event_bus)]
TokenServiceDependency = Annotated[TokenService, Depends(get_token_service)]
CounterSyncDependency = Annotated[TaskCounterSync, Depends(get_counter_sync)]


def get_activity_service(repositories: RepositoriesDependency) -> ActivityLogService:
    return ActivityLogService(repositories.activity)


ActivityServiceDependency = Annotated[ActivityLogService, Depends(get_activity_service)]


def get_auth_service(
    repositories: RepositoriesDependency,
    tokens: TokenServiceDependency,
    activity: ActivityServiceDependency,
) -> AuthService:
    return AuthService(repositories.users, tokens, activity)


def get_task_service(repositories: RepositoriesDependency, events: EventBusDependency) -> TaskService:
    return TaskService(repositories.tasks, events, repositories.projects)


def get_project_service(repositories: RepositoriesDependency) -> ProjectService:
    return ProjectService(repositories.projects, repositories.users)


def get_user_service(
    repositories: RepositoriesDependency,
    activity: ActivityServiceDependency,
    counters: CounterSyncDependency,
) -> UserService:
    return UserService(repositories.users, activity, counters)


AuthServiceDependency = Annotated[AuthService, Depends(get_auth_service)]
TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]
ProjectServiceDependency = Annotated[ProjectService, Depends(get_project_service)]
UserServiceDependency = Annotated[UserService, Depends(get_user_service)]


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


async def authenticate(request: Request, auth_service: AuthServiceDependency) -> User:
    """Resolve the caller from ``Authorization: Bearer <token>`` or reject with 401."""

    token = _bearer_token(request)
    if token is None:
        raise UnauthorizedError()
    user = await auth_service.verify_token(token)
    request.state.user = user
    # Scoped to this request's task; the middleware runs each request in its own context.
    bind_user_id(user.id)
    return user


async def optional_authenticate(request: Request, auth_service: AuthServiceDependency) -> User | None:
    """Like ``authenticate`` but returns ``None`` instead of rejecting."""

    token = _bearer_token(request)
    if token is None:
        return None
    try:
        user = await auth_service.verify_token(token)
    except InvalidTokenError:
        return None
    request.state.user = user
    bind_user_id(user.id)
    return user


CurrentUserDependency = Annotated[User, Depends(authenticate)]
OptionalUserDependency = Annotated[User | None, Depends(optional_authenticate)]


__all__ = [
    "ActivityServiceDependency",
    "AuthServiceDependency",
    "CurrentUserDependency",
    "OptionalUserDependency",
    "ProjectServiceDependency",
    "SettingsDependency",
    "TaskServiceDependency",
    "UserServiceDependency",
    "authenticate",
    "get_activity_service",
    "get_app_settings",
    "get_auth_service",
    "get_project_service",
    "get_repositories",
    "get_task_service",
    "get_user_service",
    "optional_authenticate",
]
