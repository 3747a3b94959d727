"""Storage layer: protocols plus Mongo and in-memory implementations."""

from __future__ import annotations

from ..core.config import Settings
from .base import (
    DEFAULT_LIST_LIMIT,
    ActivityStore,
    ProjectFilters,
    ProjectStore,
    Repositories,
    TaskFilters,
    TaskStore,
    UserFilters,
    UserStore,
)
from .memory import build_memory_repositories
from .mongo import build_mongo_repositories


def build_repositories(settings: Settings) -> Repositories:
    """Return the stores for the configured ``storage_backend``."""

    if settings.storage_backend == "memory":
        return build_memory_repositories()
    return build_mongo_repositories()


__all__ = [
    "DEFAULT_LIST_LIMIT",
    "ActivityStore",
    "ProjectFilters",
    "ProjectStore",
    "Repositories",
    "TaskFilters",
    "TaskStore",
    "UserFilters",
    "UserStore",
    "build_memory_repositories",
    "build_mongo_repositories",
    "build_repositories",
]
