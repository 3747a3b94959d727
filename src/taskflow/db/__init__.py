"""MongoDB persistence: beanie documents and connection lifecycle."""

from __future__ import annotations

from .connection import (
    close_document_store,
    get_activity_collection,
    init_document_store,
    set_mongo_client,
)
from .documents import (
    DOCUMENT_MODELS,
    ActivityEventDocument,
    ProjectDocument,
    TaskDocument,
    UserDocument,
)

__all__ = [
    "DOCUMENT_MODELS",
    "ActivityEventDocument",
    "ProjectDocument",
    "TaskDocument",
    "UserDocument",
    "close_document_store",
    "get_activity_collection",
    "init_document_store",
    "set_mongo_client",
]
