from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from beanie import init_beanie
from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure

from ..core.config import Settings
from .documents import DOCUMENT_MODELS, ActivityEventDocument

logger = logging.getLogger(__name__)

ACTIVITY_TTL_INDEX = "activity_created_at_ttl"

_client: AsyncMongoClient | None = None
_database: AsyncDatabase | None = None
_initialized = False
_lock = asyncio.Lock()


def set_mongo_client(client: AsyncMongoClient | None) -> None:
    """Inject a client instance, e.g. one pointed at a throwaway database."""

    global _client, _database, _initialized
    _client = client
    _database = None
    _initialized = False


def get_activity_collection() -> AsyncCollection:
    return ActivityEventDocument.get_pymongo_collection()


async def _ensure_activity_indexes(ttl_seconds: int) -> None:
    collection = get_activity_collection()
    existing = await collection.index_information()

    current_ttl = None
    ttl_index = existing.get(ACTIVITY_TTL_INDEX)
    if isinstance(ttl_index, Mapping):
        current_ttl = ttl_index.get("expireAfterSeconds")

    if current_ttl is not None and int(current_ttl) != ttl_seconds:
        try:
            await collection.drop_index(ACTIVITY_TTL_INDEX)
        except OperationFailure:
            logger.warning("Could not drop stale activity TTL index", extra={"index": ACTIVITY_TTL_INDEX})

    await collection.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)], name="activity_user_created")
    await collection.create_index(
        [("created_at", ASCENDING)],
        expireAfterSeconds=ttl_seconds,
        name=ACTIVITY_TTL_INDEX,
    )
    await collection.create_index([("action", ASCENDING)], name="activity_action")


async def init_document_store(
    settings: Settings,
    *,
    client: AsyncMongoClient | None = None,
    force: bool = False,
) -> AsyncDatabase:
    """Connect to MongoDB and register every beanie document model."""

    global _client, _database, _initialized

    async with _lock:
        if client is not None:
            set_mongo_client(client)

        if _initialized and not force and _database is not None:
            return _database

        if _client is None:
            _client = AsyncMongoClient(settings.mongo_url, tz_aware=True, uuidRepresentation="standard")
        _database = _client[settings.mongo_database]

        await init_beanie(
            database=_database,
            document_models=DOCUMENT_MODELS,
            allow_index_dropping=True,
        )
        await _ensure_activity_indexes(settings.activity_ttl_seconds)
        _initialized = True
        logger.info(
            "Document store initialised",
            extra={"database": settings.mongo_database},
        )
        return _database


async def close_document_store() -> None:
    """Close the MongoDB client opened by ``init_document_store``."""

    global _client, _database, _initialized
    client = _client
    _client = None
    _database = None
    _initialized = False
    if client is not None:
        await client.close()


__all__ = [
    "ACTIVITY_TTL_INDEX",
    "close_document_store",
    "get_activity_collection",
    "init_document_store",
    "set_mongo_client",
]
