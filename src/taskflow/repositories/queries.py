"""Mongo filter documents and aggregation pipelines.

Kept free of I/O so the query shapes can be asserted without a server.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from bson import ObjectId

from ..models import ProjectStatus
from .base import ProjectFilters, TaskFilters, UserFilters


def search_pattern(text: str) -> dict[str, str]:
    """Case-insensitive literal substring match."""
    return {"$regex": re.escape(text.strip()), "$options": "i"}


def _search_clause(text: str | None, fields: tuple[str, ...]) -> dict[str, Any] | None:
    if text is None or not text.strip():
        return None
    pattern = search_pattern(text)
    return {"$or": [{field: pattern} for field in fields]}


def owner_scope(record_id: str, owner_id: str) -> dict[str, Any] | None:
    """Match one record by id and owner, or ``None`` for a malformed id."""
    if not ObjectId.is_valid(record_id):
        return None
    return {"_id": ObjectId(record_id), "owner_id": owner_id}


TASK_SEARCH_FIELDS = ("title", "description", "assignee_id")
PROJECT_SEARCH_FIELDS = ("name", "description", "category", "project_manager")
USER_SEARCH_FIELDS = ("name", "email")


def task_list_filter(owner_id: str, filters: TaskFilters) -> dict[str, Any]:
    query: dict[str, Any] = {"owner_id": owner_id}
    if filters.completed is not None:
        query["completed"] = filters.completed
    if filters.priority is not None:
        query["priority"] = filters.priority.value
    if filters.category is not None:
        query["category"] = filters.category.value
    if filters.starred is not None:
        query["starred"] = filters.starred
    search = _search_clause(filters.search, TASK_SEARCH_FIELDS)
    if search:
        query.update(search)
    return query


def project_list_filter(owner_id: str, filters: ProjectFilters) -> dict[str, Any]:
    query: dict[str, Any] = {"owner_id": owner_id}
    if filters.status is not None:
        query["status"] = filters.status.value
    if filters.priority is not None:
        query["priority"] = filters.priority.value
    if filters.category is not None:
        query["category"] = filters.category.value
    search = _search_clause(filters.search, PROJECT_SEARCH_FIELDS)
    if search:
        query.update(search)
    return query


def user_list_filter(filters: UserFilters) -> dict[str, Any]:
    return _search_clause(filters.search, USER_SEARCH_FIELDS) or {}


def task_due_filter(owner_id: str, start: datetime, end: datetime) -> dict[str, Any]:
    return {
        "owner_id": owner_id,
        "completed": False,
        "due_date": {"$gte": start, "$lte": end},
    }


def project_deadline_filter(owner_id: str, start: datetime, end: datetime) -> dict[str, Any]:
    return {
        "owner_id": owner_id,
        "status": {"$ne": ProjectStatus.COMPLETED.value},
        "deadline": {"$gte": start, "$lte": end},
    }


def _count_if(condition: Any) -> dict[str, Any]:
    return {"$sum": {"$cond": [condition, 1, 0]}}


def task_statistics_pipeline(owner_id: str, now: datetime) -> list[dict[str, Any]]:
    not_completed = {"$eq": ["$completed", False]}
    return [
        {"$match": {"owner_id": owner_id}},
        {
            "$group": {
                "_id": None,
                "total": {"$sum": 1},
                "completed": _count_if({"$eq": ["$completed", True]}),
                "pending": _count_if(not_completed),
                "starred": _count_if({"$eq": ["$starred", True]}),
                "overdue": _count_if({"$and": [not_completed, {"$lt": ["$due_date", now]}]}),
            }
        },
    ]


def task_priority_pipeline(owner_id: str) -> list[dict[str, Any]]:
    return [
        {"$match": {"owner_id": owner_id}},
        {
            "$group": {
                "_id": "$priority",
                "count": {"$sum": 1},
                "completed": _count_if({"$eq": ["$completed", True]}),
            }
        },
        {"$sort": {"_id": 1}},
    ]


def project_statistics_pipeline(owner_id: str, now: datetime) -> list[dict[str, Any]]:
    return [
        {"$match": {"owner_id": owner_id}},
        {
            "$group": {
                "_id": None,
                "total": {"$sum": 1},
                "active": _count_if({"$eq": ["$status", ProjectStatus.ACTIVE.value]}),
                "completed": _count_if({"$eq": ["$status", ProjectStatus.COMPLETED.value]}),
                "planning": _count_if({"$eq": ["$status", ProjectStatus.PLANNING.value]}),
                "overdue": _count_if(
                    {
                        "$and": [
                            {"$ne": ["$status", ProjectStatus.COMPLETED.value]},
                            {"$lt": ["$deadline", now]},
                        ]
                    }
                ),
            }
        },
    ]


def project_status_pipeline(owner_id: str) -> list[dict[str, Any]]:
    return [
        {"$match": {"owner_id": owner_id}},
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]


def user_statistics_pipeline(active_since: datetime) -> list[dict[str, Any]]:
    return [
        {
            "$group": {
                "_id": None,
                "total_users": {"$sum": 1},
                "active_users": _count_if({"$gte": ["$last_login", active_since]}),
                "total_tasks_completed": {"$sum": "$tasks_completed"},
                "total_tasks_active": {"$sum": "$tasks_active"},
                "average_tasks_completed": {"$avg": "$tasks_completed"},
            }
        },
    ]


def group_rows(rows: list[dict[str, Any]], key: str) -> list[dict[str, Any]]:
    """Rename each grouped row's ``_id`` to ``key``."""
    return [{key: row["_id"], **{name: value for name, value in row.items() if name != "_id"}} for row in rows]


def first_group(rows: list[dict[str, Any]], keys: tuple[str, ...]) -> dict[str, Any]:
    """Collapse a single-group aggregation result, defaulting every key to 0."""
    row = rows[0] if rows else {}
    return {key: row.get(key) or 0 for key in keys}


TASK_STATISTIC_KEYS = ("total", "completed", "pending", "starred", "overdue")
PROJECT_STATISTIC_KEYS = ("total", "active", "completed", "planning", "overdue")
USER_STATISTIC_KEYS = (
    "total_users",
    "active_users",
    "total_tasks_completed",
    "total_tasks_active",
    "average_tasks_completed",
)


__all__ = [
    "PROJECT_STATISTIC_KEYS",
    "TASK_STATISTIC_KEYS",
    "USER_STATISTIC_KEYS",
    "first_group",
    "group_rows",
    "owner_scope",
    "project_deadline_filter",
    "project_list_filter",
    "project_statistics_pipeline",
    "project_status_pipeline",
    "search_pattern",
    "task_due_filter",
    "task_list_filter",
    "task_priority_pipeline",
    "task_statistics_pipeline",
    "user_list_filter",
    "user_statistics_pipeline",
]
