"""Audit trail of changes to user records."""

from __future__ import annotations

from .models import ActivityAction, ActivityEvent, ActivityEventBase
from .service import ActivityLogService

__all__ = [
    "ActivityAction",
    "ActivityEvent",
    "ActivityEventBase",
    "ActivityLogService",
]
