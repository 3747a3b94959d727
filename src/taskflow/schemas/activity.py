from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from ..activity import ActivityAction
from .envelope import ApiModel


class ActivityEventRead(ApiModel):
    id: str
    action: ActivityAction
    action_label: str
    summary: str
    user_id: str | None = None
    target_type: str
    target_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    source: str | None = None
    created_at: datetime


class ActivityListData(ApiModel):
    events: list[ActivityEventRead]


__all__ = ["ActivityEventRead", "ActivityListData"]
