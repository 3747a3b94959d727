"""In-process domain event bus."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol
from uuid import uuid4

logger = logging.getLogger(__name__)


class TaskMutation(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    TOGGLED = "toggled"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class TaskMutated:
    """Published after a task write that can change per-user task counters.

    ``affected_user_ids`` holds the owner and every assignee whose counts may
    have moved, including the previous assignee of a reassigned task.
    """

    task_id: str
    owner_id: str
    kind: TaskMutation
    affected_user_ids: tuple[str, ...]
    event_id: str = field(default_factory=lambda: uuid4().hex)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


EventHandler = Callable[[Any], Awaitable[None]]


class EventPublisher(Protocol):
    async def publish(self, event: Any) -> None: ...


class EventBus:
    """Dispatch events to subscribed coroutines, one after another.

    A failing handler is logged and skipped. The publisher never sees the
    exception, so a committed write is never reported as failed because a
    follow-up step broke.
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: type) -> list[EventHandler]:
        return list(self._handlers.get(event_type, ()))

    async def publish(self, event: Any) -> None:
        for handler in self.handlers_for(type(event)):
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Event handler failed",
                    extra={
                        "event_type": type(event).__name__,
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                    },
                )


__all__ = ["EventBus", "EventHandler", "EventPublisher", "TaskMutated", "TaskMutation"]
