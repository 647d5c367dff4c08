"""Task and chat-log records kept by the repositories.

Attributes serialise with camelCase keys (``isToday``, ``todayOrder``,
``createdAt``) to match the web client.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field

from myday.core.interpreter.models import CamelModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(CamelModel):
    """A stored task owned by a single user."""

    id: int
    author_id: int
    title: str
    description: str = ""
    priority: int = 0
    category: str = "other"
    completed: bool = False
    is_today: bool = False
    today_order: int | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    priority: int = Field(0, ge=0, le=3)
    category: str = "other"
    is_today: bool = False


class TaskPatch(CamelModel):
    """Partial update; only fields that were explicitly set are applied."""

    title: str | None = None
    description: str | None = None
    priority: int | None = Field(None, ge=0, le=3)
    category: str | None = None
    completed: bool | None = None
    is_today: bool | None = None
    completed_at: datetime | None = None


class TaskBatchItem(TaskPatch):
    id: int


class BatchFailure(CamelModel):
    id: int
    error: str


class BatchUpdateResult(CamelModel):
    """Outcome of a batch update.  Rows succeed or fail independently."""

    updated: list[Task] = []
    failed: list[BatchFailure] = []


class ChatRecord(CamelModel):
    """One append-only chat turn: the prompt, the reply and the chosen tool."""

    id: int
    author_id: int
    prompt: str
    response: str
    model: str
    tool: str
    created_at: datetime = Field(default_factory=utcnow)
