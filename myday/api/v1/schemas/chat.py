"""Request schemas for the AI chat endpoints."""

from pydantic import Field

from myday.core.interpreter.models import CamelModel
from myday.core.tasks.models import TaskBatchItem


class ChatRequest(CamelModel):
    """A user's message to the assistant."""

    prompt: str = Field(..., min_length=1, max_length=10000, description="User message")
    model: str | None = Field(
        default=None,
        description="Model override; the configured default is used when omitted",
    )


class BatchUpdateRequest(CamelModel):
    """Confirmed task edits, usually taken from a schedule optimisation."""

    task_updates: list[TaskBatchItem]
