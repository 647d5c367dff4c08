"""In-memory task and chat-log stores.

Both stores scope every read and write to the owning user; a task or chat
record belonging to someone else behaves exactly like a missing one.
Mutations are serialised with an :class:`asyncio.Lock`.  A persistent
backend only needs to honour the same async method signatures.
"""

from __future__ import annotations

import asyncio
import itertools

from myday.core.interpreter.categories import normalize_category
from myday.core.tasks.models import (
    BatchFailure,
    BatchUpdateResult,
    ChatRecord,
    Task,
    TaskBatchItem,
    TaskCreate,
    TaskPatch,
    utcnow,
)
from myday.utils.exceptions import ChatNotFoundError, TaskNotFoundError, ValidationError
from myday.utils.logging import get_logger

logger = get_logger("tasks.repository")

SORTABLE_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "priority": "priority",
    "title": "title",
}


def _default_order_key(task: Task):
    """Incomplete first, then priority high to low, then manual Today order,
    then newest first."""
    return (
        task.completed,
        -task.priority,
        task.today_order is None,
        task.today_order or 0,
        -task.created_at.timestamp(),
        -task.id,
    )


class TaskRepository:
    """Per-user task store."""

    def __init__(self):
        self._tasks: dict[int, Task] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    # ----- reads ------------------------------------------------------------

    async def list_tasks(
        self,
        author_id: int,
        sort_by: str | None = None,
        order: str = "desc",
    ) -> list[Task]:
        """Return the user's tasks.

        *sort_by* may be ``createdAt``, ``priority`` or ``title``; any other
        value keeps the default ordering.
        """
        tasks = [t for t in self._tasks.values() if t.author_id == author_id]
        field = SORTABLE_FIELDS.get(sort_by or "")
        if field is None:
            return sorted(tasks, key=_default_order_key)
        return sorted(tasks, key=lambda t: getattr(t, field), reverse=order != "asc")

    async def get_task(self, author_id: int, task_id: int) -> Task:
        task = self._tasks.get(task_id)
        if task is None or task.author_id != author_id:
            raise TaskNotFoundError(task_id)
        return task

    async def all_tasks(self) -> list[Task]:
        """Every task regardless of owner.  Used by maintenance sweeps."""
        return list(self._tasks.values())

    # ----- writes -----------------------------------------------------------

    async def create_task(self, author_id: int, data: TaskCreate) -> Task:
        async with self._lock:
            task = Task(
                id=next(self._ids),
                author_id=author_id,
                title=data.title,
                description=data.description or "",
                priority=data.priority,
                category=normalize_category(data.category),
                is_today=data.is_today,
            )
            if task.is_today:
                task.today_order = self._next_today_order(author_id)
            self._tasks[task.id] = task

        logger.info("task_created", task_id=task.id, author_id=author_id, category=task.category)
        return task

    async def update_task(self, author_id: int, task_id: int, patch: TaskPatch) -> Task:
        async with self._lock:
            return self._apply_patch(author_id, task_id, patch)

    async def set_category(self, task_id: int, category: str) -> None:
        async with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            task.category = category
            task.updated_at = utcnow()

    async def delete_task(self, author_id: int, task_id: int) -> None:
        async with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task.author_id != author_id:
                raise TaskNotFoundError(task_id)
            del self._tasks[task_id]
        logger.info("task_deleted", task_id=task_id, author_id=author_id)

    async def delete_all_tasks(self, author_id: int) -> int:
        async with self._lock:
            doomed = [tid for tid, t in self._tasks.items() if t.author_id == author_id]
            for tid in doomed:
                del self._tasks[tid]
        logger.info("tasks_cleared", author_id=author_id, count=len(doomed))
        return len(doomed)

    async def reorder(self, author_id: int, ordering: dict[int, int]) -> None:
        """Set ``today_order`` for several tasks at once.

        All ids are checked before anything is written, so an unknown id
        leaves every task untouched.
        """
        async with self._lock:
            for task_id in ordering:
                task = self._tasks.get(task_id)
                if task is None or task.author_id != author_id:
                    raise TaskNotFoundError(task_id)
            for task_id, position in ordering.items():
                self._tasks[task_id].today_order = position

    async def batch_update(
        self,
        author_id: int,
        updates: list[TaskBatchItem],
    ) -> BatchUpdateResult:
        """Apply each update independently.

        A row that fails (unknown id, not owned by the user) is reported in
        ``failed`` and does not roll back the rows that succeeded.
        """
        result = BatchUpdateResult()
        async with self._lock:
            for item in updates:
                changes = item.model_dump(exclude={"id"}, exclude_unset=True)
                # An empty title or category means "keep the current one".
                for key in ("title", "category"):
                    if not changes.get(key):
                        changes.pop(key, None)
                patch = TaskPatch(**changes)
                try:
                    result.updated.append(self._apply_patch(author_id, item.id, patch))
                except TaskNotFoundError as exc:
                    result.failed.append(BatchFailure(id=item.id, error=str(exc)))

        logger.info(
            "tasks_batch_updated",
            author_id=author_id,
            updated=len(result.updated),
            failed=len(result.failed),
        )
        return result

    # ----- helpers ----------------------------------------------------------

    def _next_today_order(self, author_id: int) -> int:
        orders = [
            t.today_order
            for t in self._tasks.values()
            if t.author_id == author_id and t.is_today and t.today_order is not None
        ]
        return max(orders, default=0) + 1

    def _apply_patch(self, author_id: int, task_id: int, patch: TaskPatch) -> Task:
        task = self._tasks.get(task_id)
        if task is None or task.author_id != author_id:
            raise TaskNotFoundError(task_id)

        changes = patch.model_dump(exclude_unset=True)
        if "title" in changes and not changes["title"]:
            raise ValidationError("title", "must not be empty")
        if "category" in changes and changes["category"] is not None:
            changes["category"] = normalize_category(changes["category"])

        if changes.get("is_today") is True and not changes.get("completed"):
            if not task.is_today or task.today_order is None:
                changes["today_order"] = self._next_today_order(author_id)
        elif changes.get("is_today") is False:
            changes["today_order"] = None

        if "completed" in changes and "completed_at" not in changes:
            changes["completed_at"] = utcnow() if changes["completed"] else None

        for key, value in changes.items():
            if value is None and key not in ("today_order", "completed_at"):
                continue
            setattr(task, key, value)
        task.updated_at = utcnow()
        return task


class ChatLogRepository:
    """Append-only per-user chat history."""

    def __init__(self):
        self._chats: dict[int, ChatRecord] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def append(
        self,
        author_id: int,
        prompt: str,
        response: str,
        model: str,
        tool: str,
    ) -> ChatRecord:
        async with self._lock:
            record = ChatRecord(
                id=next(self._ids),
                author_id=author_id,
                prompt=prompt,
                response=response,
                model=model,
                tool=tool,
            )
            self._chats[record.id] = record
        logger.info("chat_logged", chat_id=record.id, author_id=author_id, tool=tool)
        return record

    async def list_chats(self, author_id: int) -> list[ChatRecord]:
        """Newest first."""
        chats = [c for c in self._chats.values() if c.author_id == author_id]
        return sorted(chats, key=lambda c: (c.created_at, c.id), reverse=True)

    async def get_chat(self, author_id: int, chat_id: int) -> ChatRecord:
        record = self._chats.get(chat_id)
        if record is None or record.author_id != author_id:
            raise ChatNotFoundError(chat_id)
        return record

    async def delete_chat(self, author_id: int, chat_id: int) -> None:
        async with self._lock:
            record = self._chats.get(chat_id)
            if record is None or record.author_id != author_id:
                raise ChatNotFoundError(chat_id)
            del self._chats[chat_id]

    async def delete_all_chats(self, author_id: int) -> int:
        async with self._lock:
            doomed = [cid for cid, c in self._chats.items() if c.author_id == author_id]
            for cid in doomed:
                del self._chats[cid]
        return len(doomed)
