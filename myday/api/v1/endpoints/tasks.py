"""Task CRUD endpoints.

Every route is scoped to the authenticated user; another user's task is
reported as not found.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from myday.api.v1.schemas.common import ErrorResponse, MessageResponse
from myday.api.v1.schemas.task import ReorderRequest
from myday.core.tasks.models import Task, TaskCreate, TaskPatch
from myday.core.tasks.repository import TaskRepository
from myday.dependencies import get_current_user_id, get_task_repository

router = APIRouter(prefix="/tasks")


@router.get("", response_model=list[Task], summary="List the user's tasks")
async def list_tasks(
    sort_by: str | None = Query(default=None, alias="sortBy"),
    order: str = Query(default="desc"),
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> list[Task]:
    return await tasks.list_tasks(user_id, sort_by=sort_by, order=order)


@router.post("", response_model=Task, status_code=201)
async def create_task(
    request: TaskCreate,
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Task:
    return await tasks.create_task(user_id, request)


@router.delete("", status_code=204)
async def delete_all_tasks(
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Response:
    await tasks.delete_all_tasks(user_id)
    return Response(status_code=204)


@router.post(
    "/reorder",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reorder_tasks(
    request: ReorderRequest,
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> MessageResponse:
    ordering = {item.id: item.today_order for item in request.ordered_tasks}
    await tasks.reorder(user_id, ordering)
    return MessageResponse(message="Task order updated", count=len(ordering))


@router.get("/{task_id}", response_model=Task, responses={404: {"model": ErrorResponse}})
async def get_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Task:
    return await tasks.get_task(user_id, task_id)


@router.put("/{task_id}", response_model=Task, responses={404: {"model": ErrorResponse}})
async def update_task(
    task_id: int,
    request: TaskPatch,
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Task:
    return await tasks.update_task(user_id, task_id, request)


@router.delete("/{task_id}", status_code=204, responses={404: {"model": ErrorResponse}})
async def delete_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Response:
    await tasks.delete_task(user_id, task_id)
    return Response(status_code=204)
