"""AI chat endpoints -- send a message, browse the chat log, and confirm
task edits proposed by a schedule optimisation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from myday.api.v1.schemas.chat import BatchUpdateRequest, ChatRequest
from myday.api.v1.schemas.common import ErrorResponse, MessageResponse
from myday.core.chat.service import ChatOutcome, ChatService
from myday.core.tasks.models import BatchUpdateResult, ChatRecord
from myday.core.tasks.repository import ChatLogRepository, TaskRepository
from myday.dependencies import (
    get_chat_repository,
    get_chat_service,
    get_current_user_id,
    get_task_repository,
)

router = APIRouter(prefix="/ai")


@router.post(
    "/chat",
    response_model=ChatOutcome,
    responses={401: {"model": ErrorResponse}},
    summary="Send a message to the assistant",
    description=(
        "Classifies the message into a tool, runs the tool-specific "
        "completion and returns the reply with any extracted parameters.  "
        "A createTask reply also creates the task.  Upstream AI failures "
        "still return 200 with a fallback message."
    ),
)
async def send_chat(
    request: ChatRequest,
    user_id: int = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> ChatOutcome:
    return await service.chat(user_id, request.prompt, request.model)


@router.get("/chats", response_model=list[ChatRecord], summary="List chat history")
async def list_chats(
    user_id: int = Depends(get_current_user_id),
    chats: ChatLogRepository = Depends(get_chat_repository),
) -> list[ChatRecord]:
    return await chats.list_chats(user_id)


@router.get(
    "/chats/{chat_id}",
    response_model=ChatRecord,
    responses={404: {"model": ErrorResponse}},
)
async def get_chat(
    chat_id: int,
    user_id: int = Depends(get_current_user_id),
    chats: ChatLogRepository = Depends(get_chat_repository),
) -> ChatRecord:
    return await chats.get_chat(user_id, chat_id)


@router.delete(
    "/chats/{chat_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_chat(
    chat_id: int,
    user_id: int = Depends(get_current_user_id),
    chats: ChatLogRepository = Depends(get_chat_repository),
) -> MessageResponse:
    await chats.delete_chat(user_id, chat_id)
    return MessageResponse(message="Chat record deleted")


@router.delete("/chats", response_model=MessageResponse)
async def delete_all_chats(
    user_id: int = Depends(get_current_user_id),
    chats: ChatLogRepository = Depends(get_chat_repository),
) -> MessageResponse:
    count = await chats.delete_all_chats(user_id)
    return MessageResponse(message="All chat records deleted", count=count)


@router.post(
    "/tasks/batch-update",
    response_model=BatchUpdateResult,
    summary="Apply confirmed task edits",
    description="Each row is applied independently; failed rows are listed in `failed`.",
)
async def batch_update_tasks(
    request: BatchUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
) -> BatchUpdateResult:
    return await tasks.batch_update(user_id, request.task_updates)
