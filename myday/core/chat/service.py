"""Two-stage chat orchestration.

A chat turn makes two sequential LLM calls: the first picks a tool, the
second runs with that tool's system prompt.  The second completion is
interpreted into structured parameters which, for ``createTask``, are
applied to the task store straight away.  Schedule optimisations are only
proposed; the client confirms them through the batch-update endpoint.

Upstream failures never escape :meth:`ChatService.chat`.  Each stage that
fails is replaced by a canned apology and the turn carries on.
"""

from __future__ import annotations

import random

from myday.core.interpreter import classify_intent, extract, normalize_category
from myday.core.interpreter.models import (
    AnalyzeTasksParams,
    CamelModel,
    CreateTaskParams,
    GoalSettingParams,
    Intent,
    ScheduleOptimizationParams,
)
from myday.core.interpreter.prompts.classification import (
    CLASSIFICATION_MAX_TOKENS,
    CLASSIFICATION_SYSTEM_PROMPT,
)
from myday.core.interpreter.prompts.tools import (
    SCHEDULE_OPTIMIZATION_USER_TEMPLATE,
    TASK_LINE_TEMPLATE,
    TOOL_MAX_TOKENS,
    TOOL_SYSTEM_PROMPTS,
)
from myday.core.tasks.models import ChatRecord, Task, TaskCreate
from myday.core.tasks.repository import ChatLogRepository, TaskRepository
from myday.utils.exceptions import LLMError, MyDayError
from myday.utils.logging import get_logger

logger = get_logger("chat.service")

FALLBACK_RESPONSES: tuple[str, ...] = (
    "抱歉，AI服务暂时不可用。让我为您提供一个基本的建议...",
    "由于网络问题，我暂时无法连接到AI服务。不过我可以为您提供一些一般性的指导...",
    "AI服务出现了一些问题。让我为您提供一些替代方案...",
)

# Model names older clients still send.
_MODEL_ALIASES: frozenset[str] = frozenset({"gpt-3.5-turbo"})


def fallback_message(model: str, tool: str) -> str:
    """A non-empty apology used in place of a failed completion."""
    return (
        f"{random.choice(FALLBACK_RESPONSES)}\n\n"
        f"模型: {model}\n工具: {tool}\n\n"
        "如果您需要更具体的帮助，请稍后再试。"
    )


class ChatOutcome(CamelModel):
    """Everything the client needs to render one chat turn."""

    chat: ChatRecord
    tool: Intent
    params: (
        CreateTaskParams
        | AnalyzeTasksParams
        | ScheduleOptimizationParams
        | GoalSettingParams
        | None
    ) = None
    created_task: Task | None = None


class ChatService:
    """Runs a chat turn end-to-end.

    Parameters
    ----------
    llm_client:
        An optional :class:`~myday.core.llm.client.LLMClient`.  When
        ``None`` every completion is replaced by a fallback message.
    tasks:
        Task store used for ``createTask`` and to describe the user's tasks
        to the optimiser.
    chats:
        Chat-log store; every turn is appended.
    default_model:
        Model used when the request does not name one.
    """

    def __init__(
        self,
        llm_client,
        tasks: TaskRepository,
        chats: ChatLogRepository,
        default_model: str,
    ):
        self.llm = llm_client
        self.tasks = tasks
        self.chats = chats
        self.default_model = default_model

    def resolve_model(self, model: str | None) -> str:
        if not model or model in _MODEL_ALIASES:
            return self.default_model
        return model

    async def chat(self, user_id: int, prompt: str, model: str | None = None) -> ChatOutcome:
        """Process one user prompt.

        Steps:
        1. Ask the model which tool the prompt needs.
        2. Classify the reply into an :class:`Intent`.
        3. Ask again with the tool's system prompt.
        4. Extract parameters and, for ``createTask``, create the task.
        5. Append the turn to the chat log.
        """
        model = self.resolve_model(model)

        # 1-2. Classification stage.
        stage_one = await self._complete(
            CLASSIFICATION_SYSTEM_PROMPT,
            prompt,
            model=model,
            tool=Intent.GENERAL.value,
            max_tokens=CLASSIFICATION_MAX_TOKENS,
        )
        intent = classify_intent(stage_one)

        # 3. Tool stage.
        user_message = prompt
        if intent is Intent.SCHEDULE_OPTIMIZATION:
            user_message = await self._optimization_prompt(user_id, prompt)

        response = await self._complete(
            TOOL_SYSTEM_PROMPTS[intent],
            user_message,
            model=model,
            tool=intent.value,
            max_tokens=TOOL_MAX_TOKENS,
        )

        # 4. Interpretation.
        params = extract(intent, response)
        logger.info(
            "chat_params_extracted",
            user_id=user_id,
            tool=intent.value,
            extracted=params is not None,
        )

        created_task = None
        if isinstance(params, CreateTaskParams):
            created_task = await self._create_task(user_id, params)

        # 5. Chat log.
        record = await self.chats.append(
            user_id,
            prompt=prompt,
            response=response,
            model=model,
            tool=intent.value,
        )

        return ChatOutcome(
            chat=record,
            tool=intent,
            params=params,
            created_task=created_task,
        )

    # ----- helpers ----------------------------------------------------------

    async def _complete(
        self,
        system: str,
        user: str,
        model: str,
        tool: str,
        max_tokens: int,
    ) -> str:
        """One upstream call; a failure becomes a fallback message."""
        if self.llm is None:
            logger.warning("llm_unavailable_using_fallback", tool=tool)
            return fallback_message(model, tool)
        try:
            return await self.llm.complete(system, user, model=model, max_tokens=max_tokens)
        except LLMError as exc:
            logger.warning("llm_call_failed_using_fallback", tool=tool, error=str(exc))
            return fallback_message(model, tool)

    async def _optimization_prompt(self, user_id: int, prompt: str) -> str:
        tasks = await self.tasks.list_tasks(user_id)
        tasks_data = "\n".join(
            TASK_LINE_TEMPLATE.format(
                id=task.id,
                title=task.title,
                description=task.description or "无",
                priority=task.priority,
                category=task.category,
                completed=str(task.completed).lower(),
                is_today=str(task.is_today).lower(),
            )
            for task in tasks
        )
        return SCHEDULE_OPTIMIZATION_USER_TEMPLATE.format(tasks_data=tasks_data, prompt=prompt)

    async def _create_task(self, user_id: int, params: CreateTaskParams) -> Task | None:
        """Persist an AI-proposed task.  Failure is logged, not raised."""
        try:
            return await self.tasks.create_task(
                user_id,
                TaskCreate(
                    title=params.title,
                    description=params.description,
                    priority=params.priority,
                    category=normalize_category(params.category),
                    is_today=params.is_today,
                ),
            )
        except (MyDayError, ValueError) as exc:
            logger.error("ai_task_creation_failed", user_id=user_id, error=str(exc))
            return None
