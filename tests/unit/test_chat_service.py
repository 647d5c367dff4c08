"""Tests for the two-stage chat orchestration."""
import pytest

from myday.core.chat.service import FALLBACK_RESPONSES, ChatService, fallback_message
from myday.core.interpreter.models import (
    CreateTaskParams,
    Intent,
    ScheduleOptimizationParams,
)
from myday.core.interpreter.prompts.classification import CLASSIFICATION_SYSTEM_PROMPT
from myday.core.interpreter.prompts.tools import TOOL_SYSTEM_PROMPTS
from myday.core.tasks.models import TaskCreate
from myday.utils.exceptions import LLMError

DEFAULT_MODEL = "Qwen/Qwen2.5-VL-72B-Instruct"


def _service(llm, task_repo, chat_repo):
    return ChatService(llm, task_repo, chat_repo, default_model=DEFAULT_MODEL)


def _is_fallback(text: str) -> bool:
    return any(text.startswith(message) for message in FALLBACK_RESPONSES)


class TestCreateTaskFlow:
    @pytest.mark.asyncio
    async def test_creates_task_and_logs_chat(
        self, stub_llm, task_repo, chat_repo, create_task_completion
    ):
        llm = stub_llm("Tool：\\box{createTask}", create_task_completion)
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "帮我创建一个数学作业任务")

        assert outcome.tool is Intent.CREATE_TASK
        assert isinstance(outcome.params, CreateTaskParams)
        assert outcome.created_task is not None
        assert outcome.created_task.category == "learning"
        assert outcome.created_task.is_today is True
        assert outcome.created_task.today_order == 1

        stored = await task_repo.list_tasks(1)
        assert [t.title for t in stored] == ["完成数学第五章作业"]

        assert outcome.chat.tool == "createTask"
        assert outcome.chat.response == create_task_completion
        assert outcome.chat.model == DEFAULT_MODEL
        assert len(await chat_repo.list_chats(1)) == 1

    @pytest.mark.asyncio
    async def test_stage_prompts(self, stub_llm, task_repo, chat_repo, create_task_completion):
        llm = stub_llm("Tool：\\box{createTask}", create_task_completion)
        await _service(llm, task_repo, chat_repo).chat(1, "建任务")

        first, second = llm.calls
        assert first["system"] == CLASSIFICATION_SYSTEM_PROMPT
        assert first["max_tokens"] < second["max_tokens"]
        assert second["system"] == TOOL_SYSTEM_PROMPTS[Intent.CREATE_TASK]
        assert second["user"] == "建任务"

    @pytest.mark.asyncio
    async def test_empty_title_skips_creation_but_logs(self, stub_llm, task_repo, chat_repo):
        completion = "title：，description：空，priority：1，category：工作，isToday：false"
        llm = stub_llm("Tool：\\box{createTask}", completion)
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "建任务")

        assert outcome.params is not None
        assert outcome.created_task is None
        assert await task_repo.list_tasks(1) == []
        assert len(await chat_repo.list_chats(1)) == 1

    @pytest.mark.asyncio
    async def test_unparseable_completion(self, stub_llm, task_repo, chat_repo):
        llm = stub_llm("Tool：\\box{createTask}", "好的，我来帮您。")
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "建任务")

        assert outcome.tool is Intent.CREATE_TASK
        assert outcome.params is None
        assert outcome.created_task is None
        assert outcome.chat.tool == "createTask"


class TestOtherFlows:
    @pytest.mark.asyncio
    async def test_general(self, stub_llm, task_repo, chat_repo):
        llm = stub_llm("你好！", "你好，有什么可以帮您？")
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "你好")

        assert outcome.tool is Intent.GENERAL
        assert outcome.params is None
        assert outcome.chat.response == "你好，有什么可以帮您？"
        assert llm.calls[1]["system"] == TOOL_SYSTEM_PROMPTS[Intent.GENERAL]

    @pytest.mark.asyncio
    async def test_schedule_optimization_is_proposed_not_applied(
        self, stub_llm, task_repo, chat_repo, optimization_completion
    ):
        task = await task_repo.create_task(
            1, TaskCreate(title="论文初稿", description="草稿", priority=1, category="学习")
        )
        llm = stub_llm("Tool：\\box{scheduleOptimization}", optimization_completion)
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "帮我优化日程")

        assert outcome.tool is Intent.SCHEDULE_OPTIMIZATION
        assert isinstance(outcome.params, ScheduleOptimizationParams)
        assert [u.id for u in outcome.params.task_updates] == [task.id]
        assert outcome.params.dropped_count == 1

        user_message = llm.calls[1]["user"]
        assert "任务ID: 1" in user_message
        assert "帮我优化日程" in user_message

        unchanged = await task_repo.get_task(1, task.id)
        assert unchanged.priority == 1
        assert unchanged.is_today is False

    @pytest.mark.asyncio
    async def test_schedule_prompt_only_lists_own_tasks(self, stub_llm, task_repo, chat_repo):
        await task_repo.create_task(2, TaskCreate(title="别人的任务"))
        llm = stub_llm("Tool：\\box{scheduleOptimization}", "{}")
        await _service(llm, task_repo, chat_repo).chat(1, "优化")

        assert "别人的任务" not in llm.calls[1]["user"]


class TestMalformedCompletions:
    @pytest.mark.asyncio
    async def test_oversized_numbers_are_logged_not_raised(self, stub_llm, task_repo, chat_repo):
        completion = '{"optimizationSummary": "s", "taskUpdates": [{"id": ' + "9" * 5000 + "}]}"
        llm = stub_llm("Tool：\\box{scheduleOptimization}", completion)
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "优化")

        assert outcome.tool is Intent.SCHEDULE_OPTIMIZATION
        assert outcome.params is None
        assert len(await chat_repo.list_chats(1)) == 1

    @pytest.mark.asyncio
    async def test_huge_create_priority_is_logged_not_raised(self, stub_llm, task_repo, chat_repo):
        completion = "title：a，description：b，priority：" + "9" * 5000 + "，category：学习，isToday：true"
        llm = stub_llm("Tool：\\box{createTask}", completion)
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "建任务")

        assert outcome.params is None
        assert outcome.created_task is None
        assert len(await chat_repo.list_chats(1)) == 1


class TestFallback:
    @pytest.mark.asyncio
    async def test_upstream_failure_becomes_fallback(self, stub_llm, task_repo, chat_repo):
        llm = stub_llm(LLMError("siliconflow", "timeout"), LLMError("siliconflow", "timeout"))
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "你好")

        assert outcome.tool is Intent.GENERAL
        assert _is_fallback(outcome.chat.response)
        assert DEFAULT_MODEL in outcome.chat.response
        assert len(await chat_repo.list_chats(1)) == 1

    @pytest.mark.asyncio
    async def test_second_stage_failure(self, stub_llm, task_repo, chat_repo):
        llm = stub_llm("Tool：\\box{createTask}", LLMError("siliconflow", "502"))
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "建任务")

        assert outcome.tool is Intent.CREATE_TASK
        assert outcome.params is None
        assert _is_fallback(outcome.chat.response)
        assert "工具: createTask" in outcome.chat.response

    @pytest.mark.asyncio
    async def test_without_client(self, task_repo, chat_repo):
        outcome = await _service(None, task_repo, chat_repo).chat(1, "你好")

        assert outcome.tool is Intent.GENERAL
        assert _is_fallback(outcome.chat.response)

    def test_fallback_message_mentions_model_and_tool(self):
        message = fallback_message("m1", "goalSetting")
        assert "模型: m1" in message
        assert "工具: goalSetting" in message


class TestModelResolution:
    def test_default_and_alias(self, task_repo, chat_repo):
        service = _service(None, task_repo, chat_repo)
        assert service.resolve_model(None) == DEFAULT_MODEL
        assert service.resolve_model("gpt-3.5-turbo") == DEFAULT_MODEL
        assert service.resolve_model("deepseek-chat") == "deepseek-chat"

    @pytest.mark.asyncio
    async def test_requested_model_forwarded(self, stub_llm, task_repo, chat_repo):
        llm = stub_llm("hi", "hello")
        outcome = await _service(llm, task_repo, chat_repo).chat(1, "hi", model="deepseek-chat")

        assert {c["model"] for c in llm.calls} == {"deepseek-chat"}
        assert outcome.chat.model == "deepseek-chat"
