import os

# Settings require a secret; set one before any myday module is imported.
os.environ.setdefault("JWT_SECRET", "myday-test-secret-with-enough-bytes-for-hs256")
os.environ.setdefault("LLM_API_KEY", "")
os.environ.setdefault("CATEGORY_SWEEP_ENABLED", "false")

import pytest

from myday.core.tasks.repository import ChatLogRepository, TaskRepository


class StubLLM:
    """Returns scripted completions in order; an Exception instance is raised."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    async def complete(self, system, user, model=None, max_tokens=4096):
        self.calls.append(
            {"system": system, "user": user, "model": model, "max_tokens": max_tokens}
        )
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def stub_llm():
    return StubLLM


@pytest.fixture
def task_repo():
    return TaskRepository()


@pytest.fixture
def chat_repo():
    return ChatLogRepository()


@pytest.fixture
def create_task_completion():
    return (
        "answer：\\box{好的！我将为您创建任务。}\n"
        "Tool：\\box{createTask}\n"
        "title：完成数学第五章作业，description：数学第5章习题练习，"
        "priority：2，category：学习，isToday：true"
    )


@pytest.fixture
def optimization_completion():
    return """好的，根据您的要求，任务修改内容如下：

{
  "optimizationSummary": "提升了学习任务的优先级",
  "taskUpdates": [
    {
      "id": 1,
      "title": "论文初稿",
      "description": "撰写人工智能伦理论文初稿",
      "priority": 3,
      "category": "学习",
      "isToday": true,
      "reason": "学习任务优先"
    },
    {
      "id": 2,
      "title": "买菜",
      "priority": 1,
      "category": "购物",
      "isToday": false,
      "reason": "缺少描述"
    }
  ]
}

祝您高效完成！"""
