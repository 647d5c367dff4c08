"""Tests for tool-marker intent classification."""
import pytest

from myday.core.interpreter.classifier import classify_intent, find_tool_marker
from myday.core.interpreter.models import Intent


class TestClassifyIntent:
    @pytest.mark.parametrize("intent", list(Intent))
    def test_every_tool_name_is_recognised(self, intent):
        text = f"用户需要这个功能\n\nTool：\\box{{{intent.value}}}"
        assert classify_intent(text) is intent

    def test_marker_inside_prose(self):
        text = "用户需要创建一个任务，所以根据tool列表，需要调用createTask\n\nTool：\\box{createTask}\n谢谢"
        assert classify_intent(text) is Intent.CREATE_TASK

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "我来帮您看看今天的安排。",
            "Tool: \\box{createTask}",  # half-width colon
            "Tool：box{createTask}",  # missing backslash
            "Tool：\\box{}",
            "createTask",
        ],
    )
    def test_missing_marker_is_general(self, text):
        assert classify_intent(text) is Intent.GENERAL

    def test_unknown_tool_is_general(self):
        assert classify_intent("Tool：\\box{deleteEverything}") is Intent.GENERAL

    def test_none_is_general(self):
        assert classify_intent(None) is Intent.GENERAL

    def test_first_marker_wins(self):
        text = "Tool：\\box{goalSetting}\nTool：\\box{createTask}"
        assert classify_intent(text) is Intent.GOAL_SETTING


class TestFindToolMarker:
    def test_returns_name(self):
        assert find_tool_marker("Tool：\\box{analyzeTasks}") == "analyzeTasks"

    def test_strips_whitespace(self):
        assert find_tool_marker("Tool：\\box{ createTask }") == "createTask"

    def test_no_marker(self):
        assert find_tool_marker("nothing here") is None
