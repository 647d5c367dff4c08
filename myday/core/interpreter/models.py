"""Data models produced by the AI response interpreter.

Every parameter model serialises with camelCase keys (``isToday``,
``taskUpdates``) because that is the shape the web client and the task
store exchange.  Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Intent(str, Enum):
    """Tool names the first-stage LLM call can select."""

    CREATE_TASK = "createTask"
    ANALYZE_TASKS = "analyzeTasks"
    SCHEDULE_OPTIMIZATION = "scheduleOptimization"
    GOAL_SETTING = "goalSetting"
    GENERAL = "general"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateTaskParams(CamelModel):
    """A single task to create, parsed from a delimited ``createTask`` line."""

    title: str
    description: str
    priority: int
    category: str
    is_today: bool


class AnalyzeTasksParams(CamelModel):
    analysis_type: str
    time_range: str
    focus: str


class GoalSettingParams(CamelModel):
    goal_type: str
    time_frame: str
    specific_goal: str


class TaskUpdate(CamelModel):
    """A fully specified edit to one existing task.

    Only built from entries that passed field-type validation; there is no
    partially populated ``TaskUpdate``.
    """

    id: int
    title: str
    description: str
    priority: int
    category: str
    is_today: bool
    reason: str = ""


class ScheduleOptimizationParams(CamelModel):
    """Summary text plus the validated subset of proposed task edits.

    Attributes:
        optimization_summary: Free text shown to the user.
        task_updates: Entries that passed validation (possibly empty).
        dropped_count: Number of proposed entries discarded by validation.
    """

    optimization_summary: str
    task_updates: list[TaskUpdate] = []
    dropped_count: int = 0


ExtractionResult = Union[
    CreateTaskParams,
    AnalyzeTasksParams,
    ScheduleOptimizationParams,
    GoalSettingParams,
    None,
]
