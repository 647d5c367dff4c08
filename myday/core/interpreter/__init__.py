"""AI response interpreter -- intent classification and parameter extraction.

Public API::

    from myday.core.interpreter import classify_intent, extract, normalize_category
"""

from myday.core.interpreter.categories import CANONICAL_CATEGORIES, normalize_category
from myday.core.interpreter.classifier import classify_intent
from myday.core.interpreter.extractors import extract
from myday.core.interpreter.models import (
    AnalyzeTasksParams,
    CreateTaskParams,
    ExtractionResult,
    GoalSettingParams,
    Intent,
    ScheduleOptimizationParams,
    TaskUpdate,
)

__all__ = [
    "AnalyzeTasksParams",
    "CANONICAL_CATEGORIES",
    "CreateTaskParams",
    "ExtractionResult",
    "GoalSettingParams",
    "Intent",
    "ScheduleOptimizationParams",
    "TaskUpdate",
    "classify_intent",
    "extract",
    "normalize_category",
]
