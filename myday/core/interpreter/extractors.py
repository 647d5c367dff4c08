"""Per-intent parameter extraction from the second-stage LLM completion.

Each intent owns an :class:`IntentExtractor`.  The delimited-text intents
(``createTask``, ``analyzeTasks``, ``goalSetting``) use one fixed-order
regular expression over full-width punctuation; ``scheduleOptimization``
goes through the JSON locate/repair/validate path.  New intents register
an extractor in :data:`EXTRACTORS` and do not touch the shared repair code.

Extraction is all-or-nothing per record: a completion that does not match
the expected format produces ``None``, never a partially filled object.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from typing import Any

from myday.core.interpreter.categories import normalize_category
from myday.core.interpreter.json_repair import extract_json_object
from myday.core.interpreter.models import (
    AnalyzeTasksParams,
    CreateTaskParams,
    ExtractionResult,
    GoalSettingParams,
    Intent,
    ScheduleOptimizationParams,
    TaskUpdate,
)
from myday.utils.logging import get_logger

logger = get_logger("interpreter.extractor")

MIN_PRIORITY = 0
MAX_PRIORITY = 3

DEFAULT_OPTIMIZATION_SUMMARY = "优化建议"


def clamp_priority(value: int) -> int:
    return max(MIN_PRIORITY, min(MAX_PRIORITY, value))


class IntentExtractor(ABC):
    """Turns a completion into the parameter model for one intent."""

    intent: Intent

    @abstractmethod
    def extract(self, text: str) -> ExtractionResult:
        """Return the parsed parameters, or ``None`` when *text* does not fit."""


# ---------------------------------------------------------------------------
# Delimited-text extractors
# ---------------------------------------------------------------------------


class CreateTaskExtractor(IntentExtractor):
    """Parses ``title：…，description：…，priority：N，category：…，isToday：bool``."""

    intent = Intent.CREATE_TASK

    PATTERN = re.compile(
        r"title：(.*?)，description：(.*?)，priority：(\d{1,9})，"
        r"category：(.*?)，isToday：(true|false)"
    )

    def match_fields(self, text: str) -> dict[str, Any] | None:
        """Return the captured fields before any normalisation."""
        match = self.PATTERN.search(text or "")
        if match is None:
            return None
        title, description, priority, category, is_today = match.groups()
        return {
            "title": title,
            "description": description,
            "priority": int(priority),
            "category": category,
            "is_today": is_today == "true",
        }

    def extract(self, text: str) -> CreateTaskParams | None:
        fields = self.match_fields(text)
        if fields is None:
            logger.info("create_task_fields_not_matched", text_len=len(text or ""))
            return None

        logger.debug("create_task_fields_matched", **fields)
        fields["priority"] = clamp_priority(fields["priority"])
        fields["category"] = normalize_category(fields["category"])
        return CreateTaskParams(**fields)


class _DelimitedExtractor(IntentExtractor):
    """Three labelled fields separated by full-width commas on one line."""

    pattern: re.Pattern[str]
    model: type
    field_names: tuple[str, str, str]

    def extract(self, text: str):
        match = self.pattern.search(text or "")
        if match is None:
            logger.info(
                "delimited_fields_not_matched",
                tool=self.intent.value,
                text_len=len(text or ""),
            )
            return None

        values = [group.strip() for group in match.groups()]
        logger.debug("delimited_fields_matched", tool=self.intent.value, values=values)
        return self.model(**dict(zip(self.field_names, values)))


class AnalyzeTasksExtractor(_DelimitedExtractor):
    intent = Intent.ANALYZE_TASKS
    pattern = re.compile(r"分析类型：(.*?)，时间范围：(.*?)，重点：([^\n]*)")
    model = AnalyzeTasksParams
    field_names = ("analysis_type", "time_range", "focus")


class GoalSettingExtractor(_DelimitedExtractor):
    intent = Intent.GOAL_SETTING
    pattern = re.compile(r"目标类型：(.*?)，时间框架：(.*?)，具体目标：([^\n]*)")
    model = GoalSettingParams
    field_names = ("goal_type", "time_frame", "specific_goal")


# ---------------------------------------------------------------------------
# JSON extractor
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid id or priority
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _is_integral_number(value: Any) -> bool:
    return _is_number(value) and (isinstance(value, int) or value.is_integer())


def validate_task_update(entry: Any) -> TaskUpdate | None:
    """Build a :class:`TaskUpdate` from *entry* or reject it wholesale.

    Required: integral ``id``; numeric ``priority``; string ``title``,
    ``description`` and ``category``; boolean ``isToday``.  ``reason`` is
    kept when it is a string.  A fractional priority is rounded, then
    clamped into the priority range.
    """
    if not isinstance(entry, dict):
        return None
    if not (
        _is_integral_number(entry.get("id"))
        and isinstance(entry.get("title"), str)
        and isinstance(entry.get("description"), str)
        and _is_number(entry.get("priority"))
        and isinstance(entry.get("category"), str)
        and isinstance(entry.get("isToday"), bool)
    ):
        return None

    reason = entry.get("reason")
    return TaskUpdate(
        id=int(entry["id"]),
        title=entry["title"],
        description=entry["description"],
        priority=clamp_priority(round(entry["priority"])),
        category=normalize_category(entry["category"]),
        is_today=entry["isToday"],
        reason=reason if isinstance(reason, str) else "",
    )


class ScheduleOptimizationExtractor(IntentExtractor):
    """Parses the embedded ``{"optimizationSummary", "taskUpdates"}`` object."""

    intent = Intent.SCHEDULE_OPTIMIZATION

    def extract(self, text: str) -> ScheduleOptimizationParams | None:
        data = extract_json_object(text)
        if data is None:
            return None

        summary = data.get("optimizationSummary")
        summary = summary if isinstance(summary, str) and summary else None

        raw_updates = data.get("taskUpdates")
        if not isinstance(raw_updates, list):
            logger.info("task_updates_missing", kind=type(raw_updates).__name__)
            raw_updates = []

        updates: list[TaskUpdate] = []
        for entry in raw_updates:
            update = validate_task_update(entry)
            if update is not None:
                updates.append(update)

        dropped = len(raw_updates) - len(updates)
        logger.info(
            "task_updates_validated",
            proposed=len(raw_updates),
            valid=len(updates),
            dropped=dropped,
        )

        if not updates and summary is None:
            return None

        return ScheduleOptimizationParams(
            optimization_summary=summary or DEFAULT_OPTIMIZATION_SUMMARY,
            task_updates=updates,
            dropped_count=dropped,
        )


class GeneralExtractor(IntentExtractor):
    intent = Intent.GENERAL

    def extract(self, text: str) -> None:
        return None


EXTRACTORS: dict[Intent, IntentExtractor] = {
    extractor.intent: extractor
    for extractor in (
        CreateTaskExtractor(),
        AnalyzeTasksExtractor(),
        ScheduleOptimizationExtractor(),
        GoalSettingExtractor(),
        GeneralExtractor(),
    )
}


def extract(intent: Intent, completion_text: str) -> ExtractionResult:
    """Extract the parameters for *intent* from *completion_text*.

    Returns ``None`` for ``general`` and for any completion that does not
    fit the intent's expected format.
    """
    extractor = EXTRACTORS.get(intent)
    if extractor is None:
        return None
    return extractor.extract(completion_text)
