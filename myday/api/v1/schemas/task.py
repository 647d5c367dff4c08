"""Request/response schemas for task management and the category timer."""

from datetime import datetime

from pydantic import Field

from myday.core.interpreter.models import CamelModel


class OrderedTask(CamelModel):
    id: int
    today_order: int


class ReorderRequest(CamelModel):
    ordered_tasks: list[OrderedTask]


class TimerStatusResponse(CamelModel):
    is_running: bool
    last_run_time: datetime | None
    run_count: int
    interval_ms: int


class TimerIntervalRequest(CamelModel):
    interval_ms: int = Field(..., description="Sweep interval in milliseconds (>= 1000)")


class SweepReportResponse(CamelModel):
    total: int
    updated: int
    unchanged: int
    skipped: int = 0
