"""Control endpoints for the background category sweep."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from myday.api.v1.schemas.common import MessageResponse
from myday.api.v1.schemas.task import (
    SweepReportResponse,
    TimerIntervalRequest,
    TimerStatusResponse,
)
from myday.core.tasks.category_sweep import CategorySweepTimer
from myday.dependencies import get_category_timer, get_current_user_id

router = APIRouter(prefix="/tasks/timer", dependencies=[Depends(get_current_user_id)])


@router.get("/status", response_model=TimerStatusResponse)
async def timer_status(
    timer: CategorySweepTimer = Depends(get_category_timer),
) -> TimerStatusResponse:
    return TimerStatusResponse(**asdict(timer.status()))


@router.post("/start", response_model=MessageResponse)
async def start_timer(
    timer: CategorySweepTimer = Depends(get_category_timer),
) -> MessageResponse:
    started = timer.start()
    return MessageResponse(
        message="Category sweep timer started" if started else "Category sweep timer already running",
    )


@router.post("/stop", response_model=MessageResponse)
async def stop_timer(
    timer: CategorySweepTimer = Depends(get_category_timer),
) -> MessageResponse:
    stopped = await timer.stop()
    return MessageResponse(
        message="Category sweep timer stopped" if stopped else "Category sweep timer was not running",
    )


@router.post("/trigger", response_model=SweepReportResponse | None)
async def trigger_sweep(
    timer: CategorySweepTimer = Depends(get_category_timer),
) -> SweepReportResponse | None:
    report = await timer.trigger()
    return SweepReportResponse(**asdict(report)) if report else None


@router.put("/interval", response_model=MessageResponse)
async def set_timer_interval(
    request: TimerIntervalRequest,
    timer: CategorySweepTimer = Depends(get_category_timer),
) -> MessageResponse:
    await timer.set_interval(request.interval_ms)
    return MessageResponse(message=f"Category sweep interval set to {request.interval_ms / 1000} seconds")
