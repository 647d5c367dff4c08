"""Liveness probe.  The only route that needs no bearer token."""

from fastapi import APIRouter, Request

from myday.api.v1.schemas.common import HealthResponse
from myday.config import settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service="myday-assistant",
        version="0.1.0",
        llm_provider=settings.llm_provider,
        llm_configured=getattr(request.app.state, "llm_client", None) is not None,
    )
