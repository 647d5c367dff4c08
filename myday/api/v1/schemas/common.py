"""Response bodies shared by several routers."""

from pydantic import BaseModel

from myday.core.interpreter.models import CamelModel


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx produced by the error middleware."""

    error: str
    detail: str = ""


class MessageResponse(BaseModel):
    message: str
    count: int | None = None


class HealthResponse(CamelModel):
    status: str
    service: str
    version: str
    llm_provider: str
    llm_configured: bool
