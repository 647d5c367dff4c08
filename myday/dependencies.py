"""FastAPI dependency functions for injection into endpoint handlers.

Long-lived objects (repositories, the category timer, the LLM client) are
created during the lifespan and stored on ``app.state``; the functions here
simply look them up.  :class:`ChatService` is cheap and built per request.
"""

from __future__ import annotations

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from myday.config import settings
from myday.core.chat.service import ChatService
from myday.core.llm.client import LOCAL_PROVIDERS, LLMClient
from myday.core.tasks.category_sweep import CategorySweepTimer
from myday.core.tasks.repository import ChatLogRepository, TaskRepository
from myday.utils.exceptions import AuthenticationError, LLMError
from myday.utils.logging import get_logger

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> int:
    """Return the ``userId`` claim of a valid bearer token."""
    if credentials is None:
        raise AuthenticationError("Missing bearer token")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError as exc:
        logger.warning("jwt_verification_failed", error=str(exc))
        raise AuthenticationError("Invalid or expired token") from exc

    user_id = payload.get("userId")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise AuthenticationError("Token does not carry a user id")
    return user_id


# ---------------------------------------------------------------------------
# Stores (initialised during app lifespan)
# ---------------------------------------------------------------------------

def get_task_repository(request: Request) -> TaskRepository:
    return request.app.state.task_repository


def get_chat_repository(request: Request) -> ChatLogRepository:
    return request.app.state.chat_repository


def get_category_timer(request: Request) -> CategorySweepTimer:
    return request.app.state.category_timer


# ---------------------------------------------------------------------------
# LLM client (optional -- None when no API key is configured)
# ---------------------------------------------------------------------------

def _resolve_api_key() -> str:
    """Pick the API key for the configured provider.

    ``ANTHROPIC_API_KEY`` wins for the anthropic provider; every provider
    falls back to the generic ``LLM_API_KEY``.
    """
    if settings.llm_provider == "anthropic" and settings.anthropic_api_key:
        return settings.anthropic_api_key
    return settings.llm_api_key


def build_llm_client() -> LLMClient | None:
    """Build the LLM client from settings.

    Returns ``None`` when no usable API key is configured (and the provider
    needs one) or the provider cannot be initialised, so chat degrades to
    fallback messages instead of failing.
    """
    api_key = _resolve_api_key()
    provider = settings.llm_provider

    if not api_key and provider not in LOCAL_PROVIDERS:
        logger.warning("llm_client_disabled", provider=provider, reason="missing API key")
        return None

    try:
        return LLMClient(
            provider,
            api_key,
            settings.llm_model,
            base_url=settings.llm_base_url or None,
            timeout=settings.llm_timeout_seconds,
            temperature=settings.llm_temperature,
        )
    except LLMError as exc:
        logger.error("llm_client_init_failed", provider=provider, error=str(exc))
        return None


def get_llm_client(request: Request) -> LLMClient | None:
    return getattr(request.app.state, "llm_client", None)


# ---------------------------------------------------------------------------
# Chat service
# ---------------------------------------------------------------------------

def get_chat_service(
    request: Request,
    tasks: TaskRepository = Depends(get_task_repository),
    chats: ChatLogRepository = Depends(get_chat_repository),
) -> ChatService:
    """Construct a :class:`ChatService` wired to the shared stores and LLM."""
    return ChatService(
        llm_client=get_llm_client(request),
        tasks=tasks,
        chats=chats,
        default_model=settings.llm_model,
    )
