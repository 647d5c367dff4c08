from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from myday.api.v1.middleware.error_handler import ErrorHandlerMiddleware
from myday.api.v1.middleware.logging_middleware import LoggingMiddleware
from myday.api.v1.router import v1_router
from myday.config import settings
from myday.core.tasks.category_sweep import CategorySweepTimer
from myday.core.tasks.repository import ChatLogRepository, TaskRepository
from myday.dependencies import build_llm_client
from myday.utils.logging import get_logger, setup_logging


def init_state(app: FastAPI) -> None:
    """Attach the stores, the category timer and the LLM client to ``app.state``."""
    app.state.task_repository = TaskRepository()
    app.state.chat_repository = ChatLogRepository()
    app.state.category_timer = CategorySweepTimer(
        app.state.task_repository,
        interval_ms=settings.category_sweep_interval_ms,
    )
    app.state.llm_client = build_llm_client()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(debug=settings.debug)
    logger = get_logger("startup")
    logger.info(
        "Starting My Day assistant service",
        version="0.1.0",
        llm_provider=settings.llm_provider,
        llm_model=settings.llm_model,
    )

    init_state(app)
    if settings.category_sweep_enabled:
        app.state.category_timer.start()

    yield

    logger.info("Shutting down")
    await app.state.category_timer.stop()


def create_app() -> FastAPI:
    app = FastAPI(
        title="My Day Assistant",
        description="Task management with an AI assistant that creates and optimises tasks",
        version="0.1.0",
        lifespan=lifespan,
    )

    # The last middleware added is the outermost layer.
    # 1. Error handler (innermost -- turns route exceptions into JSON)
    app.add_middleware(ErrorHandlerMiddleware)
    # 2. Request/response logger (sees the final status code)
    app.add_middleware(LoggingMiddleware)
    # 3. CORS (outermost -- error responses get CORS headers too)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("myday.main:app", host=settings.host, port=settings.port)
