from fastapi import APIRouter

from myday.api.v1.endpoints import category_timer, chat, health, tasks

v1_router = APIRouter()
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(chat.router, tags=["ai"])
# Timer routes go before /tasks/{task_id}.
v1_router.include_router(category_timer.router, tags=["category-timer"])
v1_router.include_router(tasks.router, tags=["tasks"])
