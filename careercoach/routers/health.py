"""
Health check: жив ли сервис, доступна ли БД.

Эндпоинт для оркестраторов (Docker, k8s) и мониторинга. Не попадает под rate limit.
"""
from fastapi import APIRouter
from pymongo.errors import PyMongoError

from careercoach.core.config import settings
from careercoach.core.database import get_client
from careercoach.schemas.common import SuccessResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=SuccessResponse[dict])
def health():
    """Проверка живости сервиса и MongoDB."""
    try:
        get_client().admin.command("ping")
        mongo = "connected"
    except (RuntimeError, PyMongoError):
        mongo = "disconnected"
    return SuccessResponse(data={"status": "ok", "mongo": mongo, "ai_configured": bool(settings.AI_API_KEY)})
