"""
Вебхуки провайдера идентификации: создание и удаление пользователей.

Подпись проверяется по заголовкам webhook-id / webhook-timestamp / webhook-signature
(провайдеры на svix шлют их с префиксом svix-, принимаем оба).
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from careercoach.core.config import settings
from careercoach.core.database import get_users_collection
from careercoach.core.security import verify_webhook
from careercoach.schemas.common import ErrorResponse, SuccessResponse
from careercoach.schemas.webhook import IdentityEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def _header(request: Request, name: str) -> str:
    return request.headers.get(f"webhook-{name}") or request.headers.get(f"svix-{name}") or ""


def _create_user(event: IdentityEvent) -> None:
    now = datetime.now(timezone.utc)
    try:
        get_users_collection().insert_one(
            {
                "external_id": event.data.id,
                "email": event.data.primary_email(),
                "name": event.data.full_name(),
                "image_url": event.data.image_url,
                "industry": None,
                "bio": None,
                "experience": None,
                "skills": [],
                "created_at": now,
                "updated_at": now,
            }
        )
        logger.info("User created for external id %s", event.data.id)
    except DuplicateKeyError:
        logger.info("User %s already exists, skipping", event.data.id)


def _delete_user(event: IdentityEvent) -> None:
    result = get_users_collection().delete_one({"external_id": event.data.id})
    if result.deleted_count:
        logger.info("Deleted user %s", event.data.id)
    else:
        logger.info("User %s not found for deletion", event.data.id)


@router.post(
    "/identity",
    response_model=SuccessResponse[dict],
    responses={400: {"model": ErrorResponse}, 501: {"model": ErrorResponse}},
)
async def identity_webhook(request: Request):
    """Принять событие user.created / user.deleted. Остальные типы: подтверждаем и игнорируем."""
    if not settings.WEBHOOK_SECRET:
        raise HTTPException(501, detail={"error": "not_configured", "message": "Webhook secret not configured"})

    body = await request.body()
    msg_id, timestamp, signature = _header(request, "id"), _header(request, "timestamp"), _header(request, "signature")
    if not (msg_id and timestamp and signature):
        raise HTTPException(400, detail={"error": "missing_headers", "message": "Missing webhook signature headers"})
    if not verify_webhook(
        settings.WEBHOOK_SECRET,
        msg_id,
        timestamp,
        signature,
        body,
        tolerance=settings.WEBHOOK_TOLERANCE_SECONDS,
    ):
        logger.warning("Webhook signature verification failed for %s", msg_id)
        raise HTTPException(400, detail={"error": "invalid_signature", "message": "Invalid signature"})

    try:
        event = IdentityEvent.model_validate_json(body)
    except ValidationError:
        raise HTTPException(400, detail={"error": "invalid_payload", "message": "Malformed webhook payload"})

    if event.type == "user.created":
        _create_user(event)
    elif event.type == "user.deleted":
        _delete_user(event)
    else:
        logger.debug("Ignoring webhook event %s", event.type)

    return SuccessResponse(data={"received": True, "type": event.type})
