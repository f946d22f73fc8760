"""
Кэш инсайтов по индустрии в MongoDB.

Инсайт общий для всех пользователей одной индустрии. Генерируется при первом
обращении и перегенерируется после next_update. Если AI недоступен, а старая
запись есть, отдаём старую.
"""
import logging
from datetime import datetime, timedelta, timezone

from careercoach.core.config import settings
from careercoach.core.database import get_insights_collection
from careercoach.resume.errors import ExternalServiceError
from careercoach.services import ai

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """MongoDB отдаёт naive datetime в UTC: привести к aware."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def is_stale(doc: dict, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return as_utc(doc["next_update"]) <= now


async def get_or_create_insight(industry: str) -> dict:
    """Вернуть документ инсайта для индустрии, при необходимости сгенерировав его."""
    coll = get_insights_collection()
    doc = coll.find_one({"industry": industry})
    if doc is not None and not is_stale(doc):
        return doc

    try:
        data = await ai.generate_industry_insights(industry)
    except ExternalServiceError:
        if doc is not None:
            logger.warning("Insight refresh failed for %s, serving stale copy", industry)
            return doc
        raise

    now = datetime.now(timezone.utc)
    coll.update_one(
        {"industry": industry},
        {
            "$set": {
                **data.model_dump(),
                "last_updated": now,
                "next_update": now + timedelta(days=settings.INSIGHT_TTL_DAYS),
            },
            "$setOnInsert": {"created_at": now},
        },
        upsert=True,
    )
    logger.info("Industry insight generated for %s", industry)
    return coll.find_one({"industry": industry})
