"""
Подключение к MongoDB.

Один клиент на приложение, подключение при старте (lifespan в main),
получение БД/коллекций через функции. URI только из config (.env).
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from careercoach.core.config import settings

logger = logging.getLogger(__name__)

# Клиент создаётся при старте приложения (main.py lifespan), здесь только ссылка
_client: MongoClient | None = None


def get_client() -> MongoClient:
    """Вернуть клиент MongoDB. Вызывать после connect_to_mongo()."""
    if _client is None:
        raise RuntimeError("MongoDB not connected. Call connect_to_mongo() first.")
    return _client


def get_db() -> Database:
    """Вернуть экземпляр БД. Используй в роутерах/сервисах."""
    return get_client()[settings.MONGO_DB_NAME]


def get_users_collection() -> Collection:
    """Коллекция users. Строки создаёт вебхук провайдера идентификации."""
    return get_db()["users"]


def get_resumes_collection() -> Collection:
    """Коллекция resumes: не больше одного резюме на пользователя."""
    return get_db()["resumes"]


def get_insights_collection() -> Collection:
    """Коллекция industry_insights, ключ: индустрия."""
    return get_db()["industry_insights"]


def get_assessments_collection() -> Collection:
    """Коллекция assessments (результаты квизов)."""
    return get_db()["assessments"]


def ensure_indexes() -> None:
    """Уникальные индексы, на которые опирается upsert/дедупликация."""
    get_users_collection().create_index([("external_id", ASCENDING)], unique=True)
    get_resumes_collection().create_index([("user_id", ASCENDING)], unique=True)
    get_insights_collection().create_index([("industry", ASCENDING)], unique=True)
    get_assessments_collection().create_index([("user_id", ASCENDING), ("created_at", ASCENDING)])


def connect_to_mongo() -> None:
    """Подключиться к MongoDB. Вызывается в lifespan при старте."""
    global _client  # noqa: PLW0603
    _client = MongoClient(settings.MONGO_URI)
    # Проверка доступности
    _client.admin.command("ping")
    ensure_indexes()
    logger.info("MongoDB connected, database=%s", settings.MONGO_DB_NAME)


def close_mongo_connection() -> None:
    """Закрыть соединение. Вызывается в lifespan при остановке."""
    global _client
    if _client:
        _client.close()
        _client = None
