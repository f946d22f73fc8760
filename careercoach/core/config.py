"""
Конфигурация приложения из переменных окружения.

Один класс Settings (pydantic-settings), все секреты и настройки читаются из .env.
В коде используем только settings.*, не os.getenv.
"""
import base64
import binascii

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки из env."""

    # MongoDB: URI из .env
    MONGO_URI: str = ""
    MONGO_DB_NAME: str = "careercoach"

    # CORS: список origin через запятую в .env
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Rate limit: запросов с одного IP за окно (например, "100/minute")
    RATE_LIMIT: str = "100/minute"

    # Логирование
    LOG_LEVEL: str = "INFO"

    # JWT сессии внешнего провайдера идентификации (sub = id пользователя у провайдера)
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"

    # Подпись вебхуков провайдера (формат "whsec_<base64>" или сырой секрет)
    WEBHOOK_SECRET: str = ""
    WEBHOOK_TOLERANCE_SECONDS: int = 300

    # AI: OpenAI-совместимый chat completions endpoint
    AI_API_KEY: str = ""
    AI_BASE_URL: str = "https://api.openai.com/v1"
    AI_MODEL: str = "gpt-4o-mini"
    AI_TIMEOUT_SECONDS: float = 60.0

    # Ожидание пользователя, которого создаёт вебхук (онбординг)
    PROVISIONING_ATTEMPTS: int = 5
    PROVISIONING_BASE_DELAY: float = 0.5
    PROVISIONING_MAX_DELAY: float = 2.0

    # Инсайты по индустрии обновляются раз в N дней
    INSIGHT_TTL_DAYS: int = 7

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("WEBHOOK_SECRET")
    @classmethod
    def _webhook_secret(cls, v: str) -> str:
        """Секрет вида whsec_<base64> проверяем при старте, а не на каждом вебхуке."""
        v = v.strip()
        if v.startswith("whsec_"):
            try:
                base64.b64decode(v[len("whsec_"):], validate=True)
            except binascii.Error:
                raise ValueError("WEBHOOK_SECRET: whsec_ prefix must be followed by base64")
        return v

    def cors_list(self) -> list[str]:
        """CORS origins как список для CORSMiddleware."""
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]

    def rate_limit_parsed(self) -> tuple[int, int]:
        """RATE_LIMIT разобрать в (max_requests, window_seconds). Пример: '100/minute' -> (100, 60)."""
        s = self.RATE_LIMIT.strip().lower().replace(" ", "")
        if "/" not in s:
            return 100, 60
        part, window = s.split("/", 1)
        try:
            max_req = int(part)
        except ValueError:
            return 100, 60
        if window in ("minute", "min", "m"):
            return max_req, 60
        if window in ("hour", "h"):
            return max_req, 3600
        if window in ("second", "sec", "s"):
            return max_req, 1
        return max_req, 60


# Глобальный экземпляр: импортируй: from careercoach.core.config import settings
settings = Settings()
