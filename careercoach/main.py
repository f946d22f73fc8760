"""
Точка входа FastAPI.

lifespan: подключение/отключение MongoDB при старте/остановке.
CORS, rate limit, exception handlers (структурированные ответы), подключение роутеров.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from careercoach.core.config import settings
from careercoach.core.database import close_mongo_connection, connect_to_mongo
from careercoach.middleware.rate_limit import RateLimitMiddleware
from careercoach.resume.errors import ExportError, ExternalServiceError, ResumeValidationError
from careercoach.routers import health, insights, interview, resumes, users, webhooks
from careercoach.schemas.common import ErrorResponse, FieldErrorItem, SuccessResponse

# Логирование
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл: при старте: подключение к Mongo, при остановке: отключение."""
    logger.info("Starting up: connecting to MongoDB...")
    connect_to_mongo()
    yield
    logger.info("Shutting down: closing MongoDB...")
    close_mongo_connection()


app = FastAPI(
    title="Career Coach API",
    description="AI career coach: онбординг, инсайты по индустрии, конструктор резюме, квизы. "
    "Структурированные ответы: success, data / error, message.",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: список origins из конфига (добавляем первым, выполняется после rate limit)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Rate limit по IP: выполняется первым
app.add_middleware(RateLimitMiddleware)


def _error(status_code: int, error: str, message: str, errors: list | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


# Обработчик неожиданных исключений: структурированный ответ
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    return _error(500, "internal_server_error", "An unexpected error occurred")


# Обработчик HTTPException: структурированный ответ
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail and "message" in detail:
        response = _error(exc.status_code, detail["error"], detail["message"])
    else:
        response = _error(exc.status_code, "request_failed", str(detail) if detail else "Request failed")
    if exc.headers:
        response.headers.update(exc.headers)
    return response


# Обработчик валидации запроса (422): структурированный ответ
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    msg = "; ".join(f"{e.get('loc', [])}: {e.get('msg', '')}" for e in errors[:3])
    items = [
        FieldErrorItem(field=".".join(str(p) for p in e.get("loc", ()) if p != "body"), message=e.get("msg", ""))
        for e in errors
    ]
    return _error(422, "validation_error", msg or "Validation failed", items)


# Ошибки формы резюме: все поля сразу, чтобы показать рядом с каждым
@app.exception_handler(ResumeValidationError)
async def resume_validation_handler(request: Request, exc: ResumeValidationError):
    items = [FieldErrorItem(field=e.field, message=e.message) for e in exc.errors]
    return _error(422, "validation_error", str(exc), items)


# AI недоступен: временная ошибка, состояние формы на клиенте не трогаем
@app.exception_handler(ExternalServiceError)
async def external_service_handler(request: Request, exc: ExternalServiceError):
    logger.warning("External service %s failed on %s: %s", exc.service, request.url.path, exc)
    return _error(502, f"{exc.service}_service_unavailable", str(exc))


# Хранилище недоступно
@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.error("MongoDB error on %s: %s", request.url.path, exc)
    return _error(503, "storage_unavailable", "Storage is temporarily unavailable, try again")


# Экспорт PDF не удался: редактирование продолжается
@app.exception_handler(ExportError)
async def export_error_handler(request: Request, exc: ExportError):
    return _error(500, "export_failed", str(exc))


# Корень и документация: структурированный ответ
@app.get("/", response_model=SuccessResponse[dict])
def root():
    return SuccessResponse(data={"message": "Career Coach API", "docs": "/docs", "health": "/health"})


# Роутеры
app.include_router(health.router)
app.include_router(webhooks.router)
app.include_router(users.router)
app.include_router(insights.router)
app.include_router(resumes.router)
app.include_router(interview.router)
