"""
Rate limit по IP: ограничение числа запросов с одного клиента за окно времени.

Лимит задаётся в config: RATE_LIMIT (например, "100/minute").
При превышении: 429, заголовок Retry-After и структурированный ответ ErrorResponse.
"""
import math
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from careercoach.core.config import settings
from careercoach.schemas.common import ErrorResponse

EXEMPT_PATHS = frozenset({"/health"})


def _get_client_ip(request: Request) -> str:
    """IP клиента: X-Forwarded-For (первый) или request.client.host."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class FixedWindowCounter:
    """Счётчик запросов по ключу в фиксированном окне. Просроченные окна периодически чистятся."""

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        # key -> (count, window_start)
        self._storage: dict[str, tuple[int, float]] = {}
        self._last_prune = clock()

    def hit(self, key: str) -> float | None:
        """Засчитать запрос. None: пропускаем, иначе секунды до конца окна."""
        now = self.clock()
        self._prune(now)
        count, start = self._storage.get(key, (0, now))
        if now - start >= self.window_seconds:
            count, start = 0, now
        count += 1
        self._storage[key] = (count, start)
        if count > self.max_requests:
            return max(self.window_seconds - (now - start), 0.0)
        return None

    def _prune(self, now: float) -> None:
        if now - self._last_prune < self.window_seconds:
            return
        self._storage = {k: v for k, v in self._storage.items() if now - v[1] < self.window_seconds}
        self._last_prune = now

    def __len__(self) -> int:
        return len(self._storage)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware: счётчик запросов по IP, при превышении лимита: 429."""

    def __init__(self, app, key_func: Callable[[Request], str] | None = None, limit: tuple[int, int] | None = None):
        super().__init__(app)
        self.key_func = key_func or _get_client_ip
        max_requests, window_seconds = limit or settings.rate_limit_parsed()
        self.counter = FixedWindowCounter(max_requests, window_seconds)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)
        retry_after = self.counter.hit(self.key_func(request))
        if retry_after is not None:
            body = ErrorResponse(
                error="rate_limit_exceeded",
                message=f"Too many requests. Limit: {self.counter.max_requests} per {self.counter.window_seconds}s.",
            )
            return JSONResponse(
                status_code=429,
                content=body.model_dump(exclude_none=True),
                headers={"Retry-After": str(math.ceil(retry_after))},
            )
        return await call_next(request)
