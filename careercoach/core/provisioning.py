"""
Ожидание строк, которые создаются асинхронно (пользователь от вебхука провайдера).

Ограниченное число попыток с экспоненциальной задержкой, в конце: NotProvisionedError.
Никогда не ждём бесконечно.
"""
import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotProvisionedError(LookupError):
    """Запись так и не появилась за отведённые попытки."""

    def __init__(self, attempts: int):
        super().__init__(f"Record not provisioned after {attempts} attempts")
        self.attempts = attempts


def backoff_delays(attempts: int, base_delay: float, factor: float = 2.0, max_delay: float | None = None) -> list[float]:
    """Паузы между попытками: base, base*factor, ... (attempts - 1 штук)."""
    delays = []
    delay = base_delay
    for _ in range(max(attempts - 1, 0)):
        delays.append(min(delay, max_delay) if max_delay is not None else delay)
        delay *= factor
    return delays


async def wait_for(
    lookup: Callable[[], T | None],
    attempts: int = 5,
    base_delay: float = 0.5,
    factor: float = 2.0,
    max_delay: float | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Вызывать lookup(), пока он не вернёт не-None.

    Первая попытка: сразу, дальше паузы из backoff_delays().
    Если все attempts попыток вернули None: NotProvisionedError.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    result = lookup()
    if result is not None:
        return result

    for i, delay in enumerate(backoff_delays(attempts, base_delay, factor, max_delay), start=2):
        logger.info("Record not found yet, retry %d/%d in %.2fs", i, attempts, delay)
        await sleep(delay)
        result = lookup()
        if result is not None:
            return result

    logger.warning("Record never appeared after %d attempts", attempts)
    raise NotProvisionedError(attempts)
