"""
Безопасность: проверка JWT сессии внешнего провайдера и подписи его вебхуков.

Токен выпускает провайдер идентификации, sub: id пользователя у провайдера.
Строку пользователя в MongoDB создаёт вебхук user.created (см. routers/webhooks.py).
"""
import base64
import hashlib
import hmac
import time

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from careercoach.core.config import settings
from careercoach.core.database import get_users_collection
from careercoach.core.provisioning import NotProvisionedError, wait_for

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=True)


def decode_session_token(token: str) -> dict | None:
    """Декодировать session token провайдера. Возвращает None при ошибке."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "unauthorized", "message": "Could not validate credentials"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_identity(token: str = Depends(oauth2_scheme)) -> str:
    """Dependency: id пользователя у провайдера из валидного токена."""
    payload = decode_session_token(token)
    if payload is None:
        raise _credentials_exception()
    return payload["sub"]


def find_user(external_id: str) -> dict | None:
    return get_users_collection().find_one({"external_id": external_id})


async def get_current_user(external_id: str = Depends(get_current_identity)) -> dict:
    """
    Dependency для получения текущего пользователя.
    Возвращает документ пользователя из MongoDB, 404 если вебхук ещё не создал строку.
    """
    user = find_user(external_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "user_not_found", "message": "User not found"},
        )
    return user


async def get_provisioned_user(external_id: str = Depends(get_current_identity)) -> dict:
    """
    Как get_current_user, но сначала ждёт, пока вебхук создаст пользователя.

    Используется на онбординге: первый запрос приходит сразу после регистрации
    у провайдера, и строки может ещё не быть.
    """
    try:
        return await wait_for(
            lambda: find_user(external_id),
            attempts=settings.PROVISIONING_ATTEMPTS,
            base_delay=settings.PROVISIONING_BASE_DELAY,
            max_delay=settings.PROVISIONING_MAX_DELAY,
        )
    except NotProvisionedError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "user_not_provisioned", "message": "User account is not ready yet, try again later"},
        )


# ==================== Подпись вебхуков ====================


def _webhook_key(secret: str) -> bytes:
    """Секрет вида whsec_<base64> → байты ключа; иначе сам секрет как utf-8."""
    if secret.startswith("whsec_"):
        return base64.b64decode(secret[len("whsec_"):])
    return secret.encode("utf-8")


def sign_webhook(secret: str, msg_id: str, timestamp: str, body: bytes) -> str:
    """Подпись "v1,<base64(hmac_sha256)>" для "{id}.{timestamp}.{body}"."""
    to_sign = f"{msg_id}.{timestamp}.".encode("utf-8") + body
    digest = hmac.new(_webhook_key(secret), to_sign, hashlib.sha256).digest()
    return "v1," + base64.b64encode(digest).decode("ascii")


def verify_webhook(
    secret: str,
    msg_id: str,
    timestamp: str,
    signature_header: str,
    body: bytes,
    tolerance: int = 300,
    now: float | None = None,
) -> bool:
    """
    Проверить подпись вебхука.

    signature_header может содержать несколько подписей через пробел (ротация ключей).
    Метка времени старше/новее tolerance секунд: отказ.
    """
    if not secret or not msg_id or not timestamp or not signature_header:
        return False
    try:
        ts = int(timestamp)
    except ValueError:
        return False
    current = time.time() if now is None else now
    if abs(current - ts) > tolerance:
        return False

    expected = sign_webhook(secret, msg_id, timestamp, body)
    for candidate in signature_header.split():
        if hmac.compare_digest(expected, candidate):
            return True
    return False
