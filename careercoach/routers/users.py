"""
Пользователь и онбординг.

Строку пользователя создаёт вебхук провайдера. На онбординге она может ещё не
появиться, поэтому эти эндпоинты ждут её (get_provisioned_user) с ограниченным числом попыток.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from careercoach.core.database import get_users_collection
from careercoach.core.security import get_current_user, get_provisioned_user
from careercoach.schemas.common import ErrorResponse, SuccessResponse
from careercoach.schemas.user import OnboardingStatus, ProfileUpdate, User
from careercoach.services.insights import get_or_create_insight

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _doc_to_user(doc: dict) -> User:
    """Конвертировать документ MongoDB в User."""
    return User(
        id=str(doc["_id"]),
        external_id=doc["external_id"],
        email=doc.get("email"),
        name=doc.get("name") or "",
        image_url=doc.get("image_url"),
        industry=doc.get("industry"),
        bio=doc.get("bio"),
        experience=doc.get("experience"),
        skills=doc.get("skills") or [],
        created_at=doc["created_at"],
    )


@router.get("/me", response_model=SuccessResponse[User], responses={404: {"model": ErrorResponse}})
async def me(current_user: dict = Depends(get_current_user)):
    """Получить текущего пользователя."""
    return SuccessResponse(data=_doc_to_user(current_user))


@router.get(
    "/me/onboarding-status",
    response_model=SuccessResponse[OnboardingStatus],
    responses={404: {"model": ErrorResponse}},
)
async def onboarding_status(current_user: dict = Depends(get_provisioned_user)):
    """Прошёл ли пользователь онбординг (есть ли индустрия)."""
    return SuccessResponse(data=OnboardingStatus(is_onboarded=bool(current_user.get("industry"))))


@router.put(
    "/me/profile",
    response_model=SuccessResponse[User],
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def update_profile(
    data: ProfileUpdate,
    current_user: dict = Depends(get_provisioned_user),
):
    """
    Онбординг: индустрия, опыт, bio, навыки.

    Сначала гарантируем инсайт по индустрии (если AI недоступен: профиль не меняется),
    потом обновляем пользователя.
    """
    industry = data.full_industry()
    await get_or_create_insight(industry)

    users = get_users_collection()
    users.update_one(
        {"_id": current_user["_id"]},
        {
            "$set": {
                "industry": industry,
                "experience": data.experience,
                "bio": data.bio,
                "skills": data.skills,
                "updated_at": datetime.now(timezone.utc),
            }
        },
    )
    logger.info("User %s onboarded into %s", current_user["_id"], industry)
    return SuccessResponse(data=_doc_to_user(users.find_one({"_id": current_user["_id"]})))
