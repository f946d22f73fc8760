"""
Инсайты по индустрии текущего пользователя (дашборд).
"""
from fastapi import APIRouter, Depends, HTTPException

from careercoach.core.security import get_current_user
from careercoach.schemas.common import ErrorResponse, SuccessResponse
from careercoach.schemas.insight import IndustryInsight
from careercoach.services.insights import get_or_create_insight

router = APIRouter(prefix="/insights", tags=["insights"])


def _doc_to_insight(doc: dict) -> IndustryInsight:
    return IndustryInsight(
        id=str(doc["_id"]),
        industry=doc["industry"],
        salary_ranges=doc.get("salary_ranges", []),
        growth_rate=doc["growth_rate"],
        demand_level=doc["demand_level"],
        top_skills=doc.get("top_skills", []),
        market_outlook=doc["market_outlook"],
        key_trends=doc.get("key_trends", []),
        recommended_skills=doc.get("recommended_skills", []),
        last_updated=doc["last_updated"],
        next_update=doc["next_update"],
    )


@router.get(
    "",
    response_model=SuccessResponse[IndustryInsight],
    responses={409: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def get_insights(current_user: dict = Depends(get_current_user)):
    """Инсайт для индустрии пользователя. 409 если онбординг не пройден."""
    industry = current_user.get("industry")
    if not industry:
        raise HTTPException(409, detail={"error": "not_onboarded", "message": "Complete onboarding first"})
    doc = await get_or_create_insight(industry)
    return SuccessResponse(data=_doc_to_insight(doc))
