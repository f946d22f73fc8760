"""
Подготовка к интервью: результаты квизов текущего пользователя.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from careercoach.core.database import get_assessments_collection
from careercoach.core.security import get_current_user
from careercoach.schemas.common import SuccessResponse
from careercoach.schemas.interview import Assessment, AssessmentCreate, AssessmentStats, QuestionResult

router = APIRouter(prefix="/interview", tags=["interview"])


def _doc_to_assessment(doc: dict) -> Assessment:
    return Assessment(
        id=str(doc["_id"]),
        user_id=str(doc["user_id"]),
        category=doc["category"],
        quiz_score=doc["quiz_score"],
        questions=doc.get("questions", []),
        improvement_tip=doc.get("improvement_tip"),
        created_at=doc["created_at"],
    )


def score_questions(questions: list[QuestionResult]) -> tuple[list[QuestionResult], float]:
    """Отметить правильные ответы и посчитать балл в процентах."""
    scored = [
        q.model_copy(update={"is_correct": q.user_answer.strip() == q.answer.strip()})
        for q in questions
    ]
    correct = sum(1 for q in scored if q.is_correct)
    return scored, round(correct / len(scored) * 100, 2) if scored else 0.0


@router.post("/assessments", response_model=SuccessResponse[Assessment], status_code=201)
async def create_assessment(
    data: AssessmentCreate,
    current_user: dict = Depends(get_current_user),
):
    """Сохранить законченный квиз."""
    questions, score = score_questions(data.questions)
    doc = {
        "user_id": current_user["_id"],
        "category": data.category,
        "quiz_score": score,
        "questions": [q.model_dump() for q in questions],
        "improvement_tip": data.improvement_tip,
        "created_at": datetime.now(timezone.utc),
    }
    result = get_assessments_collection().insert_one(doc)
    doc["_id"] = result.inserted_id
    return SuccessResponse(data=_doc_to_assessment(doc))


@router.get("/assessments", response_model=SuccessResponse[list[Assessment]])
async def list_assessments(current_user: dict = Depends(get_current_user)):
    """Квизы пользователя, старые первыми (для графика прогресса)."""
    cursor = get_assessments_collection().find({"user_id": current_user["_id"]}).sort("created_at", 1)
    return SuccessResponse(data=[_doc_to_assessment(doc) for doc in cursor])


@router.get("/stats", response_model=SuccessResponse[AssessmentStats])
async def assessment_stats(current_user: dict = Depends(get_current_user)):
    """Средний балл, последний балл, сколько всего вопросов."""
    docs = list(get_assessments_collection().find({"user_id": current_user["_id"]}).sort("created_at", 1))
    if not docs:
        return SuccessResponse(data=AssessmentStats())
    scores = [d["quiz_score"] for d in docs]
    return SuccessResponse(
        data=AssessmentStats(
            total=len(docs),
            average_score=round(sum(scores) / len(scores), 2),
            latest_score=scores[-1],
            total_questions=sum(len(d.get("questions", [])) for d in docs),
        )
    )
