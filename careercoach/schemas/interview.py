"""
Схемы для подготовки к интервью: результаты квизов.
"""
from datetime import datetime

from pydantic import BaseModel, Field


class QuestionResult(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str
    user_answer: str
    explanation: str = ""
    is_correct: bool = False


class AssessmentCreate(BaseModel):
    """Законченный квиз. Балл считает сервер."""

    category: str = "Technical"
    questions: list[QuestionResult] = Field(..., min_length=1)
    improvement_tip: str | None = None


class Assessment(BaseModel):
    id: str
    user_id: str
    category: str
    quiz_score: float
    questions: list[QuestionResult]
    improvement_tip: str | None = None
    created_at: datetime


class AssessmentStats(BaseModel):
    total: int = 0
    average_score: float = 0.0
    latest_score: float | None = None
    total_questions: int = 0
