"""
Схемы для инсайтов по индустрии (генерирует AI, кэшируются на INSIGHT_TTL_DAYS).
"""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class SalaryRange(BaseModel):
    role: str
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    median: float = Field(..., ge=0)
    location: str = ""


class IndustryInsightData(BaseModel):
    """То, что возвращает AI. Используется и для проверки ответа модели."""

    salary_ranges: list[SalaryRange] = []
    growth_rate: float
    demand_level: Literal["High", "Medium", "Low"]
    top_skills: list[str] = []
    market_outlook: Literal["Positive", "Neutral", "Negative"]
    key_trends: list[str] = []
    recommended_skills: list[str] = []


class IndustryInsight(IndustryInsightData):
    """Инсайт в ответах API."""

    id: str
    industry: str
    last_updated: datetime
    next_update: datetime
