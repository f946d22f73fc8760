"""
Схемы для пользователей и онбординга.
"""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class User(BaseModel):
    """Пользователь в ответах API."""

    id: str
    external_id: str
    email: str | None = None
    name: str = ""
    image_url: str | None = None
    industry: str | None = None
    bio: str | None = None
    experience: int | None = None
    skills: list[str] = []
    created_at: datetime


class OnboardingStatus(BaseModel):
    is_onboarded: bool


class ProfileUpdate(BaseModel):
    """Форма онбординга."""

    industry: str = Field(..., min_length=1, description="Индустрия (например, tech)")
    sub_industry: str = Field(..., min_length=1, description="Специализация внутри индустрии")
    bio: str | None = Field(default=None, max_length=500)
    experience: int = Field(..., ge=0, le=50, description="Опыт в годах")
    skills: list[str] = []

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, v):
        """Навыки приходят строкой через запятую: 'Python, SQL' → ['Python', 'SQL']."""
        if v is None:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    def full_industry(self) -> str:
        """Индустрия в хранилище: '<industry>-<sub_industry>'."""
        sub = self.sub_industry.strip().lower().replace(" ", "-")
        return f"{self.industry.strip()}-{sub}"
