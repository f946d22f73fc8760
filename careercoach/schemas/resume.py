"""
Схемы для резюме: сохранённый снимок, превью, улучшение текста, экспорт.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from careercoach.resume.document import ResumeForm
from careercoach.resume.export import PageLayout


class Resume(BaseModel):
    """Сохранённое резюме в ответах API. Одно на пользователя."""

    id: str
    user_id: str
    form: ResumeForm
    content: str = ""
    created_at: datetime
    updated_at: datetime


class ResumePreview(BaseModel):
    """Результат рендера текущего состояния формы."""

    markdown: str
    html: str


class ImproveRequest(BaseModel):
    """Текст, который просят улучшить, и вид записи (experience, project, ...)."""

    current: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)


class ImproveResponse(BaseModel):
    improved: str


class ExportRequest(BaseModel):
    """Экспорт текущего состояния формы (ещё не сохранённого)."""

    form: dict = {}
    layout: PageLayout = Field(default_factory=PageLayout)
