"""
Состояние редактора резюме и сборка документа.

ResumeForm: всё, что пользователь ввёл (контакты, summary, навыки, списки записей).
assemble() превращает форму в ResumeDocument: упорядоченные непустые секции.
Пустая секция не даёт ничего (никаких пустых заголовков). Сборка идемпотентна.
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from careercoach.resume.entries import (
    CertificateEntry,
    EducationEntry,
    ExperienceEntry,
    Entry,
    ProjectEntry,
    check_url,
)
from careercoach.resume.errors import ResumeValidationError

_email_adapter = TypeAdapter(EmailStr)

SKILL_LABELS = (
    ("languages", "Languages"),
    ("frameworks", "Frameworks"),
    ("tools", "Tools"),
    ("platforms", "Platforms"),
    ("soft_skills", "Soft Skills"),
)


class ContactInfo(BaseModel):
    """Контакты. Все поля необязательные, но если заполнены: должны быть валидны."""

    email: str = ""
    mobile: str = ""
    linkedin: str = ""
    github: str = ""
    twitter: str = ""

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip()
        if v:
            try:
                _email_adapter.validate_python(v)
            except ValidationError:
                raise ValueError("Invalid email address")
        return v

    @field_validator("linkedin", "github", "twitter")
    @classmethod
    def _url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("mobile")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    def is_empty(self) -> bool:
        return not any((self.email, self.mobile, self.linkedin, self.github, self.twitter))


class SkillsSummary(BaseModel):
    """Структурированные навыки: по строке на категорию."""

    languages: str = ""
    frameworks: str = ""
    tools: str = ""
    platforms: str = ""
    soft_skills: str = ""

    def rows(self) -> list[tuple[str, str]]:
        """Непустые категории в фиксированном порядке: [(label, value), ...]."""
        out = []
        for name, label in SKILL_LABELS:
            value = getattr(self, name).strip()
            if value:
                out.append((label, value))
        return out


class ResumeForm(BaseModel):
    """Состояние формы редактора целиком."""

    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    summary: str = ""
    skills: str = ""
    skills_summary: SkillsSummary = Field(default_factory=SkillsSummary)
    experience: list[ExperienceEntry] = []
    education: list[EducationEntry] = []
    projects: list[ProjectEntry] = []
    certificates: list[CertificateEntry] = []


class Section(BaseModel):
    """Одна секция собранного документа."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    text: str = ""
    rows: list[tuple[str, str]] = []
    entries: list[Entry] = []


class ResumeDocument(BaseModel):
    """Собранный документ: шапка + секции в фиксированном порядке."""

    model_config = ConfigDict(frozen=True)

    full_name: str = ""
    contact: ContactInfo = Field(default_factory=ContactInfo)
    sections: list[Section] = []

    def has_header(self) -> bool:
        return bool(self.full_name) or not self.contact.is_empty()

    def is_empty(self) -> bool:
        return not self.has_header() and not self.sections

    def section_keys(self) -> list[str]:
        return [s.key for s in self.sections]


# Порядок секций фиксирован: контакты (шапка) → summary → skills → опыт → образование → проекты → сертификаты
ENTRY_SECTIONS = (
    ("experience", "Work Experience"),
    ("education", "Education"),
    ("projects", "Projects"),
    ("certificates", "Certificates"),
)
SUMMARY_TITLE = "Professional Summary"
SKILLS_TITLE = "Skills"


def validate_resume(data: dict) -> ResumeForm:
    """
    Проверить состояние формы целиком.

    Raises:
        ResumeValidationError: все ошибки сразу, пути вида "experience.0.title".
    """
    try:
        return ResumeForm.model_validate(data)
    except ValidationError as exc:
        raise ResumeValidationError.from_pydantic(exc) from exc


def assemble(form: ResumeForm, full_name: str = "") -> ResumeDocument:
    """Собрать документ из формы. Только непустые секции, порядок фиксирован."""
    sections = []

    summary = form.summary.strip()
    if summary:
        sections.append(Section(key="summary", title=SUMMARY_TITLE, text=summary))

    skills = form.skills.strip()
    rows = form.skills_summary.rows()
    if skills or rows:
        sections.append(Section(key="skills", title=SKILLS_TITLE, text=skills, rows=rows))

    for key, title in ENTRY_SECTIONS:
        entries = getattr(form, key)
        if entries:
            sections.append(Section(key=key, title=title, entries=list(entries)))

    return ResumeDocument(
        full_name=(full_name or "").strip(),
        contact=form.contact_info,
        sections=sections,
    )
