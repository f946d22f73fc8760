"""
Записи резюме: опыт, образование, проекты, сертификаты.

EntryForm: сырой ввод формы (даты в формате YYYY-MM).
Entry: отформатированная запись: даты уже "Mon YYYY", period посчитан.
Форматирование дат делается в момент добавления записи, не при рендере.
"""
import re
from typing import Annotated, Literal, Union

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from careercoach.resume.errors import FieldError, ResumeValidationError

EntryKind = Literal["experience", "education", "project", "certificate"]

# Секция документа → вид записи в ней
SECTION_KINDS: dict[str, str] = {
    "experience": "experience",
    "education": "education",
    "projects": "project",
    "certificates": "certificate",
}

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
PRESENT = "Present"
END_DATE_REQUIRED = "Required unless this is a current position"
END_BEFORE_START = "End date must not be before start date"

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_LABEL_RE = re.compile(r"^(" + "|".join(MONTH_NAMES) + r") (\d{4})$")
_url_adapter = TypeAdapter(AnyHttpUrl)


def parse_month(value: str) -> tuple[int, int]:
    """'2021-06' -> (2021, 6). ValueError если формат не YYYY-MM или месяц вне 1..12."""
    m = _MONTH_RE.match((value or "").strip())
    if not m:
        raise ValueError("Use YYYY-MM format")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 01 and 12")
    return year, month


def parse_label(value: str) -> tuple[int, int]:
    """'Jun 2021' -> (2021, 6). ValueError если это не метка вида 'Mon YYYY'."""
    m = _LABEL_RE.match((value or "").strip())
    if not m:
        raise ValueError("Use 'Mon YYYY' format")
    return int(m.group(2)), MONTH_NAMES.index(m.group(1)) + 1


def format_month(value: str) -> str:
    """'2021-06' -> 'Jun 2021'. Пустое значение -> ''."""
    if not (value or "").strip():
        return ""
    year, month = parse_month(value)
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_period(start: str, end: str, current: bool) -> str:
    """Строка периода для рендера: 'Jun 2021 - Present', 'Jan 2019 - Dec 2020'."""
    finish = PRESENT if current else end
    if start and finish:
        return f"{start} - {finish}"
    return start or finish


def _required(value: str) -> str:
    if not value.strip():
        raise ValueError("Required")
    return value


def check_url(value: str) -> str:
    value = (value or "").strip()
    if value:
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            raise ValueError("Invalid URL")
    return value


class EntryForm(BaseModel):
    """Ввод формы добавления записи."""

    # пропущенный ключ проверяется так же, как пустая строка
    model_config = ConfigDict(validate_default=True)

    title: str = ""
    organization: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""
    link: str = ""
    # только для отдельных видов записей
    gpa: str = ""
    location: str = ""
    technologies: str = ""

    @field_validator("title", "organization")
    @classmethod
    def _required_line(cls, v: str) -> str:
        return _required(v).strip()

    @field_validator("description")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _required(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def _month(cls, v: str) -> str:
        v = v.strip()
        if v:
            parse_month(v)
        return v

    @field_validator("link")
    @classmethod
    def _link(cls, v: str) -> str:
        return check_url(v)

    @model_validator(mode="after")
    def _clear_end_for_current(self) -> "EntryForm":
        # Текущая позиция не может иметь дату окончания: чистим молча
        if self.current and self.end_date:
            self.end_date = ""
        return self


def _date_policy_errors(form: EntryForm) -> list[FieldError]:
    """Дата окончания обязательна, если позиция не текущая, и не раньше даты начала."""
    errors = []
    if not form.current and not form.end_date:
        errors.append(FieldError(field="end_date", message=END_DATE_REQUIRED))
    if form.start_date and form.end_date and form.end_date < form.start_date:
        errors.append(FieldError(field="end_date", message=END_BEFORE_START))
    return errors


class EntryBase(BaseModel):
    """Общие поля отформатированной записи."""

    title: str
    organization: str
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str
    period: str = ""

    @field_validator("title", "organization")
    @classmethod
    def _required_line(cls, v: str) -> str:
        return _required(v).strip()

    @field_validator("description")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _required(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def _label(cls, v: str) -> str:
        v = v.strip()
        if v:
            parse_label(v)
        return v

    @field_validator("link", check_fields=False)
    @classmethod
    def _link(cls, v: str) -> str:
        return check_url(v)

    @model_validator(mode="after")
    def _normalize(self) -> "EntryBase":
        # Правила дат те же, что у EntryForm
        if self.current:
            self.end_date = ""
        elif not self.end_date:
            raise ValueError(END_DATE_REQUIRED)
        if self.start_date and self.end_date and parse_label(self.end_date) < parse_label(self.start_date):
            raise ValueError(END_BEFORE_START)
        self.period = format_period(self.start_date, self.end_date, self.current)
        return self


class ExperienceEntry(EntryBase):
    kind: Literal["experience"] = "experience"
    link: str = ""


class EducationEntry(EntryBase):
    kind: Literal["education"] = "education"
    gpa: str = ""
    location: str = ""


class ProjectEntry(EntryBase):
    kind: Literal["project"] = "project"
    link: str = ""
    technologies: str = ""


class CertificateEntry(EntryBase):
    kind: Literal["certificate"] = "certificate"
    link: str = ""


Entry = Annotated[
    Union[ExperienceEntry, EducationEntry, ProjectEntry, CertificateEntry],
    Field(discriminator="kind"),
]

ENTRY_TYPES: dict[str, type[EntryBase]] = {
    "experience": ExperienceEntry,
    "education": EducationEntry,
    "project": ProjectEntry,
    "certificate": CertificateEntry,
}

_OPTIONAL_FIELDS = ("link", "gpa", "location", "technologies")


def build_entry(kind: str, data: EntryForm | dict) -> EntryBase:
    """
    Проверить ввод формы и собрать отформатированную запись нужного вида.

    Raises:
        ResumeValidationError: со списком ошибок по полям.
    """
    entry_cls = ENTRY_TYPES.get(kind)
    if entry_cls is None:
        raise ResumeValidationError([FieldError(field="kind", message=f"Unknown entry type: {kind}")])

    if isinstance(data, EntryForm):
        form = data
    else:
        try:
            form = EntryForm.model_validate(data)
        except ValidationError as exc:
            raise ResumeValidationError.from_pydantic(exc) from exc

    errors = _date_policy_errors(form)
    if errors:
        raise ResumeValidationError(errors)

    fields = {
        "title": form.title,
        "organization": form.organization,
        "start_date": format_month(form.start_date),
        "end_date": "" if form.current else format_month(form.end_date),
        "current": form.current,
        "description": form.description,
    }
    for name in _OPTIONAL_FIELDS:
        if name in entry_cls.model_fields:
            fields[name] = getattr(form, name).strip()
    try:
        return entry_cls(**fields)
    except ValidationError as exc:
        raise ResumeValidationError.from_pydantic(exc) from exc


def add_entry(entries: list, entry: EntryBase) -> list:
    """Новый список с записью в конце. Исходный список не меняется."""
    return [*entries, entry]


def remove_entry(entries: list, index: int) -> list:
    """Новый список без записи с индексом index, порядок остальных сохраняется."""
    if not 0 <= index < len(entries):
        raise IndexError(f"Entry index {index} out of range")
    return [e for i, e in enumerate(entries) if i != index]
