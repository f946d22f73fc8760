"""
Рендер собранного документа в markdown и HTML.

Чистые функции: без побочных эффектов и без состояния между вызовами,
их можно звать на каждое изменение формы.
"""
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from careercoach.resume.document import ResumeDocument, Section
from careercoach.resume.entries import CertificateEntry, EducationEntry, ExperienceEntry, ProjectEntry

TEMPLATES_DIR = Path(__file__).parent / "templates"
HTML_TEMPLATE = "resume.html.jinja"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def description_bullets(text: str) -> list[str]:
    """Описание → пункты списка: по одному на непустую строку."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def split_csv(text: str) -> list[str]:
    return [part.strip() for part in (text or "").split(",") if part.strip()]


def contact_parts(document: ResumeDocument) -> list[dict]:
    """Части строки контактов в фиксированном порядке: label, href (или ''), icon."""
    c = document.contact
    parts = []
    if c.email:
        parts.append({"icon": "📧", "label": c.email, "href": f"mailto:{c.email}"})
    if c.mobile:
        parts.append({"icon": "📱", "label": c.mobile, "href": ""})
    if c.linkedin:
        parts.append({"icon": "💼", "label": "LinkedIn", "href": c.linkedin})
    if c.github:
        parts.append({"icon": "💻", "label": "GitHub", "href": c.github})
    if c.twitter:
        parts.append({"icon": "🐦", "label": "Twitter", "href": c.twitter})
    return parts


def entry_view(entry) -> dict:
    """
    Поля записи для шаблонов (HTML и PDF).

    Разбор по виду записи: у каждого вида только свои поля.
    """
    view = {
        "kind": entry.kind,
        "title": entry.title,
        "organization": entry.organization,
        "period": entry.period,
        "bullets": description_bullets(entry.description),
        "link": "",
        "link_label": "",
        "details": [],
        "technologies": [],
    }
    if isinstance(entry, ExperienceEntry):
        view["link"] = entry.link
        view["link_label"] = "LINK"
    elif isinstance(entry, EducationEntry):
        if entry.gpa:
            view["details"].append(f"GPA: {entry.gpa}")
        if entry.location:
            view["details"].append(entry.location)
    elif isinstance(entry, ProjectEntry):
        view["link"] = entry.link
        view["link_label"] = "LINK"
        view["technologies"] = split_csv(entry.technologies)
    elif isinstance(entry, CertificateEntry):
        view["link"] = entry.link
        view["link_label"] = "CERTIFICATE"
    else:
        raise TypeError(f"Unsupported entry type: {type(entry).__name__}")
    return view


def section_view(section: Section) -> dict:
    return {
        "key": section.key,
        "title": section.title,
        "text": section.text,
        "rows": list(section.rows),
        "entries": [entry_view(e) for e in section.entries],
    }


# ==================== Markdown ====================


def _contact_markdown(document: ResumeDocument) -> str:
    if not document.has_header():
        return ""
    blocks = []
    if document.full_name:
        blocks.append(f'## <div align="center">{document.full_name}</div>')
    parts = []
    for part in contact_parts(document):
        if part["href"] and not part["href"].startswith("mailto:"):
            parts.append(f"{part['icon']} [{part['label']}]({part['href']})")
        else:
            parts.append(f"{part['icon']} {part['label']}")
    if parts:
        blocks.append('<div align="center">\n\n' + " | ".join(parts) + "\n\n</div>")
    return "\n\n".join(blocks)


def _entry_markdown(entry) -> str:
    head = f"### {entry.title} @ {entry.organization}"
    if entry.period:
        head += f"\n{entry.period}"
    return f"{head}\n\n{entry.description}"


def _section_markdown(section: Section) -> str:
    body = []
    if section.text:
        body.append(section.text)
    if section.rows:
        body.append("\n".join(f"- **{label}:** {value}" for label, value in section.rows))
    if section.entries:
        body.append("\n\n".join(_entry_markdown(e) for e in section.entries))
    return f"## {section.title}\n\n" + "\n\n".join(body)


def render_markdown(document: ResumeDocument) -> str:
    """Документ → markdown. Пустые секции в документ не попадают, поэтому и заголовков для них нет."""
    blocks = [_contact_markdown(document)]
    blocks.extend(_section_markdown(s) for s in document.sections)
    return "\n\n".join(b for b in blocks if b)


# ==================== HTML ====================


def render_html(document: ResumeDocument) -> str:
    """Документ → HTML-фрагмент (контейнер #resume-pdf) для превью."""
    template = _env.get_template(HTML_TEMPLATE)
    return template.render(
        full_name=document.full_name,
        has_header=document.has_header(),
        contact=contact_parts(document),
        sections=[section_view(s) for s in document.sections],
    )
