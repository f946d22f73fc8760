"""
Экспорт резюме в PDF (A4, постранично) через reportlab.

Источник тот же собранный документ, что и у превью. Любая ошибка превращается
в ExportError: роутер отдаёт структурированный ответ, редактирование продолжается.
"""
import io
import logging
from html import escape

from pydantic import BaseModel, Field
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import HRFlowable, KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from careercoach.resume.document import ResumeDocument
from careercoach.resume.errors import ExportError
from careercoach.resume.renderer import contact_parts, section_view

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "resume.pdf"
PDF_MEDIA_TYPE = "application/pdf"


class PageLayout(BaseModel):
    """Параметры страницы. Поля в миллиметрах."""

    margin_top: float = Field(10, ge=0, le=50)
    margin_right: float = Field(10, ge=0, le=50)
    margin_bottom: float = Field(10, ge=0, le=50)
    margin_left: float = Field(10, ge=0, le=50)
    orientation: str = Field("portrait", pattern="^(portrait|landscape)$")

    def pagesize(self) -> tuple[float, float]:
        return landscape(A4) if self.orientation == "landscape" else A4


def build_styles() -> dict[str, ParagraphStyle]:
    sample = getSampleStyleSheet()
    return {
        "name": ParagraphStyle(
            "name",
            parent=sample["Title"],
            fontName="Helvetica-Bold",
            fontSize=18,
            leading=22,
            spaceAfter=2,
        ),
        "contact": ParagraphStyle(
            "contact",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=9,
            leading=12,
            alignment=1,
            textColor=colors.HexColor("#4b5563"),
            spaceAfter=4,
        ),
        "section": ParagraphStyle(
            "section",
            parent=sample["Heading3"],
            fontName="Helvetica-Bold",
            fontSize=11,
            leading=14,
            alignment=1,
            spaceBefore=8,
            spaceAfter=2,
        ),
        "entry_title": ParagraphStyle(
            "entry_title",
            parent=sample["Normal"],
            fontName="Helvetica-Bold",
            fontSize=10,
            leading=13,
        ),
        "meta": ParagraphStyle(
            "meta",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=9,
            leading=12,
            textColor=colors.HexColor("#6b7280"),
        ),
        "body": ParagraphStyle(
            "body",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=9.5,
            leading=13,
            spaceAfter=3,
        ),
        "bullet": ParagraphStyle(
            "bullet",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=9.5,
            leading=13,
            leftIndent=12,
            bulletIndent=2,
            spaceAfter=1,
        ),
    }


def _link(href: str, label: str) -> str:
    return f'<link href="{escape(href, quote=True)}" color="blue">{escape(label)}</link>'


def _header_story(document: ResumeDocument, styles: dict) -> list:
    story = []
    if document.full_name:
        story.append(Paragraph(escape(document.full_name.upper()), styles["name"]))
    parts = []
    for part in contact_parts(document):
        parts.append(_link(part["href"], part["label"]) if part["href"] else escape(part["label"]))
    if parts:
        story.append(Paragraph(" | ".join(parts), styles["contact"]))
    return story


def _entry_story(view: dict, styles: dict) -> list:
    title = escape(view["title"])
    if view["link"]:
        title += " | " + _link(view["link"], view["link_label"])
    flow = [Paragraph(title, styles["entry_title"])]

    meta = [escape(view["organization"])]
    meta.extend(escape(d) for d in view["details"])
    if view["period"]:
        meta.append(escape(view["period"]))
    flow.append(Paragraph(" · ".join(meta), styles["meta"]))
    if view["technologies"]:
        flow.append(Paragraph(escape(", ".join(view["technologies"])), styles["meta"]))
    for line in view["bullets"]:
        flow.append(Paragraph(escape(line), styles["bullet"], bulletText="•"))
    flow.append(Spacer(1, 4))
    return [KeepTogether(flow)]


def build_story(document: ResumeDocument, styles: dict) -> list:
    """Документ → список flowables reportlab."""
    story = _header_story(document, styles)
    for section in document.sections:
        view = section_view(section)
        story.append(Paragraph(escape(view["title"].upper()), styles["section"]))
        story.append(HRFlowable(width="100%", color=colors.HexColor("#9ca3af"), thickness=0.6, spaceAfter=4))
        if view["text"]:
            for line in view["text"].splitlines():
                if line.strip():
                    story.append(Paragraph(escape(line.strip()), styles["body"]))
        for label, value in view["rows"]:
            story.append(Paragraph(f"<b>{escape(label)}:</b> {escape(value)}", styles["body"]))
        for entry in view["entries"]:
            story.extend(_entry_story(entry, styles))
    return story


def export_pdf(document: ResumeDocument, layout: PageLayout | None = None) -> bytes:
    """
    Собрать PDF для скачивания.

    Raises:
        ExportError: пустой документ или ошибка reportlab.
    """
    if document.is_empty():
        raise ExportError("Nothing to export: the resume is empty")
    layout = layout or PageLayout()

    output = io.BytesIO()
    try:
        doc = SimpleDocTemplate(
            output,
            pagesize=layout.pagesize(),
            topMargin=layout.margin_top * mm,
            rightMargin=layout.margin_right * mm,
            bottomMargin=layout.margin_bottom * mm,
            leftMargin=layout.margin_left * mm,
            title=f"{document.full_name} Resume".strip(),
            author=document.full_name or "careercoach",
        )
        doc.build(build_story(document, build_styles()))
    except Exception as exc:
        logger.exception("PDF export failed")
        raise ExportError(f"PDF export failed: {exc}") from exc
    return output.getvalue()
