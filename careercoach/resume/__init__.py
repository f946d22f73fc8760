# resume: модель записей, сборка документа, рендер (markdown/HTML) и экспорт в PDF.
from careercoach.resume.document import ResumeDocument, ResumeForm, assemble, validate_resume
from careercoach.resume.entries import EntryForm, build_entry
from careercoach.resume.errors import ExportError, ExternalServiceError, FieldError, ResumeValidationError
from careercoach.resume.export import EXPORT_FILENAME, PageLayout, export_pdf
from careercoach.resume.renderer import render_html, render_markdown

__all__ = [
    "EXPORT_FILENAME",
    "EntryForm",
    "ExportError",
    "ExternalServiceError",
    "FieldError",
    "PageLayout",
    "ResumeDocument",
    "ResumeForm",
    "ResumeValidationError",
    "assemble",
    "build_entry",
    "export_pdf",
    "render_html",
    "render_markdown",
    "validate_resume",
]
