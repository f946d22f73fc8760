"""
Резюме текущего пользователя. Все эндпоинты защищены JWT.

Одно резюме на пользователя: PUT перезаписывает снимок целиком (upsert).
Повторные PUT не дедуплицируются, побеждает запись, которая завершилась последней.
"""
import io
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from careercoach.core.database import get_resumes_collection
from careercoach.core.security import get_current_user
from careercoach.resume.document import ResumeForm, assemble, validate_resume
from careercoach.resume.entries import build_entry
from careercoach.resume.export import EXPORT_FILENAME, PDF_MEDIA_TYPE, PageLayout, export_pdf
from careercoach.resume.renderer import render_html, render_markdown
from careercoach.schemas.common import ErrorResponse, SuccessResponse
from careercoach.schemas.resume import ExportRequest, ImproveRequest, ImproveResponse, Resume, ResumePreview
from careercoach.services import ai

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resume", tags=["resume"])


def _doc_to_resume(doc: dict) -> Resume:
    return Resume(
        id=str(doc["_id"]),
        user_id=str(doc["user_id"]),
        form=ResumeForm.model_validate(doc.get("form") or {}),
        content=doc.get("content", ""),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def _load_own_resume(user_id) -> dict:
    """Сохранённое резюме пользователя. 404 если ещё не сохраняли."""
    doc = get_resumes_collection().find_one({"user_id": user_id})
    if not doc:
        raise HTTPException(404, detail={"error": "not_found", "message": "Resume not found"})
    return doc


def _pdf_response(pdf: bytes) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(pdf),
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get("", response_model=SuccessResponse[Resume], responses={404: {"model": ErrorResponse}})
async def get_resume(current_user: dict = Depends(get_current_user)):
    """Получить сохранённое резюме."""
    doc = _load_own_resume(current_user["_id"])
    return SuccessResponse(data=_doc_to_resume(doc))


@router.put("", response_model=SuccessResponse[Resume], responses={422: {"model": ErrorResponse}})
async def save_resume(
    form: dict = Body(...),
    current_user: dict = Depends(get_current_user),
):
    """Сохранить резюме: проверка формы, сборка, markdown, upsert снимка целиком."""
    resume_form = validate_resume(form)
    content = render_markdown(assemble(resume_form, current_user.get("name", "")))

    now = datetime.now(timezone.utc)
    coll = get_resumes_collection()
    coll.update_one(
        {"user_id": current_user["_id"]},
        {
            "$set": {"form": resume_form.model_dump(), "content": content, "updated_at": now},
            "$setOnInsert": {"user_id": current_user["_id"], "created_at": now},
        },
        upsert=True,
    )
    logger.info("Resume saved for user %s", current_user["_id"])
    return SuccessResponse(data=_doc_to_resume(coll.find_one({"user_id": current_user["_id"]})))


@router.post("/preview", response_model=SuccessResponse[ResumePreview], responses={422: {"model": ErrorResponse}})
async def preview_resume(
    form: dict = Body(...),
    current_user: dict = Depends(get_current_user),
):
    """Рендер текущего состояния формы (markdown + HTML). Ничего не сохраняет."""
    document = assemble(validate_resume(form), current_user.get("name", ""))
    return SuccessResponse(data=ResumePreview(markdown=render_markdown(document), html=render_html(document)))


@router.post("/entries/{kind}", response_model=SuccessResponse[dict], responses={422: {"model": ErrorResponse}})
async def validate_entry(
    kind: str,
    entry: dict = Body(...),
    current_user: dict = Depends(get_current_user),
):
    """Проверить форму одной записи и вернуть отформатированную запись (даты "Mon YYYY", period)."""
    return SuccessResponse(data=build_entry(kind, entry).model_dump())


@router.post(
    "/improve",
    response_model=SuccessResponse[ImproveResponse],
    responses={502: {"model": ErrorResponse}},
)
async def improve_description(
    data: ImproveRequest,
    current_user: dict = Depends(get_current_user),
):
    """Улучшить описание записи через AI. При сбое исходный текст остаётся у клиента как был."""
    improved = await ai.improve_text(data.current, data.type.lower(), current_user.get("industry"))
    return SuccessResponse(data=ImproveResponse(improved=improved))


@router.post("/export", responses={200: {"content": {PDF_MEDIA_TYPE: {}}}, 500: {"model": ErrorResponse}})
async def export_current(
    data: ExportRequest,
    current_user: dict = Depends(get_current_user),
):
    """PDF из текущего (несохранённого) состояния формы."""
    document = assemble(validate_resume(data.form), current_user.get("name", ""))
    pdf = await run_in_threadpool(export_pdf, document, data.layout)
    return _pdf_response(pdf)


@router.get("/export", responses={200: {"content": {PDF_MEDIA_TYPE: {}}}, 404: {"model": ErrorResponse}})
async def export_saved(current_user: dict = Depends(get_current_user)):
    """PDF из сохранённого резюме."""
    doc = _load_own_resume(current_user["_id"])
    form = ResumeForm.model_validate(doc.get("form") or {})
    document = assemble(form, current_user.get("name", ""))
    pdf = await run_in_threadpool(export_pdf, document, PageLayout())
    return _pdf_response(pdf)
