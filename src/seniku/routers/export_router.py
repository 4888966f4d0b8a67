# File: application/src/seniku/routers/export_router.py

import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlmodel import Session

from ..controllers import export_controller
from ..db.session import get_db
from ..models.user import User
from ..schemas.export import ExportFilters, PdfExportRequest
from ..utils.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["Export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/grades/excel")
def export_grades_excel(
    filters: ExportFilters,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = export_controller.get_grades_rows(db, user, filters)
    logger.info(f"User {user.id} exporting {len(rows)} grade row(s) to Excel")
    return _attachment(
        export_controller.build_grades_excel(rows),
        XLSX_MEDIA_TYPE,
        export_controller.grades_excel_filename(),
    )


@router.post("/grades/pdf")
def export_grades_pdf(
    payload: PdfExportRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = export_controller.get_grades_rows(db, user, payload)
    logger.info(f"User {user.id} exporting {len(rows)} grade row(s) to PDF ({payload.format})")
    return _attachment(
        export_controller.build_grades_pdf(rows, payload.format),
        PDF_MEDIA_TYPE,
        export_controller.grades_pdf_filename(),
    )


@router.get("/report-card/{student_id}")
def export_report_card(
    student_id: UUID,
    format: Literal["summary", "detailed"] = Query("detailed"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    student = export_controller.get_report_card_student(db, student_id, user)
    return _attachment(
        export_controller.build_report_card_pdf(db, student, format),
        PDF_MEDIA_TYPE,
        export_controller.report_card_filename(student),
    )
