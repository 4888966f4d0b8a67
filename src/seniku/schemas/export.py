from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class ExportFilters(BaseModel):
    class_ids: Optional[List[UUID]] = None
    student_ids: Optional[List[UUID]] = None
    assignment_ids: Optional[List[UUID]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class PdfExportRequest(ExportFilters):
    format: Literal["summary", "detailed"] = "summary"


class GradeRow(BaseModel):
    """One graded submission flattened for spreadsheet and PDF rendering."""
    submission_id: UUID
    student_id: UUID
    student_name: str
    nis: Optional[str] = None
    class_name: Optional[str] = None
    assignment_id: UUID
    assignment_title: str
    category_name: Optional[str] = None
    grade: int
    status: str
    feedback: Optional[str] = None
    submitted_at: datetime
    graded_at: Optional[datetime] = None
