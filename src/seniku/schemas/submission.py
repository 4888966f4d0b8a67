# File: application/src/seniku/schemas/submission.py

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from src.seniku.models.submission import SubmissionStatus
from src.seniku.utils.history import HistoryEntry


class SubmissionCreate(BaseModel):
    assignment_id: UUID
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: str
    image_medium: Optional[str] = None
    image_thumbnail: Optional[str] = None


class SubmissionDetails(BaseModel):
    """Text parts of a submission, checked before any artwork is uploaded."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value


class SubmissionUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_medium: Optional[str] = None
    image_thumbnail: Optional[str] = None


class SubmissionGrade(BaseModel):
    grade: int = Field(ge=0, le=100)
    feedback: Optional[str] = None


class SubmissionRevisionRequest(BaseModel):
    revision_note: str = Field(min_length=1)


class SubmissionRead(BaseModel):
    id: UUID
    assignment_id: UUID
    assignment_title: Optional[str] = None
    student_id: UUID
    student_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    image_url: str
    image_medium: Optional[str] = None
    image_thumbnail: Optional[str] = None
    status: SubmissionStatus
    grade: Optional[int] = None
    feedback: Optional[str] = None
    submitted_at: datetime
    graded_at: Optional[datetime] = None
    revision_count: int
    history: List[HistoryEntry] = []

    class Config:
        from_attributes = True
