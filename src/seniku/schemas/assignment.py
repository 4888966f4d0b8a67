# File: application/src/seniku/schemas/assignment.py

from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from src.seniku.models.assignment import AssignmentStatus
from src.seniku.schemas.user import ClassSummary, UserBrief


class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    category_id: UUID
    deadline: datetime
    status: AssignmentStatus = AssignmentStatus.DRAFT
    class_ids: List[UUID] = Field(min_length=1)


class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    category_id: Optional[UUID] = None
    deadline: Optional[datetime] = None
    status: Optional[AssignmentStatus] = None
    class_ids: Optional[List[UUID]] = Field(default=None, min_length=1)


class CategoryBrief(BaseModel):
    id: UUID
    name: str
    icon: Optional[str] = None

    class Config:
        from_attributes = True


class AssignmentRead(BaseModel):
    id: UUID
    title: str
    description: str
    category_id: UUID
    category: Optional[CategoryBrief] = None
    deadline: datetime
    status: AssignmentStatus
    created_by: UUID
    creator: Optional[UserBrief] = None
    classes: List[ClassSummary] = []
    submission_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BulkStatusRequest(BaseModel):
    ids: List[UUID] = Field(min_length=1)
    status: AssignmentStatus


class BulkDeleteRequest(BaseModel):
    ids: List[UUID] = Field(min_length=1)
