# File: application/src/seniku/schemas/catalog.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


# ─── Classes ───────────────────────────────────────────────────
class ClassCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None


class ClassRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    student_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ─── Categories ────────────────────────────────────────────────
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool
    assignment_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


def sanitize_icon(icon: Optional[str]) -> Optional[str]:
    """Strip NUL bytes and whitespace; icons are one emoji or a short code."""
    if icon is None:
        return None
    cleaned = icon.replace("\x00", "").strip()
    return cleaned[:10] or None
