# File: application/src/seniku/schemas/achievement.py
"""
Achievement payloads and the unlock-criterion union.

A criterion is a record tagged by ``type``. Known kinds are validated into
their own model; any other ``type`` is kept as an ``UnknownCriterion`` so
records written by newer clients survive a round trip and simply never
unlock.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from src.seniku.schemas.catalog import sanitize_icon


class CriterionType(str, Enum):
    TOTAL_GRADED_SUBMISSIONS = "total_graded_submissions"
    AVERAGE_GRADE = "average_grade"
    HIGHEST_GRADE = "highest_grade"
    GRADE_COUNT = "grade_count"
    CATEGORY_COMPLETION = "category_completion"


class _CriterionBase(BaseModel):
    value: float = 0
    operator: str = ">="

    class Config:
        extra = "allow"


class TotalGradedSubmissionsCriterion(_CriterionBase):
    type: Literal["total_graded_submissions"]


class AverageGradeCriterion(_CriterionBase):
    type: Literal["average_grade"]


class HighestGradeCriterion(_CriterionBase):
    type: Literal["highest_grade"]


class GradeCountCriterion(_CriterionBase):
    type: Literal["grade_count"]
    # Stored for forward compatibility; the A-grade threshold is fixed at 90
    min_grade: Optional[float] = None


class CategoryCompletionCriterion(_CriterionBase):
    type: Literal["category_completion"]
    categories: List[str] = []


class UnknownCriterion(BaseModel):
    type: Optional[str] = None

    class Config:
        extra = "allow"


KnownCriterion = Annotated[
    Union[
        TotalGradedSubmissionsCriterion,
        AverageGradeCriterion,
        HighestGradeCriterion,
        GradeCountCriterion,
        CategoryCompletionCriterion,
    ],
    Field(discriminator="type"),
]

Criterion = Union[
    TotalGradedSubmissionsCriterion,
    AverageGradeCriterion,
    HighestGradeCriterion,
    GradeCountCriterion,
    CategoryCompletionCriterion,
    UnknownCriterion,
]

_known_adapter = TypeAdapter(KnownCriterion)
KNOWN_TYPES = {kind.value for kind in CriterionType}


def parse_criterion(raw: Optional[Dict[str, Any]]) -> Criterion:
    """Validate a stored or submitted criterion dict into its typed model."""
    if isinstance(raw, dict) and raw.get("type") in KNOWN_TYPES:
        return _known_adapter.validate_python(raw)
    return UnknownCriterion.model_validate(raw if isinstance(raw, dict) else {})


class AchievementCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    icon: str = Field(min_length=1)
    criteria: Optional[Dict[str, Any]] = None

    @field_validator("icon")
    @classmethod
    def clean_icon(cls, value: str) -> str:
        cleaned = sanitize_icon(value)
        if not cleaned:
            raise ValueError("Icon is required")
        return cleaned

    @field_validator("criteria")
    @classmethod
    def check_criteria(cls, value):
        if value is None:
            return value
        return parse_criterion(value).model_dump(exclude_none=True)


class AchievementUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = None
    criteria: Optional[Dict[str, Any]] = None

    @field_validator("icon")
    @classmethod
    def clean_icon(cls, value):
        return sanitize_icon(value)

    @field_validator("criteria")
    @classmethod
    def check_criteria(cls, value):
        if value is None:
            return value
        return parse_criterion(value).model_dump(exclude_none=True)


class AchievementRead(BaseModel):
    id: UUID
    name: str
    description: str
    icon: str
    criteria: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserAchievementRead(BaseModel):
    id: UUID
    user_id: UUID
    achievement_id: UUID
    unlocked_at: datetime
    achievement: AchievementRead

    class Config:
        from_attributes = True
