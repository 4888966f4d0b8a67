from sqlmodel import SQLModel, Field, Relationship
import uuid
from enum import Enum
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Column, Text, ForeignKey, Uuid, UniqueConstraint
from datetime import datetime
from src.seniku.utils.time import get_current_time

if TYPE_CHECKING:
    from src.seniku.models.user import User
    from src.seniku.models.assignment import Assignment


class SubmissionStatus(str, Enum):
    # NOT_SUBMITTED is never stored; it only describes a missing row in reports
    NOT_SUBMITTED = "NOT_SUBMITTED"
    PENDING = "PENDING"
    GRADED = "GRADED"
    REVISION = "REVISION"


class Submission(SQLModel, table=True):
    __tablename__ = 'submission'
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    assignment_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("assignment.id", ondelete="CASCADE"), nullable=False, index=True))
    student_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True))
    title: str
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    image_url: str
    image_medium: Optional[str] = None
    image_thumbnail: Optional[str] = None
    status: SubmissionStatus = Field(default=SubmissionStatus.PENDING)
    grade: Optional[int] = None
    feedback: Optional[str] = Field(default=None, sa_column=Column(Text))
    submitted_at: datetime = Field(default_factory=get_current_time)
    graded_at: Optional[datetime] = None
    revision_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    # Relationships
    assignment: Optional["Assignment"] = Relationship(back_populates="submissions")
    student: Optional["User"] = Relationship(back_populates="submissions")
    revisions: List["SubmissionRevision"] = Relationship(
        back_populates="submission",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "SubmissionRevision.version"},
    )


class SubmissionRevision(SQLModel, table=True):
    """Immutable snapshot of an image a submission used to carry."""
    __tablename__ = 'submission_revision'
    __table_args__ = (
        UniqueConstraint("submission_id", "version", name="uq_submission_revision_version"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    submission_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("submission.id", ondelete="CASCADE"), nullable=False, index=True))
    version: int
    image_url: str
    image_medium: Optional[str] = None
    image_thumbnail: Optional[str] = None
    revision_note: Optional[str] = Field(default=None, sa_column=Column(Text))
    submitted_at: datetime = Field(default_factory=get_current_time)

    submission: Optional["Submission"] = Relationship(back_populates="revisions")
