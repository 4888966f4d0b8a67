from sqlmodel import SQLModel, Field, Relationship
import uuid
from enum import Enum
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Column, Text, ForeignKey, Uuid, UniqueConstraint
from datetime import datetime
from src.seniku.utils.time import get_current_time

if TYPE_CHECKING:
    from src.seniku.models.user import User
    from src.seniku.models.category import Category
    from src.seniku.models.school_class import SchoolClass
    from src.seniku.models.submission import Submission


class AssignmentStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class AssignmentClass(SQLModel, table=True):
    __tablename__ = 'assignment_class'
    __table_args__ = (
        UniqueConstraint("assignment_id", "class_id", name="uq_assignment_class"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    assignment_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("assignment.id", ondelete="CASCADE"), nullable=False, index=True))
    class_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("school_class.id", ondelete="CASCADE"), nullable=False, index=True))

    assignment: Optional["Assignment"] = Relationship(back_populates="class_links")
    school_class: Optional["SchoolClass"] = Relationship(back_populates="assignment_links")


class Assignment(SQLModel, table=True):
    __tablename__ = 'assignment'
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: str = Field(sa_column=Column(Text, nullable=False))
    category_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("category.id", ondelete="CASCADE"), nullable=False, index=True))
    deadline: datetime
    status: AssignmentStatus = Field(default=AssignmentStatus.DRAFT)
    created_by: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True))
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    # Relationships
    category: Optional["Category"] = Relationship(back_populates="assignments")
    creator: Optional["User"] = Relationship(back_populates="created_assignments")
    class_links: List["AssignmentClass"] = Relationship(back_populates="assignment", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    submissions: List["Submission"] = Relationship(back_populates="assignment", sa_relationship_kwargs={"cascade": "all, delete-orphan"})

    @property
    def class_ids(self) -> List[uuid.UUID]:
        return [link.class_id for link in self.class_links]
