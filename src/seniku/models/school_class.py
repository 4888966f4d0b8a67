from sqlmodel import SQLModel, Field, Relationship
import uuid
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime
from src.seniku.utils.time import get_current_time

if TYPE_CHECKING:
    from src.seniku.models.user import User, TeacherClass
    from src.seniku.models.assignment import AssignmentClass


class SchoolClass(SQLModel, table=True):
    __tablename__ = 'school_class'
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    # Relationships
    students: List["User"] = Relationship(back_populates="school_class")
    teacher_links: List["TeacherClass"] = Relationship(back_populates="school_class", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    assignment_links: List["AssignmentClass"] = Relationship(back_populates="school_class", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
