from sqlmodel import SQLModel, Field, Relationship
import uuid
from enum import Enum
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Column, Text, ForeignKey, Uuid, UniqueConstraint
from datetime import date, datetime
from src.seniku.utils.time import get_current_time

if TYPE_CHECKING:
    from src.seniku.models.school_class import SchoolClass
    from src.seniku.models.assignment import Assignment
    from src.seniku.models.submission import Submission
    from src.seniku.models.achievement import UserAchievement
    from src.seniku.models.notification import Notification


class UserRole(str, Enum):
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"


class TeacherClass(SQLModel, table=True):
    __tablename__ = 'teacher_class'
    __table_args__ = (
        UniqueConstraint("teacher_id", "class_id", name="uq_teacher_class"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    teacher_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True))
    class_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("school_class.id", ondelete="CASCADE"), nullable=False, index=True))
    created_at: datetime = Field(default_factory=get_current_time)

    teacher: Optional["User"] = Relationship(back_populates="teacher_classes")
    school_class: Optional["SchoolClass"] = Relationship(back_populates="teacher_links")


class User(SQLModel, table=True):
    __tablename__ = 'user'
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: Optional[str] = Field(default=None, unique=True, index=True)
    nip: Optional[str] = Field(default=None, unique=True, index=True)
    nis: Optional[str] = Field(default=None, unique=True, index=True)
    hashed_password: str
    name: str
    role: UserRole = Field(default=UserRole.STUDENT)
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = Field(default=None, sa_column=Column(Text))
    birthdate: Optional[date] = None
    avatar: Optional[str] = None
    class_id: Optional[uuid.UUID] = Field(default=None, sa_column=Column(Uuid, ForeignKey("school_class.id", ondelete="SET NULL"), index=True))
    is_active: bool = Field(default=True)
    # Bumped on logout; refresh tokens carrying an older value are rejected
    token_version: int = Field(default=0)
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    # Relationships
    school_class: Optional["SchoolClass"] = Relationship(back_populates="students")
    teacher_classes: List["TeacherClass"] = Relationship(back_populates="teacher", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    created_assignments: List["Assignment"] = Relationship(back_populates="creator", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    submissions: List["Submission"] = Relationship(back_populates="student", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    achievements: List["UserAchievement"] = Relationship(back_populates="user", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    notifications: List["Notification"] = Relationship(back_populates="user", sa_relationship_kwargs={"cascade": "all, delete-orphan"})

    @property
    def is_teacher(self) -> bool:
        return self.role in (UserRole.TEACHER, UserRole.ADMIN)

    @property
    def class_name(self) -> Optional[str]:
        return self.school_class.name if self.school_class else None
