from sqlmodel import SQLModel, Field, Relationship
import uuid
from enum import Enum
from typing import Optional, TYPE_CHECKING
from sqlalchemy import Column, Text, ForeignKey, Uuid
from datetime import datetime
from src.seniku.utils.time import get_current_time

if TYPE_CHECKING:
    from src.seniku.models.user import User


class NotificationType(str, Enum):
    ASSIGNMENT_CREATED = "ASSIGNMENT_CREATED"
    SUBMISSION_GRADED = "SUBMISSION_GRADED"
    REVISION_REQUESTED = "REVISION_REQUESTED"
    ACHIEVEMENT_UNLOCKED = "ACHIEVEMENT_UNLOCKED"
    SYSTEM = "SYSTEM"


class Notification(SQLModel, table=True):
    __tablename__ = 'notification'
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True))
    type: NotificationType
    title: str
    message: str = Field(sa_column=Column(Text, nullable=False))
    link: Optional[str] = None
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=get_current_time)

    user: Optional["User"] = Relationship(back_populates="notifications")
