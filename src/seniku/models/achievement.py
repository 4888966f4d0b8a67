from sqlmodel import SQLModel, Field, Relationship
import uuid
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from sqlalchemy import Column, Text, ForeignKey, Uuid, UniqueConstraint, JSON
from datetime import datetime
from src.seniku.utils.time import get_current_time

if TYPE_CHECKING:
    from src.seniku.models.user import User


class Achievement(SQLModel, table=True):
    __tablename__ = 'achievement'
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=100)
    description: str = Field(sa_column=Column(Text, nullable=False))
    icon: str = Field(max_length=10)
    # Declarative unlock rule, e.g. {"type": "average_grade", "value": 85, "operator": ">="}
    criteria: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    user_links: List["UserAchievement"] = Relationship(back_populates="achievement", sa_relationship_kwargs={"cascade": "all, delete-orphan"})


class UserAchievement(SQLModel, table=True):
    __tablename__ = 'user_achievement'
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True))
    achievement_id: uuid.UUID = Field(sa_column=Column(Uuid, ForeignKey("achievement.id", ondelete="CASCADE"), nullable=False, index=True))
    unlocked_at: datetime = Field(default_factory=get_current_time)

    user: Optional["User"] = Relationship(back_populates="achievements")
    achievement: Optional["Achievement"] = Relationship(back_populates="user_links")
