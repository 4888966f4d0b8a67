from sqlmodel import SQLModel, Field, Relationship
import uuid
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime
from src.seniku.utils.time import get_current_time

if TYPE_CHECKING:
    from src.seniku.models.assignment import Assignment


class Category(SQLModel, table=True):
    __tablename__ = 'category'
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=10)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    assignments: List["Assignment"] = Relationship(back_populates="category", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
