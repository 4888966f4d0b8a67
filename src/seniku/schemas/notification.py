from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.seniku.models.notification import NotificationType


class NotificationCreate(BaseModel):
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    link: Optional[str] = None


class NotificationRead(BaseModel):
    id: UUID
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    link: Optional[str] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
