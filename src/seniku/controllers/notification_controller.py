# File: application/src/seniku/controllers/notification_controller.py

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import Session, select

from ..db.session import open_session
from ..models.notification import Notification, NotificationType
from ..schemas.notification import NotificationCreate
from ..utils.errors import NotFoundError
from ..utils.responses import Pagination

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> Notification:
    notification = Notification(user_id=user_id, type=type, title=title, message=message, link=link)
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def dispatch_notifications(payloads: List[NotificationCreate]) -> None:
    """
    Background task: deliver notifications in a session of its own.

    A failed delivery is logged and skipped so the remaining recipients are
    still notified and the request that scheduled the work is unaffected.
    """
    if not payloads:
        return
    with open_session() as db:
        for payload in payloads:
            try:
                create_notification(db, **payload.model_dump())
            except Exception as e:
                db.rollback()
                logger.error(f"Failed to deliver notification to user {payload.user_id}: {e}", exc_info=True)
    logger.info(f"Dispatched {len(payloads)} notification(s)")


def list_notifications(
    db: Session,
    user_id: UUID,
    pagination: Pagination,
    is_read: Optional[bool] = None,
    type: Optional[NotificationType] = None,
) -> Tuple[List[Notification], int]:
    conditions = [Notification.user_id == user_id]
    if is_read is not None:
        conditions.append(Notification.is_read == is_read)
    if type is not None:
        conditions.append(Notification.type == type)

    total = db.exec(select(func.count()).select_from(Notification).where(*conditions)).one()
    items = db.exec(
        select(Notification)
        .where(*conditions)
        .order_by(Notification.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return items, total


def get_notification(db: Session, notification_id: UUID, user_id: UUID) -> Notification:
    notification = db.get(Notification, notification_id)
    if not notification or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    return notification


def mark_as_read(db: Session, notification_id: UUID, user_id: UUID) -> Notification:
    notification = get_notification(db, notification_id, user_id)
    notification.is_read = True
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user_id: UUID) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read == False)
        .values(is_read=True)
    )
    db.commit()
    return result.rowcount


def unread_count(db: Session, user_id: UUID) -> int:
    return db.exec(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read == False)
    ).one()


def delete_notification(db: Session, notification_id: UUID, user_id: UUID) -> None:
    notification = get_notification(db, notification_id, user_id)
    db.delete(notification)
    db.commit()
