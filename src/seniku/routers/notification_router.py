# File: application/src/seniku/routers/notification_router.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..controllers import notification_controller
from ..db.session import get_db
from ..models.notification import NotificationType
from ..models.user import User
from ..schemas.notification import NotificationRead
from ..utils.dependencies import get_current_user
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
def list_notifications(
    is_read: Optional[bool] = Query(None),
    type: Optional[NotificationType] = Query(None),
    pagination: Pagination = Depends(pagination_params),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items, total = notification_controller.list_notifications(db, user.id, pagination, is_read, type)
    return paginated_response([NotificationRead.model_validate(n) for n in items], pagination, total)


@router.get("/unread/count")
def unread_count(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return success_response({"count": notification_controller.unread_count(db, user.id)})


@router.put("/read-all")
def mark_all_as_read(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = notification_controller.mark_all_as_read(db, user.id)
    return success_response({"updated": updated}, "All notifications marked as read")


@router.get("/{notification_id}")
def get_notification(notification_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification = notification_controller.get_notification(db, notification_id, user.id)
    return success_response(NotificationRead.model_validate(notification))


@router.put("/{notification_id}/read")
def mark_as_read(notification_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification = notification_controller.mark_as_read(db, notification_id, user.id)
    return success_response(NotificationRead.model_validate(notification), "Notification marked as read")


@router.delete("/{notification_id}")
def delete_notification(notification_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification_controller.delete_notification(db, notification_id, user.id)
    return success_response(message="Notification deleted successfully")
