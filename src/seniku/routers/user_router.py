# File: application/src/seniku/routers/user_router.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ..controllers import user_controller
from ..db.session import get_db
from ..models.user import User, UserRole
from ..schemas.user import UserCreate, UserRead, UserUpdate
from ..utils.dependencies import get_current_teacher, get_current_user
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
def list_users(
    role: Optional[UserRole] = Query(None),
    class_id: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(pagination_params),
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    users, total = user_controller.list_users(db, pagination, role, class_id, search)
    return paginated_response([UserRead.model_validate(u) for u in users], pagination, total)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, _: User = Depends(get_current_teacher), db: Session = Depends(get_db)):
    user = user_controller.create_user(db, payload)
    return success_response(user_controller.to_user_detail(user), "User created successfully")


@router.get("/{user_id}")
def get_user(user_id: UUID, _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return success_response(user_controller.to_user_detail(user_controller.get_user(db, user_id)))


@router.put("/{user_id}")
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_controller.update_user(db, user_id, payload, current_user)
    return success_response(user_controller.to_user_detail(user), "User updated successfully")


@router.delete("/{user_id}")
def delete_user(user_id: UUID, current_user: User = Depends(get_current_teacher), db: Session = Depends(get_db)):
    user_controller.delete_user(db, user_id, current_user)
    return success_response(message="User deleted successfully")
