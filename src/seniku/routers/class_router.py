# File: application/src/seniku/routers/class_router.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ..controllers import class_controller
from ..db.session import get_db
from ..models.user import User
from ..schemas.catalog import ClassCreate, ClassUpdate
from ..utils.dependencies import get_current_teacher, get_current_user
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

router = APIRouter(prefix="/classes", tags=["Classes"])


@router.get("")
def list_classes(
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(pagination_params),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    classes, total = class_controller.list_classes(db, pagination, search)
    return paginated_response([class_controller.to_class_read(db, c) for c in classes], pagination, total)


@router.get("/{class_id}")
def get_class(class_id: UUID, _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    school_class = class_controller.get_class(db, class_id)
    return success_response(class_controller.to_class_read(db, school_class))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_class(payload: ClassCreate, _: User = Depends(get_current_teacher), db: Session = Depends(get_db)):
    school_class = class_controller.create_class(db, payload)
    return success_response(class_controller.to_class_read(db, school_class), "Class created successfully")


@router.put("/{class_id}")
def update_class(
    class_id: UUID,
    payload: ClassUpdate,
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    school_class = class_controller.update_class(db, class_id, payload)
    return success_response(class_controller.to_class_read(db, school_class), "Class updated successfully")


@router.delete("/{class_id}")
def delete_class(class_id: UUID, _: User = Depends(get_current_teacher), db: Session = Depends(get_db)):
    class_controller.delete_class(db, class_id)
    return success_response(message="Class deleted successfully")
