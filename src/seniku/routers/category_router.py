# File: application/src/seniku/routers/category_router.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ..controllers import category_controller
from ..db.session import get_db
from ..models.user import User
from ..schemas.catalog import CategoryCreate, CategoryUpdate
from ..utils.dependencies import get_current_teacher, get_current_user
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("")
def list_categories(
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    pagination: Pagination = Depends(pagination_params),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    categories, total = category_controller.list_categories(db, pagination, search, is_active)
    return paginated_response(
        [category_controller.to_category_read(db, c) for c in categories], pagination, total
    )


@router.get("/{category_id}")
def get_category(category_id: UUID, _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    category = category_controller.get_category(db, category_id)
    return success_response(category_controller.to_category_read(db, category))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, _: User = Depends(get_current_teacher), db: Session = Depends(get_db)):
    category = category_controller.create_category(db, payload)
    return success_response(category_controller.to_category_read(db, category), "Category created successfully")


@router.put("/{category_id}")
def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    category = category_controller.update_category(db, category_id, payload)
    return success_response(category_controller.to_category_read(db, category), "Category updated successfully")


@router.delete("/{category_id}")
def delete_category(
    category_id: UUID,
    force: bool = Query(False),
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    category_controller.delete_category(db, category_id, force)
    return success_response(message="Category deleted successfully")
