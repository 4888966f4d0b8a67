# File: application/src/seniku/controllers/category_controller.py

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..models.assignment import Assignment
from ..models.category import Category
from ..schemas.catalog import CategoryCreate, CategoryRead, CategoryUpdate, sanitize_icon
from ..utils.errors import BadRequestError, ConflictError, NotFoundError
from ..utils.responses import Pagination
from ..utils.time import get_current_time

logger = logging.getLogger(__name__)


def _assignment_count(db: Session, category_id: UUID) -> int:
    return db.exec(
        select(func.count()).select_from(Assignment).where(Assignment.category_id == category_id)
    ).one()


def to_category_read(db: Session, category: Category) -> CategoryRead:
    read = CategoryRead.model_validate(category)
    read.assignment_count = _assignment_count(db, category.id)
    return read


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[UUID] = None) -> None:
    stmt = select(Category).where(Category.name == name)
    if exclude_id:
        stmt = stmt.where(Category.id != exclude_id)
    if db.exec(stmt).first():
        raise ConflictError("Category name already exists")


def list_categories(
    db: Session,
    pagination: Pagination,
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> Tuple[List[Category], int]:
    conditions = []
    if search:
        pattern = f"%{search}%"
        conditions.append(Category.name.ilike(pattern) | Category.description.ilike(pattern))
    if is_active is not None:
        conditions.append(Category.is_active == is_active)

    total = db.exec(select(func.count()).select_from(Category).where(*conditions)).one()
    categories = db.exec(
        select(Category)
        .where(*conditions)
        .order_by(Category.name.asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return categories, total


def get_category(db: Session, category_id: UUID) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


def create_category(db: Session, payload: CategoryCreate) -> Category:
    _ensure_unique_name(db, payload.name)
    data = payload.model_dump()
    data["icon"] = sanitize_icon(data.get("icon"))
    category = Category(**data)
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Category name already exists")
    db.refresh(category)
    logger.info(f"Category '{category.name}' created")
    return category


def update_category(db: Session, category_id: UUID, payload: CategoryUpdate) -> Category:
    category = get_category(db, category_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name") and data["name"] != category.name:
        _ensure_unique_name(db, data["name"], exclude_id=category.id)
    if "icon" in data:
        data["icon"] = sanitize_icon(data["icon"])
    for key, value in data.items():
        setattr(category, key, value)
    category.updated_at = get_current_time()
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: UUID, force: bool = False) -> None:
    category = get_category(db, category_id)
    assignments = _assignment_count(db, category_id)
    if assignments and not force:
        raise BadRequestError("Cannot delete category: Has assignments. Use force=true to force delete.")
    db.delete(category)
    db.commit()
    logger.info(f"Category {category_id} deleted (force={force}, assignments={assignments})")
