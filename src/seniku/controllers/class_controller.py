# File: application/src/seniku/controllers/class_controller.py

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..models.assignment import AssignmentClass
from ..models.school_class import SchoolClass
from ..models.user import User
from ..schemas.catalog import ClassCreate, ClassRead, ClassUpdate
from ..utils.errors import BadRequestError, ConflictError, NotFoundError
from ..utils.responses import Pagination
from ..utils.time import get_current_time

logger = logging.getLogger(__name__)


def _student_count(db: Session, class_id: UUID) -> int:
    return db.exec(select(func.count()).select_from(User).where(User.class_id == class_id)).one()


def to_class_read(db: Session, school_class: SchoolClass) -> ClassRead:
    read = ClassRead.model_validate(school_class)
    read.student_count = _student_count(db, school_class.id)
    return read


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[UUID] = None) -> None:
    stmt = select(SchoolClass).where(SchoolClass.name == name)
    if exclude_id:
        stmt = stmt.where(SchoolClass.id != exclude_id)
    if db.exec(stmt).first():
        raise ConflictError("Class name already exists")


def list_classes(db: Session, pagination: Pagination, search: Optional[str] = None) -> Tuple[List[SchoolClass], int]:
    conditions = []
    if search:
        conditions.append(SchoolClass.name.ilike(f"%{search}%"))

    total = db.exec(select(func.count()).select_from(SchoolClass).where(*conditions)).one()
    classes = db.exec(
        select(SchoolClass)
        .where(*conditions)
        .order_by(SchoolClass.name.asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return classes, total


def get_class(db: Session, class_id: UUID) -> SchoolClass:
    school_class = db.get(SchoolClass, class_id)
    if not school_class:
        raise NotFoundError("Class not found")
    return school_class


def create_class(db: Session, payload: ClassCreate) -> SchoolClass:
    _ensure_unique_name(db, payload.name)
    school_class = SchoolClass(**payload.model_dump())
    db.add(school_class)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Class name already exists")
    db.refresh(school_class)
    logger.info(f"Class '{school_class.name}' created")
    return school_class


def update_class(db: Session, class_id: UUID, payload: ClassUpdate) -> SchoolClass:
    school_class = get_class(db, class_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name") and data["name"] != school_class.name:
        _ensure_unique_name(db, data["name"], exclude_id=school_class.id)
    for key, value in data.items():
        setattr(school_class, key, value)
    school_class.updated_at = get_current_time()
    db.add(school_class)
    db.commit()
    db.refresh(school_class)
    return school_class


def delete_class(db: Session, class_id: UUID) -> None:
    school_class = get_class(db, class_id)
    assignment_links = db.exec(
        select(func.count()).select_from(AssignmentClass).where(AssignmentClass.class_id == class_id)
    ).one()
    if _student_count(db, class_id) or assignment_links:
        raise BadRequestError("Cannot delete class: Class has students or assignments")
    db.delete(school_class)
    db.commit()
    logger.info(f"Class {class_id} deleted")
