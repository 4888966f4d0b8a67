# File: application/src/seniku/controllers/user_controller.py

import logging
from typing import List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.school_class import SchoolClass
from ..models.user import TeacherClass, User, UserRole
from ..schemas.user import RegisterRequest, UserCreate, UserDetail, UserUpdate
from ..utils.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..utils.responses import Pagination
from ..utils.security import hash_password
from ..utils.time import get_current_time

logger = logging.getLogger(__name__)


def _ensure_unique(db: Session, field: str, value: Optional[str], label: str, exclude_id: Optional[UUID] = None) -> None:
    if not value:
        return
    column = getattr(User, field)
    stmt = select(User).where(column == value)
    if exclude_id:
        stmt = stmt.where(User.id != exclude_id)
    if db.exec(stmt).first():
        raise ConflictError(f"{label} already exists")


def _ensure_classes_exist(db: Session, class_ids: List[UUID]) -> None:
    for class_id in class_ids:
        if not db.get(SchoolClass, class_id):
            raise NotFoundError("Class not found")


def _replace_teacher_classes(user: User, class_ids: List[UUID]) -> None:
    # Links for classes that stay are reused; dropped links are removed as orphans
    existing = {link.class_id: link for link in user.teacher_classes}
    user.teacher_classes = [
        existing.get(class_id) or TeacherClass(class_id=class_id)
        for class_id in dict.fromkeys(class_ids)
    ]


def to_user_detail(user: User) -> UserDetail:
    return UserDetail.model_validate(user)


def create_user_record(db: Session, payload: Union[RegisterRequest, UserCreate]) -> User:
    _ensure_unique(db, "email", payload.email, "Email")
    _ensure_unique(db, "nip", payload.nip, "NIP")
    _ensure_unique(db, "nis", payload.nis, "NIS")
    if payload.class_id:
        _ensure_classes_exist(db, [payload.class_id])

    class_ids = getattr(payload, "class_ids", None) or []
    _ensure_classes_exist(db, class_ids)

    user = User(
        **payload.model_dump(exclude={"password", "class_ids"}),
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.flush()
        if class_ids:
            _replace_teacher_classes(user, class_ids)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User with the same email, NIP or NIS already exists")
    db.refresh(user)
    return user


def list_users(
    db: Session,
    pagination: Pagination,
    role: Optional[UserRole] = None,
    class_id: Optional[UUID] = None,
    search: Optional[str] = None,
) -> Tuple[List[User], int]:
    conditions = []
    if role:
        conditions.append(User.role == role)
    if class_id:
        conditions.append(User.class_id == class_id)
    if search:
        pattern = f"%{search}%"
        conditions.append(
            User.name.ilike(pattern)
            | User.email.ilike(pattern)
            | User.nip.ilike(pattern)
            | User.nis.ilike(pattern)
        )

    total = db.exec(select(func.count()).select_from(User).where(*conditions)).one()
    users = db.exec(
        select(User)
        .where(*conditions)
        .options(selectinload(User.school_class))
        .order_by(User.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return users, total


def get_user(db: Session, user_id: UUID) -> User:
    user = db.exec(
        select(User)
        .where(User.id == user_id)
        .options(
            selectinload(User.school_class),
            selectinload(User.teacher_classes).selectinload(TeacherClass.school_class),
        )
    ).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, payload: UserCreate) -> User:
    user = create_user_record(db, payload)
    logger.info(f"Created {user.role.value} account {user.id}")
    return user


def update_user(db: Session, user_id: UUID, payload: UserUpdate, current_user: User) -> User:
    if not current_user.is_teacher and current_user.id != user_id:
        raise ForbiddenError("You can only update your own profile")

    user = get_user(db, user_id)
    data = payload.model_dump(exclude_unset=True)

    # Only staff may change role-bound or account-state fields
    if not current_user.is_teacher:
        for field in ("class_id", "class_ids", "is_active", "nip", "nis"):
            if field in data:
                raise ForbiddenError(f"You are not allowed to change {field}")

    if "nis" in data and data["nis"] and user.role != UserRole.STUDENT:
        raise ValidationError("NIS is only allowed for students")
    if "nip" in data and data["nip"] and user.role != UserRole.TEACHER:
        raise ValidationError("NIP is only allowed for teachers")
    if "class_ids" in data and user.role != UserRole.TEACHER:
        raise ValidationError("class_ids is only allowed for teachers")
    if data.get("class_id") and user.role != UserRole.STUDENT:
        raise ValidationError("class_id is only allowed for students")

    if data.get("email") != user.email:
        _ensure_unique(db, "email", data.get("email"), "Email", exclude_id=user.id)
    if data.get("nip") != user.nip:
        _ensure_unique(db, "nip", data.get("nip"), "NIP", exclude_id=user.id)
    if data.get("nis") != user.nis:
        _ensure_unique(db, "nis", data.get("nis"), "NIS", exclude_id=user.id)

    class_ids = data.pop("class_ids", None)
    if data.get("class_id"):
        _ensure_classes_exist(db, [data["class_id"]])
    if class_ids is not None:
        _ensure_classes_exist(db, class_ids)
        _replace_teacher_classes(user, class_ids)

    for key, value in data.items():
        setattr(user, key, value)
    user.updated_at = get_current_time()
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User with the same email, NIP or NIS already exists")
    db.expire_all()
    return get_user(db, user_id)


def delete_user(db: Session, user_id: UUID, current_user: User) -> None:
    if current_user.id == user_id:
        raise ForbiddenError("You cannot delete your own account")
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted by {current_user.id}")
