# File: application/src/seniku/controllers/assignment_controller.py

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy import false, func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.assignment import Assignment, AssignmentClass, AssignmentStatus
from ..models.category import Category
from ..models.notification import NotificationType
from ..models.school_class import SchoolClass
from ..models.submission import Submission
from ..models.user import User, UserRole
from ..schemas.assignment import AssignmentCreate, AssignmentRead, AssignmentUpdate
from ..schemas.notification import NotificationCreate
from ..schemas.user import ClassSummary
from ..utils.errors import ForbiddenError, NotFoundError
from ..utils.responses import Pagination
from ..utils.time import get_current_time, to_local, to_naive_utc
from .notification_controller import dispatch_notifications

logger = logging.getLogger(__name__)


def _load_options():
    return (
        selectinload(Assignment.category),
        selectinload(Assignment.creator),
        selectinload(Assignment.class_links).selectinload(AssignmentClass.school_class),
    )


def _submission_count(db: Session, assignment_id: UUID) -> int:
    return db.exec(
        select(func.count()).select_from(Submission).where(Submission.assignment_id == assignment_id)
    ).one()


def to_assignment_read(db: Session, assignment: Assignment) -> AssignmentRead:
    read = AssignmentRead.model_validate(assignment)
    read.classes = [
        ClassSummary.model_validate(link.school_class)
        for link in assignment.class_links
        if link.school_class is not None
    ]
    read.submission_count = _submission_count(db, assignment.id)
    return read


def _visibility_conditions(user: User) -> list:
    """Teachers see what they created, students see published work for their class."""
    if user.role == UserRole.TEACHER:
        return [Assignment.created_by == user.id]
    if user.role == UserRole.STUDENT:
        if not user.class_id:
            return [false()]
        class_assignments = select(AssignmentClass.assignment_id).where(AssignmentClass.class_id == user.class_id)
        return [Assignment.status == AssignmentStatus.ACTIVE, Assignment.id.in_(class_assignments)]
    return []


def _ensure_owner(assignment: Assignment, user: User) -> None:
    if user.role != UserRole.ADMIN and assignment.created_by != user.id:
        raise ForbiddenError("You can only modify assignments you created")


def _ensure_references(db: Session, category_id: Optional[UUID], class_ids: Optional[List[UUID]]) -> None:
    if category_id and not db.get(Category, category_id):
        raise NotFoundError("Category not found")
    for class_id in class_ids or []:
        if not db.get(SchoolClass, class_id):
            raise NotFoundError("Class not found")


def _replace_classes(assignment: Assignment, class_ids: List[UUID]) -> None:
    existing = {link.class_id: link for link in assignment.class_links}
    assignment.class_links = [
        existing.get(class_id) or AssignmentClass(class_id=class_id)
        for class_id in dict.fromkeys(class_ids)
    ]


def _schedule_publish_notifications(db: Session, assignment: Assignment, tasks: BackgroundTasks) -> None:
    """Queue an ASSIGNMENT_CREATED notification for every active student of the target classes."""
    class_ids = assignment.class_ids
    if not class_ids:
        return
    students = db.exec(
        select(User.id).where(
            User.class_id.in_(class_ids),
            User.role == UserRole.STUDENT,
            User.is_active == True,
        )
    ).all()
    deadline = to_local(assignment.deadline)
    payloads = [
        NotificationCreate(
            user_id=student_id,
            type=NotificationType.ASSIGNMENT_CREATED,
            title="Tugas Baru",
            message=f'Tugas baru "{assignment.title}" telah diterbitkan. Deadline: {deadline:%d %b %Y %H:%M}',
            link=f"/assignments/{assignment.id}",
        )
        for student_id in students
    ]
    if payloads:
        tasks.add_task(dispatch_notifications, payloads)
        logger.info(f"Queued {len(payloads)} notification(s) for assignment {assignment.id}")


def list_assignments(
    db: Session,
    user: User,
    pagination: Pagination,
    status: Optional[AssignmentStatus] = None,
    category_id: Optional[UUID] = None,
    class_id: Optional[UUID] = None,
    search: Optional[str] = None,
) -> Tuple[List[Assignment], int]:
    conditions = _visibility_conditions(user)
    if status:
        conditions.append(Assignment.status == status)
    if category_id:
        conditions.append(Assignment.category_id == category_id)
    if class_id:
        conditions.append(
            Assignment.id.in_(select(AssignmentClass.assignment_id).where(AssignmentClass.class_id == class_id))
        )
    if search:
        pattern = f"%{search}%"
        conditions.append(Assignment.title.ilike(pattern) | Assignment.description.ilike(pattern))

    total = db.exec(select(func.count()).select_from(Assignment).where(*conditions)).one()
    assignments = db.exec(
        select(Assignment)
        .where(*conditions)
        .options(*_load_options())
        .order_by(Assignment.deadline.asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return assignments, total


def get_assignment(db: Session, assignment_id: UUID, user: Optional[User] = None) -> Assignment:
    assignment = db.exec(
        select(Assignment).where(Assignment.id == assignment_id).options(*_load_options())
    ).first()
    if not assignment:
        raise NotFoundError("Assignment not found")

    if user is not None and user.role == UserRole.STUDENT:
        visible = (
            assignment.status == AssignmentStatus.ACTIVE
            and user.class_id is not None
            and user.class_id in assignment.class_ids
        )
        if not visible:
            raise NotFoundError("Assignment not found")
    return assignment


def create_assignment(db: Session, payload: AssignmentCreate, teacher: User, tasks: BackgroundTasks) -> Assignment:
    _ensure_references(db, payload.category_id, payload.class_ids)

    assignment = Assignment(
        title=payload.title,
        description=payload.description,
        category_id=payload.category_id,
        deadline=to_naive_utc(payload.deadline),
        status=payload.status,
        created_by=teacher.id,
    )
    _replace_classes(assignment, payload.class_ids)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    logger.info(f"Assignment {assignment.id} created by {teacher.id} with status {assignment.status.value}")

    if assignment.status == AssignmentStatus.ACTIVE:
        _schedule_publish_notifications(db, assignment, tasks)
    return get_assignment(db, assignment.id)


def update_assignment(
    db: Session,
    assignment_id: UUID,
    payload: AssignmentUpdate,
    teacher: User,
    tasks: BackgroundTasks,
) -> Assignment:
    assignment = get_assignment(db, assignment_id)
    _ensure_owner(assignment, teacher)

    data = payload.model_dump(exclude_unset=True)
    _ensure_references(db, data.get("category_id"), data.get("class_ids"))

    was_active = assignment.status == AssignmentStatus.ACTIVE
    class_ids = data.pop("class_ids", None)
    if class_ids is not None:
        _replace_classes(assignment, class_ids)
    if "deadline" in data:
        data["deadline"] = to_naive_utc(data["deadline"])
    for key, value in data.items():
        if value is None and key in ("title", "description", "category_id", "deadline", "status"):
            continue
        setattr(assignment, key, value)
    assignment.updated_at = get_current_time()
    db.add(assignment)
    db.commit()
    db.refresh(assignment)

    if not was_active and assignment.status == AssignmentStatus.ACTIVE:
        _schedule_publish_notifications(db, assignment, tasks)
    return get_assignment(db, assignment.id)


def delete_assignment(db: Session, assignment_id: UUID, teacher: User) -> None:
    assignment = get_assignment(db, assignment_id)
    _ensure_owner(assignment, teacher)
    db.delete(assignment)
    db.commit()
    logger.info(f"Assignment {assignment_id} deleted by {teacher.id}")


def _owned_assignments(db: Session, ids: List[UUID], teacher: User) -> List[Assignment]:
    stmt = select(Assignment).where(Assignment.id.in_(ids)).options(*_load_options())
    if teacher.role != UserRole.ADMIN:
        stmt = stmt.where(Assignment.created_by == teacher.id)
    return db.exec(stmt).all()


def bulk_update_status(
    db: Session,
    ids: List[UUID],
    status: AssignmentStatus,
    teacher: User,
    tasks: BackgroundTasks,
) -> int:
    assignments = _owned_assignments(db, ids, teacher)
    activated = []
    now = get_current_time()
    for assignment in assignments:
        if assignment.status != AssignmentStatus.ACTIVE and status == AssignmentStatus.ACTIVE:
            activated.append(assignment)
        assignment.status = status
        assignment.updated_at = now
        db.add(assignment)
    db.commit()

    for assignment in activated:
        db.refresh(assignment)
        _schedule_publish_notifications(db, assignment, tasks)
    logger.info(f"Bulk status update to {status.value}: {len(assignments)} assignment(s)")
    return len(assignments)


def bulk_delete(db: Session, ids: List[UUID], teacher: User) -> int:
    assignments = _owned_assignments(db, ids, teacher)
    for assignment in assignments:
        db.delete(assignment)
    db.commit()
    logger.info(f"Bulk delete: {len(assignments)} assignment(s) by {teacher.id}")
    return len(assignments)
