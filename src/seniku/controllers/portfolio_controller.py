# File: application/src/seniku/controllers/portfolio_controller.py

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.assignment import Assignment
from ..models.submission import Submission, SubmissionStatus
from ..models.user import User
from ..utils.errors import NotFoundError
from ..utils.history import history_for
from ..utils.responses import Pagination

SORT_COLUMNS = {
    "grade": Submission.grade,
    "submitted_at": Submission.submitted_at,
    "title": Submission.title,
}


def to_portfolio_item(submission: Submission) -> dict:
    assignment = submission.assignment
    student = submission.student
    category = assignment.category if assignment else None
    return {
        "id": submission.id,
        "title": submission.title,
        "description": submission.description,
        "image_url": submission.image_url,
        "image_medium": submission.image_medium,
        "image_thumbnail": submission.image_thumbnail,
        "grade": submission.grade,
        "feedback": submission.feedback,
        "submitted_at": submission.submitted_at,
        "graded_at": submission.graded_at,
        "student": {
            "id": student.id,
            "name": student.name,
            "nis": student.nis,
            "avatar": student.avatar,
            "class_name": student.class_name,
        } if student else None,
        "assignment": {"id": assignment.id, "title": assignment.title} if assignment else None,
        "category": {"id": category.id, "name": category.name, "icon": category.icon} if category else None,
        "history": [entry.model_dump() for entry in history_for(submission)],
    }


def _load_options():
    return (
        selectinload(Submission.assignment).selectinload(Assignment.category),
        selectinload(Submission.student).selectinload(User.school_class),
        selectinload(Submission.revisions),
    )


def list_portfolio(
    db: Session,
    pagination: Pagination,
    student_id: Optional[UUID] = None,
    class_id: Optional[UUID] = None,
    category_id: Optional[UUID] = None,
    min_grade: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: str = "submitted_at",
    sort_order: str = "desc",
) -> Tuple[List[Submission], int]:
    conditions = [Submission.status == SubmissionStatus.GRADED]
    if student_id:
        conditions.append(Submission.student_id == student_id)
    if class_id:
        conditions.append(Submission.student_id.in_(select(User.id).where(User.class_id == class_id)))
    if category_id:
        conditions.append(Submission.assignment_id.in_(select(Assignment.id).where(Assignment.category_id == category_id)))
    if min_grade is not None:
        conditions.append(Submission.grade >= min_grade)
    if search:
        pattern = f"%{search}%"
        conditions.append(
            Submission.title.ilike(pattern)
            | Submission.description.ilike(pattern)
            | Submission.student_id.in_(select(User.id).where(User.name.ilike(pattern)))
        )

    column = SORT_COLUMNS.get(sort_by, Submission.submitted_at)
    ordering = column.asc() if sort_order == "asc" else column.desc()

    total = db.exec(select(func.count()).select_from(Submission).where(*conditions)).one()
    items = db.exec(
        select(Submission)
        .where(*conditions)
        .options(*_load_options())
        .order_by(ordering)
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return items, total


def get_portfolio_item(db: Session, submission_id: UUID) -> Submission:
    submission = db.exec(
        select(Submission).where(Submission.id == submission_id).options(*_load_options())
    ).first()
    if not submission or submission.status != SubmissionStatus.GRADED:
        raise NotFoundError("Portfolio item not found")
    return submission
