# File: application/src/seniku/controllers/submission_controller.py
"""
Submission lifecycle.

    PENDING --grade--> GRADED
    PENDING --return for revision--> REVISION --update--> PENDING

One row exists per (assignment, student); re-submitting mutates it. Every
image a submission stops carrying is archived as a SubmissionRevision so the
history can be rebuilt from stored state alone.
"""
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.assignment import Assignment
from ..models.notification import NotificationType
from ..models.submission import Submission, SubmissionRevision, SubmissionStatus
from ..models.user import User, UserRole
from ..schemas.notification import NotificationCreate
from ..schemas.submission import (
    SubmissionCreate,
    SubmissionGrade,
    SubmissionRead,
    SubmissionUpdate,
)
from ..utils.errors import ConflictError, DomainRuleViolation, ForbiddenError, NotFoundError
from ..utils.history import history_for, same_image
from ..utils.responses import Pagination
from ..utils.time import get_current_time
from .achievement_evaluator import run_achievement_check
from .notification_controller import dispatch_notifications

logger = logging.getLogger(__name__)

MUTABLE_STATUSES = (SubmissionStatus.PENDING, SubmissionStatus.REVISION)
DUPLICATE_SUBMISSION = (
    "Submission already exists for this assignment. "
    "Please use update endpoint to modify your submission."
)


def _load_options():
    return (
        selectinload(Submission.revisions),
        selectinload(Submission.assignment),
        selectinload(Submission.student),
    )


def to_submission_read(submission: Submission) -> SubmissionRead:
    read = SubmissionRead.model_validate(submission)
    read.assignment_title = submission.assignment.title if submission.assignment else None
    read.student_name = submission.student.name if submission.student else None
    read.history = history_for(submission)
    return read


def _ensure_can_view(submission: Submission, user: User) -> None:
    if user.role == UserRole.STUDENT and submission.student_id != user.id:
        raise ForbiddenError("You can only access your own submissions")


def _latest_revision(db: Session, submission_id: UUID) -> Optional[SubmissionRevision]:
    return db.exec(
        select(SubmissionRevision)
        .where(SubmissionRevision.submission_id == submission_id)
        .order_by(SubmissionRevision.version.desc())
    ).first()


def _archive_current_image(db: Session, submission: Submission, note: Optional[str] = None) -> Optional[SubmissionRevision]:
    """
    Snapshot the image the submission carries right now.

    Nothing is written when that image already is the newest snapshot, which
    keeps repeated calls from archiving the same artwork twice.
    """
    latest = _latest_revision(db, submission.id)
    if latest is not None and same_image(latest, submission):
        return None

    revision = SubmissionRevision(
        submission_id=submission.id,
        version=(latest.version if latest else 0) + 1,
        image_url=submission.image_url,
        image_medium=submission.image_medium,
        image_thumbnail=submission.image_thumbnail,
        revision_note=note,
        submitted_at=submission.submitted_at,
    )
    db.add(revision)
    return revision


def list_submissions(
    db: Session,
    user: User,
    pagination: Pagination,
    assignment_id: Optional[UUID] = None,
    student_id: Optional[UUID] = None,
    status: Optional[SubmissionStatus] = None,
    search: Optional[str] = None,
) -> Tuple[List[Submission], int]:
    conditions = []
    if user.role == UserRole.STUDENT:
        conditions.append(Submission.student_id == user.id)
    elif student_id:
        conditions.append(Submission.student_id == student_id)
    if assignment_id:
        conditions.append(Submission.assignment_id == assignment_id)
    if status:
        conditions.append(Submission.status == status)
    if search:
        pattern = f"%{search}%"
        conditions.append(Submission.title.ilike(pattern) | Submission.description.ilike(pattern))

    total = db.exec(select(func.count()).select_from(Submission).where(*conditions)).one()
    submissions = db.exec(
        select(Submission)
        .where(*conditions)
        .options(*_load_options())
        .order_by(Submission.submitted_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return submissions, total


def get_submission(db: Session, submission_id: UUID, user: Optional[User] = None) -> Submission:
    submission = db.exec(
        select(Submission).where(Submission.id == submission_id).options(*_load_options())
    ).first()
    if not submission:
        raise NotFoundError("Submission not found")
    if user is not None:
        _ensure_can_view(submission, user)
    return submission


def _find_existing(db: Session, assignment_id: UUID, student_id: UUID) -> Optional[Submission]:
    return db.exec(
        select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
    ).first()


def insert_submission(db: Session, payload: SubmissionCreate, student_id: UUID) -> Submission:
    """Create the row; a racing insert for the same pair surfaces as a conflict."""
    submission = Submission(
        assignment_id=payload.assignment_id,
        student_id=student_id,
        title=payload.title,
        description=payload.description,
        image_url=payload.image_url,
        image_medium=payload.image_medium,
        image_thumbnail=payload.image_thumbnail,
        status=SubmissionStatus.PENDING,
        submitted_at=get_current_time(),
    )
    db.add(submission)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Duplicate submission for assignment {payload.assignment_id} by {student_id}")
        raise ConflictError(DUPLICATE_SUBMISSION)
    db.refresh(submission)
    return submission


def submit(db: Session, payload: SubmissionCreate, student: User) -> Tuple[Submission, bool]:
    """Create the student's submission or re-submit it; the flag is True when a row was created."""
    # 1️⃣ load assignment & enforce deadline
    assignment = db.get(Assignment, payload.assignment_id)
    if not assignment:
        raise NotFoundError("Assignment not found")

    if get_current_time() > assignment.deadline:
        raise DomainRuleViolation("Assignment deadline has passed")

    # 2️⃣ re-submission goes through the update path
    existing = _find_existing(db, payload.assignment_id, student.id)
    if existing:
        if existing.status == SubmissionStatus.GRADED:
            raise DomainRuleViolation("Submission has already been graded")
        logger.info(f"Re-submission for assignment {assignment.id} by {student.id} updates {existing.id}")
        updated = update_submission(
            db,
            existing.id,
            SubmissionUpdate(**payload.model_dump(exclude={"assignment_id"})),
            student,
        )
        return updated, False

    # 3️⃣ create
    submission = insert_submission(db, payload, student.id)
    logger.info(f"Submission {submission.id} created for assignment {assignment.id}")
    return get_submission(db, submission.id), True


def ensure_updatable(db: Session, submission_id: UUID, user: User) -> Submission:
    submission = get_submission(db, submission_id)
    if submission.student_id != user.id:
        raise ForbiddenError("You can only update your own submissions")
    if submission.status not in MUTABLE_STATUSES:
        raise DomainRuleViolation("Submission has already been graded")
    return submission


def update_submission(db: Session, submission_id: UUID, payload: SubmissionUpdate, user: User) -> Submission:
    submission = ensure_updatable(db, submission_id, user)

    data = payload.model_dump(exclude_unset=True)
    new_image_url = data.get("image_url")
    if new_image_url and new_image_url != submission.image_url:
        # Archive the outgoing image before it is replaced
        _archive_current_image(db, submission)
        submission.image_url = new_image_url
        submission.image_medium = data.get("image_medium")
        submission.image_thumbnail = data.get("image_thumbnail")
        submission.submitted_at = get_current_time()

    if data.get("title"):
        submission.title = data["title"]
    if "description" in data:
        submission.description = data["description"]

    if submission.status == SubmissionStatus.REVISION:
        submission.status = SubmissionStatus.PENDING
        submission.submitted_at = get_current_time()

    submission.updated_at = get_current_time()
    db.add(submission)
    db.commit()
    logger.info(f"Submission {submission.id} updated (status={submission.status.value})")
    return get_submission(db, submission.id)


def grade_submission(
    db: Session,
    submission_id: UUID,
    payload: SubmissionGrade,
    tasks: BackgroundTasks,
) -> Submission:
    submission = get_submission(db, submission_id)

    submission.grade = payload.grade
    submission.feedback = payload.feedback
    submission.status = SubmissionStatus.GRADED
    submission.graded_at = get_current_time()
    submission.updated_at = submission.graded_at
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(f"Submission {submission.id} graded {payload.grade}")

    tasks.add_task(
        dispatch_notifications,
        [
            NotificationCreate(
                user_id=submission.student_id,
                type=NotificationType.SUBMISSION_GRADED,
                title="Karya Dinilai",
                message=f'Karya "{submission.title}" mendapat nilai {payload.grade}',
                link=f"/submissions/{submission.id}",
            )
        ],
    )
    tasks.add_task(run_achievement_check, submission.student_id)
    return get_submission(db, submission.id)


def return_for_revision(
    db: Session,
    submission_id: UUID,
    note: str,
    tasks: BackgroundTasks,
) -> Submission:
    submission = get_submission(db, submission_id)

    _archive_current_image(db, submission, note=note)
    submission.revision_count += 1
    submission.status = SubmissionStatus.REVISION
    submission.updated_at = get_current_time()
    db.add(submission)
    db.commit()
    logger.info(f"Submission {submission.id} returned for revision (count={submission.revision_count})")

    tasks.add_task(
        dispatch_notifications,
        [
            NotificationCreate(
                user_id=submission.student_id,
                type=NotificationType.REVISION_REQUESTED,
                title="Revisi Diminta",
                message=f'Karya "{submission.title}" perlu direvisi: {note[:100]}',
                link=f"/submissions/{submission.id}",
            )
        ],
    )
    return get_submission(db, submission.id)


def delete_submission(db: Session, submission_id: UUID, user: User) -> None:
    submission = get_submission(db, submission_id)
    if user.role == UserRole.STUDENT and submission.student_id != user.id:
        raise ForbiddenError("You can only delete your own submissions")
    if submission.status != SubmissionStatus.PENDING:
        raise DomainRuleViolation("Only pending submissions can be deleted")
    db.delete(submission)
    db.commit()
    logger.info(f"Submission {submission_id} deleted by {user.id}")
