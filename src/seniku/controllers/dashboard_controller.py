# File: application/src/seniku/controllers/dashboard_controller.py

import math

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.assignment import Assignment, AssignmentClass, AssignmentStatus
from ..models.school_class import SchoolClass
from ..models.submission import Submission, SubmissionStatus
from ..models.user import User, UserRole
from ..utils.errors import NotFoundError
from ..utils.time import get_current_time
from .achievement_controller import get_user_achievements

RECENT_LIMIT = 5


def _round(value, digits: int = 1) -> float:
    return round(float(value), digits) if value is not None else 0.0


def get_overview(db: Session, user: User) -> dict:
    if user.role == UserRole.STUDENT:
        return {"role": user.role.value, **_student_overview(db, user)}
    return {"role": user.role.value, **_teacher_overview(db, user)}


# ─── Teacher ───────────────────────────────────────────────────
def _teacher_overview(db: Session, teacher: User) -> dict:
    own_assignments = select(Assignment.id).where(Assignment.created_by == teacher.id)
    if teacher.role == UserRole.ADMIN:
        own_assignments = select(Assignment.id)

    def count(stmt) -> int:
        return db.exec(stmt).one()

    statistics = {
        "total_students": count(
            select(func.count()).select_from(User).where(User.role == UserRole.STUDENT, User.is_active == True)
        ),
        "total_classes": count(select(func.count()).select_from(SchoolClass)),
        "active_assignments": count(
            select(func.count()).select_from(Assignment).where(
                Assignment.id.in_(own_assignments), Assignment.status == AssignmentStatus.ACTIVE
            )
        ),
        "pending_submissions": count(
            select(func.count()).select_from(Submission).where(
                Submission.assignment_id.in_(own_assignments), Submission.status == SubmissionStatus.PENDING
            )
        ),
        "graded_submissions": count(
            select(func.count()).select_from(Submission).where(
                Submission.assignment_id.in_(own_assignments), Submission.status == SubmissionStatus.GRADED
            )
        ),
        "average_score": _round(
            db.exec(
                select(func.avg(Submission.grade)).where(
                    Submission.assignment_id.in_(own_assignments), Submission.grade != None
                )
            ).one()
        ),
    }

    recent = db.exec(
        select(Submission)
        .where(Submission.assignment_id.in_(own_assignments))
        .options(selectinload(Submission.student), selectinload(Submission.assignment))
        .order_by(Submission.submitted_at.desc())
        .limit(RECENT_LIMIT)
    ).all()
    recent_submissions = [
        {
            "id": s.id,
            "title": s.title,
            "image_thumbnail": s.image_thumbnail,
            "status": s.status.value,
            "grade": s.grade,
            "submitted_at": s.submitted_at,
            "student": {"id": s.student.id, "name": s.student.name} if s.student else None,
            "assignment": {"id": s.assignment.id, "title": s.assignment.title} if s.assignment else None,
        }
        for s in recent
    ]

    top_rows = db.exec(
        select(
            User.id,
            User.name,
            User.avatar,
            func.avg(Submission.grade).label("average"),
            func.count(Submission.id).label("portfolio_count"),
        )
        .join(Submission, Submission.student_id == User.id)
        .where(Submission.status == SubmissionStatus.GRADED, Submission.grade != None)
        .group_by(User.id, User.name, User.avatar)
        .order_by(func.avg(Submission.grade).desc())
        .limit(RECENT_LIMIT)
    ).all()
    top_students = [
        {
            "id": row.id,
            "name": row.name,
            "avatar": row.avatar,
            "average_score": _round(row.average),
            "portfolio_count": row.portfolio_count,
        }
        for row in top_rows
    ]

    upcoming = db.exec(
        select(Assignment)
        .where(
            Assignment.id.in_(own_assignments),
            Assignment.status == AssignmentStatus.ACTIVE,
            Assignment.deadline >= get_current_time(),
        )
        .options(selectinload(Assignment.class_links))
        .order_by(Assignment.deadline.asc())
        .limit(RECENT_LIMIT)
    ).all()
    upcoming_deadlines = []
    for assignment in upcoming:
        class_ids = assignment.class_ids
        total_students = 0
        if class_ids:
            total_students = count(
                select(func.count()).select_from(User).where(
                    User.class_id.in_(class_ids), User.role == UserRole.STUDENT, User.is_active == True
                )
            )
        upcoming_deadlines.append({
            "id": assignment.id,
            "title": assignment.title,
            "deadline": assignment.deadline,
            "submission_count": count(
                select(func.count()).select_from(Submission).where(Submission.assignment_id == assignment.id)
            ),
            "total_students": total_students,
        })

    return {
        "statistics": statistics,
        "recent_submissions": recent_submissions,
        "top_students": top_students,
        "upcoming_deadlines": upcoming_deadlines,
    }


# ─── Student ───────────────────────────────────────────────────
def _student_overview(db: Session, student: User) -> dict:
    if not student.class_id:
        raise NotFoundError("User not found")

    class_assignments = select(AssignmentClass.assignment_id).where(AssignmentClass.class_id == student.class_id)
    active_for_class = (Assignment.status == AssignmentStatus.ACTIVE, Assignment.id.in_(class_assignments))

    graded = db.exec(
        select(Submission).where(Submission.student_id == student.id, Submission.status == SubmissionStatus.GRADED)
    ).all()
    grades = [s.grade for s in graded if s.grade is not None]
    total_submissions = db.exec(
        select(func.count()).select_from(Submission).where(Submission.student_id == student.id)
    ).one()

    statistics = {
        "portfolio_count": len(graded),
        "completed_assignments": len(graded),
        "total_assignments": db.exec(
            select(func.count()).select_from(Assignment).where(*active_for_class)
        ).one(),
        "average_score": _round(sum(grades) / len(grades)) if grades else 0.0,
        "highest_score": max(grades) if grades else 0,
        "total_submissions": total_submissions,
    }

    now = get_current_time()
    pending = db.exec(
        select(Assignment)
        .where(*active_for_class, Assignment.deadline >= now)
        .options(selectinload(Assignment.category))
        .order_by(Assignment.deadline.asc())
        .limit(RECENT_LIMIT)
    ).all()
    pending_assignments = []
    for assignment in pending:
        mine = db.exec(
            select(Submission).where(
                Submission.assignment_id == assignment.id, Submission.student_id == student.id
            )
        ).first()
        pending_assignments.append({
            "id": assignment.id,
            "title": assignment.title,
            "deadline": assignment.deadline,
            "category": assignment.category.name if assignment.category else None,
            "days_remaining": math.ceil((assignment.deadline - now).total_seconds() / 86400),
            "my_submission": {
                "id": mine.id,
                "status": mine.status.value,
                "grade": mine.grade,
            } if mine else None,
        })

    recent = db.exec(
        select(Submission)
        .where(Submission.student_id == student.id, Submission.status == SubmissionStatus.GRADED)
        .options(selectinload(Submission.assignment).selectinload(Assignment.category))
        .order_by(Submission.graded_at.desc())
        .limit(RECENT_LIMIT)
    ).all()
    recent_works = [
        {
            "id": s.id,
            "title": s.title,
            "image_thumbnail": s.image_thumbnail,
            "grade": s.grade,
            "graded_at": s.graded_at,
            "category": s.assignment.category.name if s.assignment and s.assignment.category else None,
        }
        for s in recent
    ]

    achievements = [
        {
            "id": link.achievement.id,
            "name": link.achievement.name,
            "icon": link.achievement.icon,
            "unlocked_at": link.unlocked_at,
        }
        for link in get_user_achievements(db, student.id, limit=RECENT_LIMIT)
    ]

    return {
        "statistics": statistics,
        "pending_assignments": pending_assignments,
        "recent_works": recent_works,
        "achievements": achievements,
    }
