# File: application/src/seniku/controllers/achievement_evaluator.py
"""
Rule interpreter that unlocks achievements after a grading event.

The student's statistics are recomputed from stored GRADED submissions, every
achievement the student does not hold yet is evaluated against them, and each
newly satisfied one is unlocked with exactly one notification.
"""
import logging
import operator as op
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Set
from uuid import UUID

from sqlmodel import Session, select

from ..db.session import open_session
from ..models.achievement import Achievement, UserAchievement
from ..models.assignment import Assignment
from ..models.notification import NotificationType
from ..models.submission import Submission, SubmissionStatus
from ..schemas.achievement import (
    AverageGradeCriterion,
    CategoryCompletionCriterion,
    Criterion,
    GradeCountCriterion,
    HighestGradeCriterion,
    TotalGradedSubmissionsCriterion,
    UnknownCriterion,
    parse_criterion,
)
from .achievement_controller import unlock_achievement
from .notification_controller import create_notification

logger = logging.getLogger(__name__)

A_GRADE_THRESHOLD = 90

OPERATORS: Dict[str, Callable[[float, float], bool]] = {
    ">=": op.ge,
    "<=": op.le,
    ">": op.gt,
    "<": op.lt,
    "==": op.eq,
    "===": op.eq,
}


@dataclass
class StudentStats:
    total_graded_submissions: int = 0
    average_grade: float = 0.0
    highest_grade: int = 0
    category_ids: Set[str] = field(default_factory=set)
    a_grade_count: int = 0

    @property
    def completed_categories(self) -> int:
        return len(self.category_ids)


def compute_stats(db: Session, user_id: UUID) -> StudentStats:
    rows = db.exec(
        select(Submission.grade, Assignment.category_id)
        .join(Assignment, Assignment.id == Submission.assignment_id)
        .where(Submission.student_id == user_id, Submission.status == SubmissionStatus.GRADED)
    ).all()

    # A zero grade counts as graded work but not toward grade statistics
    grades = [grade for grade, _ in rows if grade]
    return StudentStats(
        total_graded_submissions=len(rows),
        average_grade=sum(grades) / len(grades) if grades else 0.0,
        highest_grade=max(grades) if grades else 0,
        category_ids={str(category_id) for _, category_id in rows},
        a_grade_count=sum(1 for grade in grades if grade >= A_GRADE_THRESHOLD),
    )


def compare(actual: float, operator: str, expected: float) -> bool:
    fn = OPERATORS.get(operator or ">=")
    if fn is None:
        return False
    return fn(actual, expected)


def evaluate_criterion(criterion: Criterion, stats: StudentStats) -> bool:
    if isinstance(criterion, TotalGradedSubmissionsCriterion):
        return compare(stats.total_graded_submissions, criterion.operator, criterion.value)
    if isinstance(criterion, AverageGradeCriterion):
        return compare(stats.average_grade, criterion.operator, criterion.value)
    if isinstance(criterion, HighestGradeCriterion):
        return compare(stats.highest_grade, criterion.operator, criterion.value)
    if isinstance(criterion, GradeCountCriterion):
        return compare(stats.a_grade_count, criterion.operator, criterion.value)
    if isinstance(criterion, CategoryCompletionCriterion):
        if criterion.operator == "all":
            required = set(criterion.categories)
            return bool(required) and required.issubset(stats.category_ids)
        return compare(stats.completed_categories, criterion.operator, criterion.value)
    if isinstance(criterion, UnknownCriterion):
        return False
    return False


def check_and_unlock_achievements(db: Session, user_id: UUID) -> List[Achievement]:
    """Unlock every achievement the student newly qualifies for and return them."""
    held = select(UserAchievement.achievement_id).where(UserAchievement.user_id == user_id)
    candidates = db.exec(select(Achievement).where(Achievement.id.not_in(held))).all()
    if not candidates:
        return []

    stats = compute_stats(db, user_id)
    unlocked: List[Achievement] = []

    for achievement in candidates:
        try:
            criterion = parse_criterion(achievement.criteria)
            if not evaluate_criterion(criterion, stats):
                continue

            _, created = unlock_achievement(db, user_id, achievement.id)
            if not created:
                continue

            create_notification(
                db,
                user_id=user_id,
                type=NotificationType.ACHIEVEMENT_UNLOCKED,
                title="Achievement Terbuka!",
                message=f'Selamat! Anda mendapatkan achievement "{achievement.name}"',
                link=f"/achievements/{achievement.id}",
            )
            unlocked.append(achievement)
            logger.info(f"User {user_id} unlocked achievement '{achievement.name}'")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to evaluate achievement {achievement.id} for user {user_id}: {e}", exc_info=True)

    return unlocked


def run_achievement_check(user_id: UUID) -> None:
    """Background task wrapper; never raises into the request that scheduled it."""
    try:
        with open_session() as db:
            check_and_unlock_achievements(db, user_id)
    except Exception as e:
        logger.error(f"Achievement check failed for user {user_id}: {e}", exc_info=True)
