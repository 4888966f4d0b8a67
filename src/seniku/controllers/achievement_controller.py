# File: application/src/seniku/controllers/achievement_controller.py

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.achievement import Achievement, UserAchievement
from ..schemas.achievement import AchievementCreate, AchievementUpdate
from ..utils.errors import BadRequestError, ConflictError, NotFoundError
from ..utils.responses import Pagination
from ..utils.time import get_current_time

logger = logging.getLogger(__name__)


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[UUID] = None) -> None:
    stmt = select(Achievement).where(Achievement.name == name)
    if exclude_id:
        stmt = stmt.where(Achievement.id != exclude_id)
    if db.exec(stmt).first():
        raise ConflictError("Achievement name already exists")


def list_achievements(db: Session, pagination: Pagination, search: Optional[str] = None) -> Tuple[List[Achievement], int]:
    conditions = []
    if search:
        pattern = f"%{search}%"
        conditions.append(Achievement.name.ilike(pattern) | Achievement.description.ilike(pattern))

    total = db.exec(select(func.count()).select_from(Achievement).where(*conditions)).one()
    items = db.exec(
        select(Achievement)
        .where(*conditions)
        .order_by(Achievement.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    ).all()
    return items, total


def get_achievement(db: Session, achievement_id: UUID) -> Achievement:
    achievement = db.get(Achievement, achievement_id)
    if not achievement:
        raise NotFoundError("Achievement not found")
    return achievement


def create_achievement(db: Session, payload: AchievementCreate) -> Achievement:
    _ensure_unique_name(db, payload.name)
    achievement = Achievement(**payload.model_dump())
    db.add(achievement)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Achievement name already exists")
    db.refresh(achievement)
    logger.info(f"Achievement '{achievement.name}' created")
    return achievement


def update_achievement(db: Session, achievement_id: UUID, payload: AchievementUpdate) -> Achievement:
    achievement = get_achievement(db, achievement_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name") and data["name"] != achievement.name:
        _ensure_unique_name(db, data["name"], exclude_id=achievement.id)
    for key, value in data.items():
        if key == "icon" and not value:
            continue
        setattr(achievement, key, value)
    achievement.updated_at = get_current_time()
    db.add(achievement)
    db.commit()
    db.refresh(achievement)
    return achievement


def delete_achievement(db: Session, achievement_id: UUID, force: bool = False) -> None:
    achievement = get_achievement(db, achievement_id)
    holders = db.exec(
        select(func.count()).select_from(UserAchievement).where(UserAchievement.achievement_id == achievement.id)
    ).one()
    if holders and not force:
        raise BadRequestError("Cannot delete achievement: Has users. Use force=true to force delete.")
    db.delete(achievement)
    db.commit()
    logger.info(f"Achievement {achievement_id} deleted (force={force}, holders={holders})")


def get_user_achievements(db: Session, user_id: UUID, limit: Optional[int] = None) -> List[UserAchievement]:
    stmt = (
        select(UserAchievement)
        .where(UserAchievement.user_id == user_id)
        .options(selectinload(UserAchievement.achievement))
        .order_by(UserAchievement.unlocked_at.desc())
    )
    if limit:
        stmt = stmt.limit(limit)
    return db.exec(stmt).all()


def _find_unlock(db: Session, user_id: UUID, achievement_id: UUID) -> Optional[UserAchievement]:
    return db.exec(
        select(UserAchievement).where(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_id == achievement_id,
        )
    ).first()


def unlock_achievement(db: Session, user_id: UUID, achievement_id: UUID) -> Tuple[UserAchievement, bool]:
    """
    Grant an achievement once. Returns the row and whether it was created now.

    A concurrent unlock that wins the unique constraint is treated as the
    existing row.
    """
    existing = _find_unlock(db, user_id, achievement_id)
    if existing:
        return existing, False

    unlock = UserAchievement(user_id=user_id, achievement_id=achievement_id)
    db.add(unlock)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = _find_unlock(db, user_id, achievement_id)
        if existing is None:
            raise
        return existing, False
    db.refresh(unlock)
    return unlock, True
