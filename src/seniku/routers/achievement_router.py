# File: application/src/seniku/routers/achievement_router.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ..controllers import achievement_controller
from ..db.session import get_db
from ..models.user import User
from ..schemas.achievement import AchievementCreate, AchievementRead, AchievementUpdate, UserAchievementRead
from ..utils.dependencies import get_current_teacher, get_current_user
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

router = APIRouter(prefix="/achievements", tags=["Achievements"])


@router.get("")
def list_achievements(
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(pagination_params),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    achievements, total = achievement_controller.list_achievements(db, pagination, search)
    return paginated_response([AchievementRead.model_validate(a) for a in achievements], pagination, total)


# Declared before "/{achievement_id}" so "me" is not parsed as an id
@router.get("/me/achievements")
def my_achievements(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    unlocked = achievement_controller.get_user_achievements(db, user.id)
    return success_response([UserAchievementRead.model_validate(u) for u in unlocked])


@router.get("/{achievement_id}")
def get_achievement(achievement_id: UUID, _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    achievement = achievement_controller.get_achievement(db, achievement_id)
    return success_response(AchievementRead.model_validate(achievement))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_achievement(
    payload: AchievementCreate,
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    achievement = achievement_controller.create_achievement(db, payload)
    return success_response(AchievementRead.model_validate(achievement), "Achievement created successfully")


@router.put("/{achievement_id}")
def update_achievement(
    achievement_id: UUID,
    payload: AchievementUpdate,
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    achievement = achievement_controller.update_achievement(db, achievement_id, payload)
    return success_response(AchievementRead.model_validate(achievement), "Achievement updated successfully")


@router.delete("/{achievement_id}")
def delete_achievement(
    achievement_id: UUID,
    force: bool = Query(False),
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    achievement_controller.delete_achievement(db, achievement_id, force)
    return success_response(message="Achievement deleted successfully")
