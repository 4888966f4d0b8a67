# File: application/src/seniku/routers/dashboard_router.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..controllers.dashboard_controller import get_overview
from ..db.session import get_db
from ..models.user import User
from ..utils.dependencies import get_current_user
from ..utils.responses import success_response

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/overview")
def overview(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Role-specific dashboard: teaching statistics for staff, progress for students."""
    return success_response(get_overview(db, user))
