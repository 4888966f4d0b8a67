# File: application/src/seniku/routers/portfolio_router.py

from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..controllers import portfolio_controller
from ..db.session import get_db
from ..models.user import User
from ..utils.dependencies import get_current_user
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

router = APIRouter(prefix="/portfolio", tags=["Portfolio"])


@router.get("")
def list_portfolio(
    student_id: Optional[UUID] = Query(None),
    class_id: Optional[UUID] = Query(None),
    category_id: Optional[UUID] = Query(None),
    min_grade: Optional[int] = Query(None, ge=0, le=100),
    search: Optional[str] = Query(None),
    sort_by: Literal["grade", "submitted_at", "title"] = Query("submitted_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    pagination: Pagination = Depends(pagination_params),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items, total = portfolio_controller.list_portfolio(
        db, pagination, student_id, class_id, category_id, min_grade, search, sort_by, sort_order
    )
    return paginated_response([portfolio_controller.to_portfolio_item(s) for s in items], pagination, total)


@router.get("/{submission_id}")
def get_portfolio_item(submission_id: UUID, _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    submission = portfolio_controller.get_portfolio_item(db, submission_id)
    return success_response(portfolio_controller.to_portfolio_item(submission))
