# File: application/src/seniku/routers/assignment_router.py

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlmodel import Session

from ..controllers import assignment_controller
from ..db.session import get_db
from ..models.assignment import AssignmentStatus
from ..models.user import User
from ..schemas.assignment import AssignmentCreate, AssignmentUpdate, BulkDeleteRequest, BulkStatusRequest
from ..utils.dependencies import get_current_teacher, get_current_user
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.get("")
def list_assignments(
    status: Optional[AssignmentStatus] = Query(None),
    category_id: Optional[UUID] = Query(None),
    class_id: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(pagination_params),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    assignments, total = assignment_controller.list_assignments(
        db, user, pagination, status, category_id, class_id, search
    )
    return paginated_response(
        [assignment_controller.to_assignment_read(db, a) for a in assignments], pagination, total
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_assignment(
    payload: AssignmentCreate,
    tasks: BackgroundTasks,
    teacher: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    assignment = assignment_controller.create_assignment(db, payload, teacher, tasks)
    return success_response(assignment_controller.to_assignment_read(db, assignment), "Assignment created successfully")


# Bulk routes are declared before "/{assignment_id}"
@router.put("/bulk-status")
def bulk_update_status(
    payload: BulkStatusRequest,
    tasks: BackgroundTasks,
    teacher: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    updated = assignment_controller.bulk_update_status(db, payload.ids, payload.status, teacher, tasks)
    return success_response({"updated": updated}, f"{updated} assignment(s) updated")


@router.delete("/bulk-delete")
def bulk_delete(
    payload: BulkDeleteRequest,
    teacher: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    deleted = assignment_controller.bulk_delete(db, payload.ids, teacher)
    return success_response({"deleted": deleted}, f"{deleted} assignment(s) deleted")


@router.get("/{assignment_id}")
def get_assignment(assignment_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assignment = assignment_controller.get_assignment(db, assignment_id, user)
    return success_response(assignment_controller.to_assignment_read(db, assignment))


@router.put("/{assignment_id}")
def update_assignment(
    assignment_id: UUID,
    payload: AssignmentUpdate,
    tasks: BackgroundTasks,
    teacher: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    assignment = assignment_controller.update_assignment(db, assignment_id, payload, teacher, tasks)
    return success_response(assignment_controller.to_assignment_read(db, assignment), "Assignment updated successfully")


@router.delete("/{assignment_id}")
def delete_assignment(assignment_id: UUID, teacher: User = Depends(get_current_teacher), db: Session = Depends(get_db)):
    assignment_controller.delete_assignment(db, assignment_id, teacher)
    return success_response(message="Assignment deleted successfully")
