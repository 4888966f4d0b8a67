# File: application/src/seniku/routers/submission_router.py

import logging
from typing import Optional, Tuple
from uuid import UUID

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    Response,
    UploadFile,
    status,
)
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from ..controllers import submission_controller
from ..db.session import get_db
from ..models.submission import SubmissionStatus
from ..models.user import User
from ..schemas.submission import (
    SubmissionCreate,
    SubmissionDetails,
    SubmissionGrade,
    SubmissionRevisionRequest,
    SubmissionUpdate,
)
from ..utils.dependencies import get_current_student, get_current_teacher, get_current_user
from ..utils.errors import BadRequestError, InternalError, ValidationError, field_errors
from ..utils.file import save_submission_upload
from ..utils.responses import Pagination, pagination_params, paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["Submissions"])

DETAIL_FIELDS = ("title", "description")


@router.get("")
def list_submissions(
    assignment_id: Optional[UUID] = Query(None),
    student_id: Optional[UUID] = Query(None),
    status: Optional[SubmissionStatus] = Query(None),
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(pagination_params),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    submissions, total = submission_controller.list_submissions(
        db, user, pagination, assignment_id, student_id, status, search
    )
    return paginated_response(
        [submission_controller.to_submission_read(s) for s in submissions], pagination, total
    )


@router.get("/{submission_id}")
def get_submission(submission_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    submission = submission_controller.get_submission(db, submission_id, user)
    return success_response(submission_controller.to_submission_read(submission))


def _parse_details(data: dict) -> SubmissionDetails:
    try:
        return SubmissionDetails.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(errors=field_errors(e.errors()))


async def _read_update_parts(request: Request) -> Tuple[dict, Optional[UploadFile]]:
    """Text fields and optional image from a JSON or multipart update body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise BadRequestError("Invalid JSON body")
        if not isinstance(body, dict):
            raise BadRequestError("Invalid JSON body")
        return {key: body[key] for key in DETAIL_FIELDS if key in body}, None

    form = await request.form()
    fields = {key: form[key] for key in DETAIL_FIELDS if key in form}
    image = form.get("image")
    if image is None or isinstance(image, str) or not image.filename:
        image = None
    return fields, image


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_submission(
    response: Response,
    image: UploadFile = File(None),
    assignment_id: str = Form(None),
    title: str = Form(None),
    description: Optional[str] = Form(None),
    student: User = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    logger.info(f"Submission attempt for assignment {assignment_id} by user {student.id}")

    try:
        # 1. Required parts
        if image is None or not image.filename:
            raise BadRequestError("Image file is required")
        if not assignment_id or not title or not title.strip():
            raise BadRequestError("Assignment ID and title are required")
        try:
            parsed_assignment_id = UUID(assignment_id)
        except ValueError:
            raise BadRequestError("Invalid assignment ID")
        details = _parse_details({"title": title, "description": description})

        # 2. Validate, render and store the artwork
        urls = await save_submission_upload(image)
        logger.info(f"Artwork stored at {urls['image_url']}")

        # 3. Create or re-submit
        payload = SubmissionCreate(
            assignment_id=parsed_assignment_id,
            title=details.title,
            description=details.description,
            **urls,
        )
        submission, created = submission_controller.submit(db, payload, student)
        if not created:
            response.status_code = status.HTTP_200_OK
        return success_response(
            submission_controller.to_submission_read(submission),
            "Submission created successfully" if created else "Submission updated successfully",
        )

    except HTTPException as e:
        logger.warning(f"Submission rejected: {e.detail}")
        raise
    except PydanticValidationError as e:
        raise ValidationError(errors=field_errors(e.errors()))
    except Exception as e:
        logger.error(f"An unexpected error occurred during submission: {str(e)}", exc_info=True)
        raise InternalError("An internal error occurred during submission.")


@router.put("/{submission_id}")
async def update_submission(
    submission_id: UUID,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Accepts multipart (optional image, title, description) or a JSON body with title/description."""
    try:
        # Ownership and status are checked before anything is uploaded
        submission_controller.ensure_updatable(db, submission_id, user)

        fields, image = await _read_update_parts(request)
        data = _parse_details(fields).model_dump(exclude_unset=True)
        if image is not None:
            data.update(await save_submission_upload(image))

        submission = submission_controller.update_submission(db, submission_id, SubmissionUpdate(**data), user)
        return success_response(
            submission_controller.to_submission_read(submission), "Submission updated successfully"
        )

    except HTTPException:
        raise
    except PydanticValidationError as e:
        raise ValidationError(errors=field_errors(e.errors()))
    except Exception as e:
        logger.error(f"Failed to update submission {submission_id}: {str(e)}", exc_info=True)
        raise InternalError("An internal error occurred while updating the submission.")


@router.post("/{submission_id}/grade")
def grade_submission(
    submission_id: UUID,
    payload: SubmissionGrade,
    tasks: BackgroundTasks,
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    submission = submission_controller.grade_submission(db, submission_id, payload, tasks)
    return success_response(submission_controller.to_submission_read(submission), "Submission graded successfully")


@router.post("/{submission_id}/revision")
def request_revision(
    submission_id: UUID,
    payload: SubmissionRevisionRequest,
    tasks: BackgroundTasks,
    _: User = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    submission = submission_controller.return_for_revision(db, submission_id, payload.revision_note, tasks)
    return success_response(submission_controller.to_submission_read(submission), "Revision requested successfully")


@router.delete("/{submission_id}")
def delete_submission(submission_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    submission_controller.delete_submission(db, submission_id, user)
    return success_response(message="Submission deleted successfully")
