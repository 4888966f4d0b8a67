# File: application/src/seniku/routers/auth_router.py

import logging

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..controllers import auth_controller
from ..controllers.user_controller import get_user, to_user_detail
from ..db.session import get_db
from ..models.user import User
from ..schemas.auth import AuthResult, LoginRequest, RefreshRequest
from ..schemas.user import RegisterRequest, UserRead
from ..utils.dependencies import get_current_user
from ..utils.responses import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_result(user: User) -> dict:
    tokens = auth_controller.issue_tokens(user)
    return AuthResult(user=UserRead.model_validate(user), **tokens).model_dump()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = auth_controller.register(db, payload)
    return success_response(_auth_result(user), "Registration successful")


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = auth_controller.authenticate(db, payload)
    logger.info(f"User {user.id} logged in as {user.role.value}")
    return success_response(_auth_result(user), "Login successful")


@router.post("/refresh")
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    user = auth_controller.refresh(db, payload.refresh_token)
    return success_response(auth_controller.issue_tokens(user), "Token refreshed")


@router.post("/logout")
def logout(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    auth_controller.logout(db, user)
    return success_response(message="Logout successful")


@router.get("/me")
def me(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return success_response(to_user_detail(get_user(db, user.id)))
