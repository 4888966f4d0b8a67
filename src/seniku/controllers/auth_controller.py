# File: application/src/seniku/controllers/auth_controller.py

import logging
import uuid

from sqlmodel import Session, select

from ..models.user import User
from ..schemas.auth import LoginRequest
from ..schemas.user import RegisterRequest
from ..utils.errors import ForbiddenError, UnauthorizedError
from ..utils.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)
from .user_controller import create_user_record

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid NIP/NIS or password"
INACTIVE_ACCOUNT = "Account is inactive. Please contact administrator."


def issue_tokens(user: User) -> dict:
    access_token = create_access_token({
        "user_id": str(user.id),
        "email": user.email,
        "nip": user.nip,
        "nis": user.nis,
        "name": user.name,
        "role": user.role.value,
    })
    refresh_token = create_refresh_token(str(user.id), user.token_version)
    return {"access_token": access_token, "refresh_token": refresh_token, "token_type": "bearer"}


def register(db: Session, payload: RegisterRequest) -> User:
    user = create_user_record(db, payload)
    logger.info(f"Registered {user.role.value} account {user.id}")
    return user


def authenticate(db: Session, payload: LoginRequest) -> User:
    """Match the identifier as a teacher NIP first, then as a student NIS."""
    identifier = payload.identifier.strip()
    user = db.exec(select(User).where(User.nip == identifier)).first()
    if user is None:
        user = db.exec(select(User).where(User.nis == identifier)).first()

    if user is None or not verify_password(payload.password, user.hashed_password):
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not user.is_active:
        raise ForbiddenError(INACTIVE_ACCOUNT)
    return user


def refresh(db: Session, refresh_token: str) -> User:
    payload = decode_refresh_token(refresh_token)
    try:
        user_id = uuid.UUID(payload.get("user_id", ""))
    except ValueError:
        raise UnauthorizedError("Invalid or expired refresh token")

    user = db.get(User, user_id)
    if user is None or user.token_version != payload.get("token_version"):
        raise UnauthorizedError("Invalid or expired refresh token")
    if not user.is_active:
        raise ForbiddenError(INACTIVE_ACCOUNT)
    return user


def logout(db: Session, user: User) -> None:
    """Revoke every refresh token issued so far by bumping the version counter."""
    user.token_version += 1
    db.add(user)
    db.commit()
    logger.info(f"User {user.id} logged out; token version is now {user.token_version}")
