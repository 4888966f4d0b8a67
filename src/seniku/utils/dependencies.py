# File location: src/seniku/utils/dependencies.py
import uuid
from typing import Annotated
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from src.seniku.config.settings import API_PREFIX
from src.seniku.db.session import get_db
from src.seniku.models.user import User, UserRole
from src.seniku.utils.errors import UnauthorizedError, ForbiddenError
from src.seniku.utils.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/auth/login", auto_error=False)


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: Annotated[Session, Depends(get_db)],
) -> User:
    """
    Dependency to get the current user from a JWT token provided
    in the Authorization header.
    """
    if not token:
        raise UnauthorizedError("Authentication required")

    payload = decode_access_token(token)
    user_id = payload.get("user_id")
    if user_id is None:
        raise UnauthorizedError("Could not validate credentials")

    try:
        user = session.get(User, uuid.UUID(user_id))
    except ValueError:
        raise UnauthorizedError("Could not validate credentials")
    if user is None:
        raise UnauthorizedError("Could not validate credentials")
    if not user.is_active:
        raise ForbiddenError("Account is inactive. Please contact administrator.")
    return user


def require_roles(*roles: UserRole):
    """Build a dependency that only lets the given roles through."""
    required = " or ".join(role.value for role in roles)

    async def checker(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in roles:
            raise ForbiddenError(f"Forbidden. Required role: {required}")
        return current_user

    return checker


get_current_teacher = require_roles(UserRole.TEACHER, UserRole.ADMIN)
get_current_student = require_roles(UserRole.STUDENT)
