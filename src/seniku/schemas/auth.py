from pydantic import BaseModel, Field

from src.seniku.schemas.user import UserRead


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1, description="NIP for teachers, NIS for students")
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResult(TokenPair):
    user: UserRead
