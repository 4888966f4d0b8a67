# File: application/src/seniku/schemas/user.py
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from src.seniku.models.user import UserRole


class ClassSummary(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class UserRead(BaseModel):
    id: UUID
    email: Optional[str] = None
    nip: Optional[str] = None
    nis: Optional[str] = None
    name: str
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    birthdate: Optional[date] = None
    avatar: Optional[str] = None
    class_id: Optional[UUID] = None
    class_name: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserDetail(UserRead):
    teacher_classes: List[ClassSummary] = []

    @field_validator("teacher_classes", mode="before")
    @classmethod
    def unwrap_class_links(cls, value):
        # ORM rows are TeacherClass links; the class itself carries the name
        classes = []
        for item in value or []:
            school_class = getattr(item, "school_class", item)
            if school_class is not None:
                classes.append(school_class)
        return classes


class UserBrief(BaseModel):
    id: UUID
    name: str
    nis: Optional[str] = None
    nip: Optional[str] = None
    avatar: Optional[str] = None

    class Config:
        from_attributes = True


def _check_identifiers(role: UserRole, nip: Optional[str], nis: Optional[str]) -> None:
    if role == UserRole.STUDENT and not nis:
        raise ValueError("Student must have NIS. Teacher must have NIP.")
    if role == UserRole.TEACHER and not nip:
        raise ValueError("Student must have NIS. Teacher must have NIP.")
    if nis and role != UserRole.STUDENT:
        raise ValueError("NIS is only allowed for students")
    if nip and role != UserRole.TEACHER:
        raise ValueError("NIP is only allowed for teachers")


class UserBase(BaseModel):
    email: Optional[EmailStr] = None
    nip: Optional[str] = Field(default=None, min_length=1)
    nis: Optional[str] = Field(default=None, min_length=1)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    birthdate: Optional[date] = None


class RegisterRequest(UserBase):
    role: UserRole = UserRole.STUDENT
    class_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_role_fields(self):
        _check_identifiers(self.role, self.nip, self.nis)
        return self


class UserCreate(UserBase):
    role: UserRole
    class_id: Optional[UUID] = None
    class_ids: Optional[List[UUID]] = None

    @model_validator(mode="after")
    def check_role_fields(self):
        _check_identifiers(self.role, self.nip, self.nis)
        if self.role == UserRole.STUDENT and not self.class_id:
            raise ValueError("Student must have class_id")
        if self.class_id and self.role != UserRole.STUDENT:
            raise ValueError("class_id is only allowed for students")
        if self.class_ids is not None and self.role != UserRole.TEACHER:
            raise ValueError("class_ids is only allowed for teachers")
        return self


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    nip: Optional[str] = Field(default=None, min_length=1)
    nis: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    birthdate: Optional[date] = None
    class_id: Optional[UUID] = None
    class_ids: Optional[List[UUID]] = None
    is_active: Optional[bool] = None
