"""
User, teacher and IT-service schemas
"""
from pydantic import EmailStr, Field
from typing import Optional, List
from datetime import datetime

from app.models.enums import UserRole
from app.schemas.common import InputModel, OrmModel


class UserCreate(InputModel):
    """Schema for creating a user (Admin only)"""
    email: EmailStr
    last_name: str = Field(..., min_length=1, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8, description="Omit for SSO-only accounts")
    sso_id: Optional[str] = Field(None, max_length=255)
    role: UserRole = UserRole.TEACHER
    is_active: bool = True


class UserUpdate(InputModel):
    """Schema for updating a user; only provided fields change"""
    email: Optional[EmailStr] = None
    last_name: Optional[str] = Field(None, min_length=1, max_length=255)
    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8)
    sso_id: Optional[str] = Field(None, max_length=255)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class TeacherCreate(InputModel):
    """User and teacher profile created together"""
    email: EmailStr
    last_name: str = Field(..., min_length=1, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8)
    sso_id: Optional[str] = Field(None, max_length=255)
    employee_number: str = Field(..., min_length=1, max_length=50)
    office: Optional[str] = Field(None, max_length=255)
    is_active: bool = True


class TeacherProfileResponse(OrmModel):
    id: str
    employee_number: str
    office: Optional[str] = None


class UserResponse(OrmModel):
    id: str
    email: str
    last_name: str
    first_name: str
    sso_id: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime


class TeacherResponse(UserResponse):
    teacher: Optional[TeacherProfileResponse] = None


class UserListResponse(OrmModel):
    users: List[UserResponse]
    total: int
