"""
Department and room schemas
"""
from pydantic import Field
from typing import Optional, List
from datetime import datetime

from app.models.enums import RoomType
from app.schemas.common import InputModel, OrmModel


# ============== Departments ==============

class DepartmentCreate(InputModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = None


class DepartmentUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=2, max_length=50)
    description: Optional[str] = None


class DepartmentResponse(OrmModel):
    id: str
    name: str
    code: str
    description: Optional[str] = None
    created_at: datetime


# ============== Rooms ==============

class RoomCreate(InputModel):
    name: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=1)
    type: RoomType
    department_id: Optional[str] = None
    software_ids: List[str] = Field(default_factory=list, description="Software currently installed")


class RoomUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=1)
    type: Optional[RoomType] = None
    department_id: Optional[str] = None
    software_ids: Optional[List[str]] = None


class RoomResponse(OrmModel):
    id: str
    name: str
    capacity: int
    type: RoomType
    department_id: Optional[str] = None
    created_at: datetime


class RoomDetailResponse(RoomResponse):
    department: Optional[DepartmentResponse] = None
    software_ids: List[str] = []
