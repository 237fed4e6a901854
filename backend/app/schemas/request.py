"""
Installation request schemas - create/update/close bodies and responses
"""
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import date, datetime

from app.models.enums import RequestStatus, InstallationStatus, StatusPin
from app.schemas.common import InputModel, OrmModel


# ============== Bodies ==============

class RequestSoftwareEntry(InputModel):
    """One software and the rooms it must be installed in"""
    software_id: str
    room_ids: List[str] = Field(..., min_length=1)

    @field_validator('room_ids')
    @classmethod
    def drop_duplicate_rooms(cls, v: List[str]) -> List[str]:
        # Same room twice under one software would be one installation anyway
        return list(dict.fromkeys(v))


class RequestCreate(InputModel):
    """teacher_id defaults to the authenticated user"""
    teacher_id: Optional[str] = None
    desired_date: date
    academic_year: str = Field(..., description="Starting year, e.g. 2025 for 2025-2026")
    comment: Optional[str] = None
    software: List[RequestSoftwareEntry] = Field(..., min_length=1)


class RequestUpdate(InputModel):
    desired_date: Optional[date] = None
    academic_year: Optional[str] = None
    comment: Optional[str] = None


class RequestClose(InputModel):
    closure_comment: str = Field(..., min_length=3, max_length=2000)


# ============== Responses ==============

class RoomInstallationResponse(OrmModel):
    id: str
    request_item_id: str
    room_id: str
    installed: bool
    installation_date: Optional[datetime] = None
    assignment_date: datetime
    comment: Optional[str] = None
    last_modified: datetime


class RequestItemResponse(OrmModel):
    id: str
    request_id: str
    software_id: str
    installation_status: InstallationStatus
    status_pin: StatusPin
    installation_date: Optional[datetime] = None
    comment: Optional[str] = None
    status_change_date: Optional[datetime] = None
    room_installations: List[RoomInstallationResponse] = []


class RequestSummaryResponse(OrmModel):
    id: str
    teacher_id: str
    desired_date: date
    academic_year: str
    status: RequestStatus
    comment: Optional[str] = None
    closure_comment: Optional[str] = None
    closure_date: Optional[datetime] = None
    expiration_date: Optional[date] = None
    created_at: datetime
    last_modified: datetime


class RequestResponse(RequestSummaryResponse):
    items: List[RequestItemResponse] = []


class RequestListResponse(OrmModel):
    requests: List[RequestSummaryResponse]
    total: int
    page: int
    page_size: int
