"""
Installation progress schemas - room updates, item overrides, summaries
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.enums import RequestStatus, InstallationStatus
from app.schemas.common import InputModel


# ============== Bodies ==============

class RoomInstallationUpdate(InputModel):
    installed: bool
    installation_date: Optional[datetime] = None
    comment: Optional[str] = None


class InstallAllRooms(InputModel):
    installation_date: Optional[datetime] = None
    comment: Optional[str] = None


class RequestItemInstallationUpdate(InputModel):
    """Explicit override; without installation_status the item is recomputed"""
    installation_status: Optional[InstallationStatus] = None
    installation_date: Optional[datetime] = None
    comment: Optional[str] = None


# ============== Read models ==============

class RoomRef(BaseModel):
    room_id: str
    room_name: str


class InstallationSummaryItem(BaseModel):
    request_item_id: str
    software_id: str
    software_name: str
    software_version: str
    installation_status: InstallationStatus
    total_rooms: int
    installed_rooms: int
    pending_rooms: int
    completion_percentage: int = Field(..., ge=0, le=100)
    installed_in: List[RoomRef] = []
    pending_in: List[RoomRef] = []


class InstallationSummaryResponse(BaseModel):
    request_id: str
    request_status: RequestStatus
    items: List[InstallationSummaryItem]


class RoomInstallationDetail(BaseModel):
    room_id: str
    room_name: str
    installed: bool
    installation_date: Optional[datetime] = None
    comment: Optional[str] = None
    last_modified: datetime


class InstallationDetailItem(BaseModel):
    request_item_id: str
    software_id: str
    software_name: str
    software_version: str
    installation_status: InstallationStatus
    rooms: List[RoomInstallationDetail]


class InstallationDetailsResponse(BaseModel):
    request_id: str
    items: List[InstallationDetailItem]


class ItemConsistency(BaseModel):
    request_item_id: str
    total_rooms: int
    installed_rooms: int
    stored_status: InstallationStatus
    expected_status: InstallationStatus
    coherent: bool


class ConsistencyReport(BaseModel):
    request_id: str
    coherent: bool
    stored_request_status: RequestStatus
    expected_request_status: RequestStatus
    details: List[ItemConsistency]
    problems: List[str]


class SyncResult(BaseModel):
    request_id: str
    request_status: RequestStatus
    items_updated: int
    request_updated: bool
