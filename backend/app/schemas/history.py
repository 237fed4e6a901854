"""
Audit trail schemas
"""
from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime

from app.models.enums import HistoryAction, RequestStatus, InstallationStatus
from app.schemas.common import OrmModel


class HistoryEntryCreate(BaseModel):
    """Internal payload handed to the history recorder"""
    request_id: str
    user_id: str
    action: HistoryAction
    request_item_id: Optional[str] = None
    software_id: Optional[str] = None
    previous_status: Optional[RequestStatus] = None
    new_status: Optional[RequestStatus] = None
    previous_installation_status: Optional[InstallationStatus] = None
    new_installation_status: Optional[InstallationStatus] = None
    comment: Optional[str] = None


class HistoryFilter(BaseModel):
    request_id: Optional[str] = None
    software_id: Optional[str] = None
    user_id: Optional[str] = None
    action: Optional[HistoryAction] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[RequestStatus] = None
    page: int = 1
    page_size: int = 50


class HistoryEntryResponse(OrmModel):
    id: str
    request_id: str
    request_item_id: Optional[str] = None
    software_id: Optional[str] = None
    user_id: str
    action: HistoryAction
    previous_status: Optional[RequestStatus] = None
    new_status: Optional[RequestStatus] = None
    previous_installation_status: Optional[InstallationStatus] = None
    new_installation_status: Optional[InstallationStatus] = None
    comment: Optional[str] = None
    created_at: datetime


class HistoryListResponse(BaseModel):
    entries: List[HistoryEntryResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class UserActivity(BaseModel):
    user_id: str
    count: int


class HistoryStatistics(BaseModel):
    total: int
    by_action: Dict[str, int]
    top_users: List[UserActivity]
