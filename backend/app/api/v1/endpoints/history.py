"""
History API - read access to the audit trail
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import List, Optional
import math

from app.core.database import get_db
from app.models.enums import HistoryAction, RequestStatus
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.history import (
    HistoryFilter,
    HistoryEntryResponse,
    HistoryListResponse,
    HistoryStatistics,
)
from app.services.history_service import history_service

router = APIRouter()


@router.get("", response_model=HistoryListResponse)
async def list_history(
    request_id: Optional[str] = Query(None),
    software_id: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    action: Optional[HistoryAction] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    status: Optional[RequestStatus] = Query(None, description="Matches the status before or after"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    filters = HistoryFilter(
        request_id=request_id,
        software_id=software_id,
        user_id=user_id,
        action=action,
        start_date=start_date,
        end_date=end_date,
        status=status,
        page=page,
        page_size=page_size,
    )
    entries, total = await history_service.find_all(db, filters)
    return {
        "entries": entries,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if total else 0,
    }


@router.get("/statistics", response_model=HistoryStatistics)
async def get_statistics(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await history_service.get_statistics(db, start_date, end_date)


@router.get("/requests/{request_id}", response_model=List[HistoryEntryResponse])
async def get_request_history(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await history_service.find_by_request(db, request_id)


@router.get("/software/{software_id}", response_model=List[HistoryEntryResponse])
async def get_software_history(
    software_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await history_service.find_by_software(db, software_id)


@router.get("/users/{user_id}", response_model=List[HistoryEntryResponse])
async def get_user_history(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await history_service.find_by_user(db, user_id)
