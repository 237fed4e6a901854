"""
Installation Requests API

Lifecycle of a teacher's request: creation, edits, closure, manual
in-progress transition and installation progress views.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.enums import RequestStatus
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_it_staff
from app.schemas.installation import InstallationSummaryResponse, InstallationDetailsResponse
from app.schemas.request import (
    RequestCreate,
    RequestUpdate,
    RequestClose,
    RequestResponse,
    RequestSummaryResponse,
    RequestListResponse,
)
from app.services.installation_service import installation_service
from app.services.request_service import request_service

router = APIRouter()


@router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    data: RequestCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a request for one or more software, each in one or more rooms.

    `teacher_id` defaults to the authenticated user.
    """
    return await request_service.create(db, data, actor_id=current_user.id)


@router.get("", response_model=RequestListResponse)
async def list_requests(
    status: Optional[RequestStatus] = Query(None, description="Filter by status"),
    academic_year: Optional[str] = Query(None, description="Starting year, e.g. 2025"),
    teacher_id: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    requests, total = await request_service.list_requests(
        db, status, academic_year, teacher_id, page, page_size
    )
    return {"requests": requests, "total": total, "page": page, "page_size": page_size}


@router.get("/in-progress", response_model=List[RequestSummaryResponse])
async def list_open_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Requests that are new or in progress"""
    return await request_service.list_in_progress(db)


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await request_service.get(db, request_id)


@router.patch("/{request_id}", response_model=RequestResponse)
async def update_request(
    request_id: str,
    data: RequestUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Owning teacher only, while the request is still editable"""
    return await request_service.update(db, request_id, current_user.id, data)


@router.get("/{request_id}/installation-summary", response_model=InstallationSummaryResponse)
async def get_installation_summary(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await installation_service.get_installation_summary(db, request_id)


@router.get("/{request_id}/installation-details", response_model=InstallationDetailsResponse)
async def get_installation_details(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await installation_service.get_installation_details(db, request_id)


@router.post("/{request_id}/close", response_model=RequestResponse)
async def close_request(
    request_id: str,
    data: RequestClose,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Owning teacher only; the request must be new or in progress"""
    return await request_service.close(db, request_id, current_user.id, data.closure_comment)


@router.post("/{request_id}/in-progress", response_model=RequestResponse)
async def mark_request_in_progress(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    return await request_service.mark_in_progress(db, request_id, current_user.id)
