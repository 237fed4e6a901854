"""
Request Items API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.enums import InstallationStatus
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_it_staff
from app.schemas.installation import InstallAllRooms, RequestItemInstallationUpdate
from app.schemas.request import RequestItemResponse
from app.services.request_item_service import request_item_service

router = APIRouter()


@router.get("", response_model=List[RequestItemResponse])
async def list_request_items(
    request_id: Optional[str] = Query(None),
    software_id: Optional[str] = Query(None),
    installation_status: Optional[InstallationStatus] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await request_item_service.list_items(
        db, request_id, software_id, installation_status, limit, offset
    )


@router.get("/{item_id}", response_model=RequestItemResponse)
async def get_request_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await request_item_service.get(db, item_id)


@router.put("/{item_id}/mark-installed", response_model=RequestItemResponse)
async def mark_installed(
    item_id: str,
    data: InstallAllRooms,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    """Install in every room of the item; lifts any problem / changed pin"""
    return await request_item_service.mark_installed(
        db,
        item_id,
        actor_id=current_user.id,
        installation_date=data.installation_date,
        comment=data.comment,
    )


@router.patch("/{item_id}/installation", response_model=RequestItemResponse)
async def update_installation(
    item_id: str,
    data: RequestItemInstallationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    """
    Set the installation status explicitly.

    `problem` requires a comment; `all_installed` installs every room. Without
    a status the item is recomputed from its rooms.
    """
    return await request_item_service.update_installation(
        db,
        item_id,
        actor_id=current_user.id,
        status=data.installation_status,
        installation_date=data.installation_date,
        comment=data.comment,
    )
