"""
Room installation API

Nested under /requests/{request_id}/installation. Every update cascades to
the request item and request statuses.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_it_staff
from app.schemas.installation import (
    RoomInstallationUpdate,
    InstallAllRooms,
    ConsistencyReport,
    SyncResult,
)
from app.schemas.request import RequestResponse
from app.services.installation_service import installation_service
from app.services.installation_sync_service import installation_sync_service

router = APIRouter()


@router.put("/{request_id}/installation/{item_id}/rooms/{room_id}", response_model=RequestResponse)
async def update_room_installation(
    request_id: str,
    item_id: str,
    room_id: str,
    data: RoomInstallationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    """Mark the software of one request item installed (or not) in one room"""
    return await installation_service.update_room_installation(
        db,
        request_id,
        item_id,
        room_id,
        installed=data.installed,
        actor_id=current_user.id,
        installation_date=data.installation_date,
        comment=data.comment,
    )


@router.post("/{request_id}/installation/{item_id}/all-rooms/install", response_model=RequestResponse)
async def install_all_rooms(
    request_id: str,
    item_id: str,
    data: InstallAllRooms,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    return await installation_service.install_all_rooms(
        db,
        request_id,
        item_id,
        actor_id=current_user.id,
        installation_date=data.installation_date,
        comment=data.comment,
    )


@router.post("/{request_id}/installation/synchronize", response_model=SyncResult)
async def synchronize_request(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    """Recompute every item status and the request status"""
    return await installation_sync_service.synchronize_request(db, request_id)


@router.get("/{request_id}/installation/consistency", response_model=ConsistencyReport)
async def check_consistency(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    """Compare stored statuses with recomputed ones; nothing is written"""
    return await installation_sync_service.check_consistency(db, request_id)
