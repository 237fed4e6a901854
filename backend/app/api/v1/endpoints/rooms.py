"""
Rooms API
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.enums import RoomType
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.schemas.infrastructure import RoomCreate, RoomUpdate, RoomResponse, RoomDetailResponse
from app.schemas.software import SoftwareResponse
from app.services.room_service import room_service

router = APIRouter()


@router.post("", response_model=RoomDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    data: RoomCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return await room_service.create(db, data)


@router.get("", response_model=List[RoomResponse])
async def list_rooms(
    type: Optional[RoomType] = Query(None, description="Filter by room type"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await room_service.list_rooms(db, type)


@router.get("/{room_id}", response_model=RoomDetailResponse)
async def get_room(
    room_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await room_service.get(db, room_id)


@router.get("/{room_id}/software", response_model=List[SoftwareResponse])
async def list_room_software(
    room_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Software currently installed in the room"""
    return await room_service.list_installed_software(db, room_id)


@router.patch("/{room_id}", response_model=RoomDetailResponse)
async def update_room(
    room_id: str,
    data: RoomUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return await room_service.update(db, room_id, data)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    room_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    await room_service.delete(db, room_id)
