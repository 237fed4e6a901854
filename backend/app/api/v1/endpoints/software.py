"""
Software catalog API
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.schemas.infrastructure import RoomResponse
from app.schemas.software import (
    SoftwareCreate,
    SoftwareUpdate,
    SoftwareResponse,
    InstalledInResponse,
)
from app.services.software_service import software_service

router = APIRouter()


@router.post("", response_model=SoftwareResponse, status_code=status.HTTP_201_CREATED)
async def create_software(
    data: SoftwareCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return await software_service.create(db, data)


@router.get("", response_model=List[SoftwareResponse])
async def list_software(
    search: Optional[str] = Query(None, description="Search by name"),
    active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await software_service.list_software(db, search, active)


@router.get("/{software_id}", response_model=SoftwareResponse)
async def get_software(
    software_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await software_service.get(db, software_id)


@router.get("/{software_id}/rooms", response_model=List[RoomResponse])
async def list_software_rooms(
    software_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rooms where the software is currently installed"""
    return await software_service.list_rooms(db, software_id)


@router.get("/{software_id}/installed-in/{room_id}", response_model=InstalledInResponse)
async def is_installed_in(
    software_id: str,
    room_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    installed = await software_service.is_installed_in(db, room_id, software_id)
    return {"software_id": software_id, "room_id": room_id, "installed": installed}


@router.patch("/{software_id}", response_model=SoftwareResponse)
async def update_software(
    software_id: str,
    data: SoftwareUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return await software_service.update(db, software_id, data)


@router.delete("/{software_id}", response_model=SoftwareResponse)
async def delete_software(
    software_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Soft delete: the entry is deactivated, past requests keep it"""
    return await software_service.deactivate(db, software_id)
