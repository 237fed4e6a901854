"""
Users Management API

Accounts, teacher profiles and the IT-service roster. Mutations are admin only.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.schemas.request import RequestSummaryResponse
from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    TeacherCreate,
    TeacherResponse,
)
from app.services.request_service import request_service
from app.services.user_service import user_service

router = APIRouter()
teachers_router = APIRouter()
it_service_router = APIRouter()


# ==================== Users ====================

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return await user_service.create(db, data)


@router.get("", response_model=UserListResponse)
async def list_users(
    is_active: Optional[bool] = Query(None, description="Filter by account status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    users = await user_service.list_users(db, is_active)
    return {"users": users, "total": len(users)}


@router.get("/{user_id}", response_model=TeacherResponse)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await user_service.get(db, user_id)


@router.get("/{user_id}/requests", response_model=List[RequestSummaryResponse])
async def list_user_requests(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await user_service.get(db, user_id)
    return await request_service.list_by_teacher(db, user_id)


@router.patch("/{user_id}", response_model=TeacherResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return await user_service.update(db, user_id, data)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Soft delete: the account is deactivated"""
    return await user_service.deactivate(db, user_id)


# ==================== Teachers ====================

@teachers_router.post("", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    data: TeacherCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return await user_service.create_teacher(db, data)


@teachers_router.get("", response_model=List[TeacherResponse])
async def list_teachers(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await user_service.list_teachers(db)


@teachers_router.get("/{user_id}", response_model=TeacherResponse)
async def get_teacher(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await user_service.get_teacher(db, user_id)


# ==================== IT service ====================

@it_service_router.get("", response_model=List[UserResponse])
async def list_it_service(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await user_service.list_it_service(db)
