"""
Attestations API

Yearly confirmations plus the batch jobs an external scheduler triggers
(expire due, reminders, campaign).
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.enums import AttestationStatus
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_it_staff
from app.schemas.attestation import (
    AttestationCreate,
    AttestationResponse,
    AttestationListResponse,
    BatchResult,
)
from app.services.attestation_jobs import attestation_jobs
from app.services.attestation_service import attestation_service

router = APIRouter()


@router.post("", response_model=AttestationResponse, status_code=status.HTTP_201_CREATED)
async def create_attestation(
    data: AttestationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await attestation_service.create(db, data)


@router.get("", response_model=AttestationListResponse)
async def list_attestations(
    academic_year: Optional[str] = Query(None, description="Starting year, e.g. 2025"),
    attestation_status: Optional[AttestationStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    attestations = await attestation_service.find_all(db, academic_year, attestation_status)
    return {"attestations": attestations, "total": len(attestations)}


@router.get("/reminders", response_model=List[AttestationResponse])
async def list_reminders_due(
    window_days: Optional[int] = Query(None, ge=0, description="Defaults to ATTESTATION_REMINDER_DAYS"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    """Pending attestations that should be reminded now"""
    return await attestation_jobs.run_reminder_check(db, window_days)


@router.post("/expire-due", response_model=BatchResult)
async def expire_due_attestations(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    count = await attestation_jobs.run_expiration(db)
    return {"processed": count, "message": f"{count} attestation(s) expired"}


@router.post("/campaign/{academic_year}", response_model=BatchResult)
async def create_campaign(
    academic_year: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    """One attestation per installed request of the year that has none yet"""
    count = await attestation_service.create_campaign(db, academic_year)
    return {"processed": count, "message": f"{count} attestation(s) created"}


@router.get("/request/{request_id}", response_model=AttestationResponse)
async def get_request_attestation(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await attestation_service.get_by_request(db, request_id)


@router.get("/{attestation_id}", response_model=AttestationResponse)
async def get_attestation(
    attestation_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await attestation_service.get(db, attestation_id)


@router.post("/{attestation_id}/confirm", response_model=AttestationResponse)
async def confirm_attestation(
    attestation_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Extends the request's expiration date to the end of the period"""
    return await attestation_service.confirm(db, attestation_id)


@router.post("/{attestation_id}/expire", response_model=AttestationResponse)
async def expire_attestation(
    attestation_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    return await attestation_service.expire(db, attestation_id)


@router.post("/{attestation_id}/reminder-sent", response_model=AttestationResponse)
async def mark_reminder_sent(
    attestation_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_it_staff)
):
    return await attestation_service.mark_reminder_sent(db, attestation_id)
