"""
Attestation schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from app.models.enums import AttestationStatus
from app.schemas.common import InputModel, OrmModel


class AttestationCreate(InputModel):
    request_id: str
    academic_year: str
    period_start: date
    period_end: date
    status: AttestationStatus = Field(
        default=AttestationStatus.PENDING,
        description="Only pending or not_required are accepted at creation",
    )


class AttestationResponse(OrmModel):
    id: str
    request_id: str
    academic_year: str
    period_start: date
    period_end: date
    confirmation_date: Optional[datetime] = None
    status: AttestationStatus
    reminder_sent_date: Optional[date] = None
    created_at: datetime


class AttestationListResponse(OrmModel):
    attestations: List[AttestationResponse]
    total: int


class BatchResult(BaseModel):
    """Outcome of a batch job (expire due, campaign)"""
    processed: int
    message: str
