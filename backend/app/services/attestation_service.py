"""
Attestation Service - yearly confirmation that installed software is still needed

States: PENDING -> CONFIRMED | EXPIRED. NOT_REQUIRED is only set at creation.
Confirming extends the owning request's expiration date to the period end.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_
from sqlalchemy.orm import selectinload
from datetime import date, datetime, timedelta
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.core.logging_config import get_logger
from app.models.attestation import Attestation
from app.models.enums import AttestationStatus, RequestStatus
from app.models.request import Request
from app.models.value_objects import AcademicYear
from app.schemas.attestation import AttestationCreate

logger = get_logger(__name__)

CREATABLE_STATUSES = frozenset({AttestationStatus.PENDING, AttestationStatus.NOT_REQUIRED})


def check_period(academic_year: AcademicYear, period_start: date, period_end: date) -> None:
    if period_start >= period_end:
        raise ValidationError("Attestation period start must precede its end", field="period_start")
    if not academic_year.contains(period_start):
        raise ValidationError(
            f"Period start {period_start} is outside academic year {academic_year}",
            field="period_start",
        )
    if not academic_year.contains(period_end):
        raise ValidationError(
            f"Period end {period_end} is outside academic year {academic_year}",
            field="period_end",
        )


def reminder_due(attestation: Attestation, today: date, window_days: int) -> bool:
    """PENDING, period ending within the window, no reminder in the last interval"""
    if attestation.status != AttestationStatus.PENDING:
        return False
    if (attestation.period_end - today).days > window_days:
        return False
    if attestation.reminder_sent_date is None:
        return True
    return (today - attestation.reminder_sent_date).days >= settings.ATTESTATION_REMINDER_INTERVAL_DAYS


class AttestationService:
    """Service for attestations"""

    async def create(self, db: AsyncSession, data: AttestationCreate) -> Attestation:
        request = await db.get(Request, data.request_id)
        if not request:
            raise NotFoundError("Request", data.request_id)

        existing = await db.execute(
            select(Attestation.id).where(Attestation.request_id == data.request_id)
        )
        if existing.first():
            raise ConflictError(
                f"Request {data.request_id} already has an attestation",
                field="request_id",
            )

        academic_year = AcademicYear.from_year(data.academic_year)
        check_period(academic_year, data.period_start, data.period_end)
        if data.status not in CREATABLE_STATUSES:
            raise ValidationError(
                "An attestation can only be created as pending or not_required",
                field="status",
            )

        attestation = Attestation(
            request_id=request.id,
            academic_year=academic_year.code,
            period_start=data.period_start,
            period_end=data.period_end,
            status=data.status,
        )
        db.add(attestation)
        await db.commit()
        await db.refresh(attestation)

        logger.info(f"Created {attestation.status.value} attestation for request {request.id}")
        return attestation

    async def get(self, db: AsyncSession, attestation_id: str) -> Attestation:
        attestation = await db.get(Attestation, attestation_id)
        if not attestation:
            raise NotFoundError("Attestation", attestation_id)
        return attestation

    async def get_by_request(self, db: AsyncSession, request_id: str) -> Attestation:
        result = await db.execute(select(Attestation).where(Attestation.request_id == request_id))
        attestation = result.scalar_one_or_none()
        if not attestation:
            raise NotFoundError("Attestation", request_id)
        return attestation

    async def find_all(
        self,
        db: AsyncSession,
        academic_year: Optional[str] = None,
        status: Optional[AttestationStatus] = None
    ) -> List[Attestation]:
        query = select(Attestation)
        if academic_year:
            query = query.where(Attestation.academic_year == AcademicYear.from_year(academic_year).code)
        if status:
            query = query.where(Attestation.status == status)
        result = await db.execute(query.order_by(Attestation.period_end, Attestation.created_at))
        return list(result.scalars().all())

    # ==================== LIFECYCLE ====================

    async def confirm(self, db: AsyncSession, attestation_id: str) -> Attestation:
        result = await db.execute(
            select(Attestation)
            .options(selectinload(Attestation.request))
            .where(Attestation.id == attestation_id)
        )
        attestation = result.scalar_one_or_none()
        if not attestation:
            raise NotFoundError("Attestation", attestation_id)
        if attestation.status != AttestationStatus.PENDING:
            raise InvalidTransitionError(
                attestation.status, AttestationStatus.CONFIRMED, entity="Attestation"
            )

        attestation.status = AttestationStatus.CONFIRMED
        attestation.confirmation_date = datetime.utcnow()
        attestation.request.expiration_date = attestation.period_end
        attestation.request.last_modified = datetime.utcnow()

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.log_status_change("Attestation", attestation.id, AttestationStatus.PENDING, AttestationStatus.CONFIRMED)
        return attestation

    async def expire(self, db: AsyncSession, attestation_id: str) -> Attestation:
        """Confirmed attestations are left untouched"""
        attestation = await self.get(db, attestation_id)
        if attestation.status == AttestationStatus.CONFIRMED:
            return attestation

        previous = attestation.status
        attestation.status = AttestationStatus.EXPIRED
        await db.commit()
        logger.log_status_change("Attestation", attestation.id, previous, AttestationStatus.EXPIRED)
        return attestation

    async def expire_due(self, db: AsyncSession, today: Optional[date] = None) -> int:
        """Expire every PENDING attestation whose period has ended"""
        today = today or datetime.utcnow().date()
        result = await db.execute(
            select(Attestation).where(and_(
                Attestation.status == AttestationStatus.PENDING,
                Attestation.period_end < today,
            ))
        )
        due = list(result.scalars().all())
        for attestation in due:
            attestation.status = AttestationStatus.EXPIRED

        if due:
            await db.commit()
        logger.info(f"Expired {len(due)} attestation(s) due before {today}")
        return len(due)

    async def list_reminders_due(
        self,
        db: AsyncSession,
        window_days: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[Attestation]:
        window_days = settings.ATTESTATION_REMINDER_DAYS if window_days is None else window_days
        today = today or datetime.utcnow().date()
        interval_cutoff = today - timedelta(days=settings.ATTESTATION_REMINDER_INTERVAL_DAYS)

        result = await db.execute(
            select(Attestation)
            .where(and_(
                Attestation.status == AttestationStatus.PENDING,
                Attestation.period_end <= today + timedelta(days=window_days),
                or_(
                    Attestation.reminder_sent_date.is_(None),
                    Attestation.reminder_sent_date <= interval_cutoff,
                ),
            ))
            .order_by(Attestation.period_end)
        )
        return [a for a in result.scalars().all() if reminder_due(a, today, window_days)]

    async def mark_reminder_sent(
        self,
        db: AsyncSession,
        attestation_id: str,
        today: Optional[date] = None
    ) -> Attestation:
        attestation = await self.get(db, attestation_id)
        attestation.reminder_sent_date = today or datetime.utcnow().date()
        await db.commit()
        return attestation

    async def create_campaign(self, db: AsyncSession, academic_year: str) -> int:
        """
        One PENDING attestation spanning the academic year for every INSTALLED
        request of that year that has none yet. Returns how many were created.
        """
        year = AcademicYear.from_year(academic_year)
        result = await db.execute(
            select(Request.id)
            .outerjoin(Attestation, Attestation.request_id == Request.id)
            .where(and_(
                Request.academic_year == year.code,
                Request.status == RequestStatus.INSTALLED,
                Attestation.id.is_(None),
            ))
        )
        request_ids = list(result.scalars().all())

        for request_id in request_ids:
            db.add(Attestation(
                request_id=request_id,
                academic_year=year.code,
                period_start=year.start,
                period_end=year.end,
                status=AttestationStatus.PENDING,
            ))

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(f"Attestation campaign {year}: {len(request_ids)} attestation(s) created")
        return len(request_ids)


# Singleton instance
attestation_service = AttestationService()
