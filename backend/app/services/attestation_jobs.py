"""
Attestation batch jobs.

Nothing runs on a timer inside the process: an external scheduler (cron)
calls the matching /attestations endpoints, which delegate here.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date
from typing import Optional, List

from app.core.logging_config import get_logger
from app.models.attestation import Attestation
from app.services.attestation_service import AttestationService, attestation_service

logger = get_logger(__name__)


class AttestationJobs:
    def __init__(self, service: AttestationService):
        self.service = service

    async def run_expiration(self, db: AsyncSession, today: Optional[date] = None) -> int:
        count = await self.service.expire_due(db, today)
        logger.info(f"Attestation expiration job processed {count} attestation(s)")
        return count

    async def run_reminder_check(
        self,
        db: AsyncSession,
        window_days: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[Attestation]:
        due = await self.service.list_reminders_due(db, window_days, today)
        logger.info(f"Attestation reminder job found {len(due)} attestation(s) to remind")
        return due


attestation_jobs = AttestationJobs(attestation_service)
