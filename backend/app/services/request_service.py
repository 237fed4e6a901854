"""
Request Service - installation request lifecycle

Handles:
- Creation of a request with its items and room installations (one commit)
- Queries (paginated list, by teacher, open requests)
- Teacher edits and closure, owner only
- Manual status transitions checked against REQUEST_STATUS_TRANSITIONS
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import datetime
from typing import List, Optional, Tuple

from app.core.exceptions import (
    BusinessRuleViolation,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.core.logging_config import get_logger
from app.models.enums import (
    CLOSABLE_REQUEST_STATUSES,
    LOCKED_REQUEST_STATUSES,
    HistoryAction,
    InstallationStatus,
    RequestStatus,
    StatusPin,
    UserRole,
    can_transition,
)
from app.models.infrastructure import Room
from app.models.request import Request, RequestItem, RoomInstallation
from app.models.software import Software
from app.models.user import User
from app.models.value_objects import AcademicYear
from app.schemas.history import HistoryEntryCreate
from app.schemas.request import RequestCreate, RequestUpdate
from app.services.history_service import HistoryService, history_service
from app.services.installation_sync_service import load_request_graph

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def check_owner(request: Request, actor_id: str) -> None:
    if request.teacher_id != str(actor_id).lower():
        raise ForbiddenError("Only the teacher who made the request can modify it")


class RequestService:
    """Service for installation requests"""

    def __init__(self, history_recorder: Optional[HistoryService] = None):
        self.history_recorder = history_recorder

    async def _record(self, db: AsyncSession, **fields) -> None:
        if self.history_recorder:
            await self.history_recorder.record_action(db, HistoryEntryCreate(**fields))

    # ==================== CREATION ====================

    async def _validate_teacher(self, db: AsyncSession, teacher_id: str) -> User:
        teacher = await db.get(User, teacher_id)
        if not teacher or teacher.role != UserRole.TEACHER:
            raise NotFoundError("Teacher", teacher_id)
        return teacher

    async def _validate_software(self, db: AsyncSession, software_ids: List[str]) -> None:
        unique_ids = list(dict.fromkeys(software_ids))
        result = await db.execute(
            select(Software.id).where(Software.id.in_(unique_ids), Software.active.is_(True))
        )
        found = set(result.scalars().all())
        for software_id in unique_ids:
            if str(software_id).lower() not in found:
                raise NotFoundError("Software", software_id)

    async def _validate_rooms(self, db: AsyncSession, room_ids: List[str]) -> None:
        unique_ids = list(dict.fromkeys(room_ids))
        result = await db.execute(select(Room.id).where(Room.id.in_(unique_ids)))
        found = set(result.scalars().all())
        for room_id in unique_ids:
            if str(room_id).lower() not in found:
                raise NotFoundError("Room", room_id)

    async def create(self, db: AsyncSession, data: RequestCreate, actor_id: str) -> Request:
        """
        Create a NEW request, its PENDING items and not-installed room
        installations together. Everything is validated before anything is
        written; one history entry per item follows the commit.
        """
        teacher_id = data.teacher_id or actor_id
        await self._validate_teacher(db, teacher_id)
        academic_year = AcademicYear.from_year(data.academic_year)
        await self._validate_software(db, [entry.software_id for entry in data.software])
        await self._validate_rooms(db, [room_id for entry in data.software for room_id in entry.room_ids])

        now = datetime.utcnow()
        request = Request(
            teacher_id=teacher_id,
            desired_date=data.desired_date,
            academic_year=academic_year.code,
            status=RequestStatus.NEW,
            comment=data.comment,
            created_at=now,
            last_modified=now,
        )
        for entry in data.software:
            item = RequestItem(
                software_id=entry.software_id,
                installation_status=InstallationStatus.PENDING,
                status_pin=StatusPin.NONE,
                created_at=now,
            )
            item.room_installations = [
                RoomInstallation(room_id=room_id, installed=False, assignment_date=now, last_modified=now)
                for room_id in entry.room_ids
            ]
            request.items.append(item)

        db.add(request)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        request_id = request.id
        created_items = [(item.id, item.software_id) for item in request.items]
        logger.info(
            f"Created request {request_id} for teacher {teacher_id} "
            f"({len(created_items)} software, year {academic_year})"
        )

        for item_id, software_id in created_items:
            await self._record(
                db,
                request_id=request_id,
                request_item_id=item_id,
                software_id=software_id,
                user_id=actor_id,
                action=HistoryAction.REQUEST_CREATION,
                new_status=RequestStatus.NEW,
                new_installation_status=InstallationStatus.PENDING,
                comment=data.comment,
            )

        return await load_request_graph(db, request_id)

    # ==================== QUERIES ====================

    async def get(self, db: AsyncSession, request_id: str) -> Request:
        return await load_request_graph(db, request_id)

    async def list_requests(
        self,
        db: AsyncSession,
        status: Optional[RequestStatus] = None,
        academic_year: Optional[str] = None,
        teacher_id: Optional[str] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[Request], int]:
        """Newest first; returns (requests, total)"""
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

        conditions = []
        if status:
            conditions.append(Request.status == status)
        if academic_year:
            conditions.append(Request.academic_year == AcademicYear.from_year(academic_year).code)
        if teacher_id:
            conditions.append(Request.teacher_id == teacher_id)

        total = await db.scalar(select(func.count(Request.id)).where(*conditions)) or 0
        result = await db.execute(
            select(Request)
            .where(*conditions)
            .order_by(Request.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total

    async def list_by_teacher(self, db: AsyncSession, teacher_id: str) -> List[Request]:
        result = await db.execute(
            select(Request)
            .where(Request.teacher_id == teacher_id)
            .order_by(Request.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_in_progress(self, db: AsyncSession) -> List[Request]:
        """Requests still waiting for installation work (NEW or IN_PROGRESS)"""
        result = await db.execute(
            select(Request)
            .where(Request.status.in_(CLOSABLE_REQUEST_STATUSES))
            .order_by(Request.created_at)
        )
        return list(result.scalars().all())

    # ==================== TEACHER ACTIONS ====================

    async def update(
        self,
        db: AsyncSession,
        request_id: str,
        actor_id: str,
        data: RequestUpdate
    ) -> Request:
        request = await load_request_graph(db, request_id)
        check_owner(request, actor_id)

        if request.status in LOCKED_REQUEST_STATUSES:
            raise BusinessRuleViolation(
                f"A request in status '{request.status.value}' can no longer be modified",
                rule="request_locked",
            )
        if request.items and all(
            item.installation_status == InstallationStatus.ALL_INSTALLED for item in request.items
        ):
            raise BusinessRuleViolation(
                "A request whose software is installed everywhere can no longer be modified",
                rule="request_locked",
            )

        changes = data.model_dump(exclude_unset=True)
        # required columns; an explicit null leaves them as they are
        for field in ("academic_year", "desired_date"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "academic_year" in changes:
            changes["academic_year"] = AcademicYear.from_year(changes["academic_year"]).code

        for field, value in changes.items():
            setattr(request, field, value)
        request.last_modified = datetime.utcnow()

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await self._record(
            db,
            request_id=request.id,
            user_id=actor_id,
            action=HistoryAction.REQUEST_UPDATE,
            previous_status=request.status,
            new_status=request.status,
            comment=f"Updated: {', '.join(sorted(changes)) or 'nothing'}",
        )
        return await load_request_graph(db, request_id)

    async def close(
        self,
        db: AsyncSession,
        request_id: str,
        actor_id: str,
        closure_comment: str
    ) -> Request:
        request = await load_request_graph(db, request_id)
        check_owner(request, actor_id)

        if request.status not in CLOSABLE_REQUEST_STATUSES:
            raise BusinessRuleViolation(
                f"Only new or in-progress requests can be closed (status is '{request.status.value}')",
                rule="request_not_closable",
            )
        if not closure_comment or not closure_comment.strip():
            raise ValidationError("A closure comment is required", field="closure_comment")

        previous_status = request.status
        now = datetime.utcnow()
        request.status = RequestStatus.CLOSED
        request.closure_comment = closure_comment.strip()
        request.closure_date = now
        request.last_modified = now

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.log_status_change("Request", request.id, previous_status, RequestStatus.CLOSED)
        await self._record(
            db,
            request_id=request.id,
            user_id=actor_id,
            action=HistoryAction.CLOSURE,
            previous_status=previous_status,
            new_status=RequestStatus.CLOSED,
            comment=request.closure_comment,
        )
        return await load_request_graph(db, request_id)

    # ==================== TRANSITIONS ====================

    async def transition(
        self,
        db: AsyncSession,
        request_id: str,
        target: RequestStatus,
        actor_id: str,
        comment: Optional[str] = None
    ) -> Request:
        """Manual status change allowed only along REQUEST_STATUS_TRANSITIONS"""
        request = await load_request_graph(db, request_id)
        previous_status = request.status

        if not can_transition(previous_status, target):
            raise InvalidTransitionError(previous_status, target)

        request.status = target
        request.last_modified = datetime.utcnow()
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.log_status_change("Request", request.id, previous_status, target, manual=True)
        await self._record(
            db,
            request_id=request.id,
            user_id=actor_id,
            action=HistoryAction.STATUS_CHANGE,
            previous_status=previous_status,
            new_status=target,
            comment=comment,
        )
        return await load_request_graph(db, request_id)

    async def mark_in_progress(self, db: AsyncSession, request_id: str, actor_id: str) -> Request:
        return await self.transition(db, request_id, RequestStatus.IN_PROGRESS, actor_id)


# Singleton instance
request_service = RequestService(history_service)
