"""
Request Item Service - item queries and explicit installation overrides
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from datetime import datetime
from typing import List, Optional

from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.models.enums import HistoryAction, InstallationStatus, pin_for_status
from app.models.request import RequestItem
from app.schemas.history import HistoryEntryCreate
from app.services.history_service import HistoryService, history_service
from app.services.installation_service import InstallationService, installation_service
from app.services.installation_sync_service import (
    InstallationSyncService,
    installation_sync_service,
    load_request_graph,
    find_item,
)

logger = get_logger(__name__)


class RequestItemService:
    """Service for request items"""

    def __init__(
        self,
        sync_service: InstallationSyncService,
        installations: InstallationService,
        history_recorder: Optional[HistoryService] = None
    ):
        self.sync_service = sync_service
        self.installations = installations
        self.history_recorder = history_recorder

    async def list_items(
        self,
        db: AsyncSession,
        request_id: Optional[str] = None,
        software_id: Optional[str] = None,
        status: Optional[InstallationStatus] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[RequestItem]:
        query = select(RequestItem).options(selectinload(RequestItem.room_installations))
        if request_id:
            query = query.where(RequestItem.request_id == request_id)
        if software_id:
            query = query.where(RequestItem.software_id == software_id)
        if status:
            query = query.where(RequestItem.installation_status == status)

        result = await db.execute(
            query.order_by(RequestItem.created_at).offset(offset).limit(limit)
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, item_id: str) -> RequestItem:
        result = await db.execute(
            select(RequestItem)
            .options(selectinload(RequestItem.room_installations))
            .where(RequestItem.id == item_id)
            .execution_options(populate_existing=True)
        )
        item = result.scalar_one_or_none()
        if not item:
            raise NotFoundError("Request item", item_id)
        return item

    async def _load(self, db: AsyncSession, item_id: str):
        item = await self.get(db, item_id)
        request = await load_request_graph(db, item.request_id)
        return request, find_item(request, item.id)

    async def mark_installed(
        self,
        db: AsyncSession,
        item_id: str,
        actor_id: str,
        installation_date: Optional[datetime] = None,
        comment: Optional[str] = None
    ) -> RequestItem:
        """Install the item in every room; any PROBLEM / CHANGED pin is lifted"""
        request, item = await self._load(db, item_id)
        request = await self.installations.install_item_everywhere(
            db, request, item, actor_id, installation_date, comment, clear_pin=True
        )
        return find_item(request, item_id)

    async def update_installation(
        self,
        db: AsyncSession,
        item_id: str,
        actor_id: str,
        status: Optional[InstallationStatus] = None,
        installation_date: Optional[datetime] = None,
        comment: Optional[str] = None
    ) -> RequestItem:
        """
        Explicit installation status override.

        A given status is applied as is and pins PROBLEM / CHANGED; ALL_INSTALLED
        also installs every room. Without a status the item is recomputed from
        its rooms. The request status is recomputed in both cases.
        """
        if status == InstallationStatus.PROBLEM and not (comment and comment.strip()):
            raise ValidationError("A comment describing the problem is required", field="comment")

        request, item = await self._load(db, item_id)
        request_id = request.id
        previous_item_status = item.installation_status
        previous_request_status = request.status
        now = datetime.utcnow()

        if comment is not None:
            item.comment = comment

        if status is not None:
            item.installation_status = status
            item.status_pin = pin_for_status(status)
            item.status_change_date = now

            if status == InstallationStatus.ALL_INSTALLED:
                for installation in item.room_installations:
                    if not installation.installed:
                        installation.installed = True
                        installation.installation_date = installation_date or now
                        installation.last_modified = now
                        if comment:
                            installation.comment = comment
                if item.installation_date is None:
                    item.installation_date = installation_date or now
            elif previous_item_status == InstallationStatus.ALL_INSTALLED:
                item.installation_date = None
        else:
            self.sync_service.recalculate_item_status(item)

        if installation_date is not None:
            item.installation_date = installation_date

        self.sync_service.recalculate_request_status(request)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.log_status_change(
            "RequestItem", item.id, previous_item_status, item.installation_status,
            override=status is not None,
        )

        if self.history_recorder:
            await self.history_recorder.record_action(db, HistoryEntryCreate(
                request_id=request.id,
                request_item_id=item.id,
                software_id=item.software_id,
                user_id=actor_id,
                action=HistoryAction.INSTALLATION_STATUS_CHANGE,
                previous_status=previous_request_status,
                new_status=request.status,
                previous_installation_status=previous_item_status,
                new_installation_status=item.installation_status,
                comment=comment,
            ))

        request = await load_request_graph(db, request_id)
        return find_item(request, item_id)


# Singleton instance
request_item_service = RequestItemService(
    installation_sync_service,
    installation_service,
    history_service,
)
