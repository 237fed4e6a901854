"""
Installation Service - per-room installation progress of a request

Handles:
- Marking one room installed / not installed for a request item
- Installing an item in all of its rooms at once
- Summary and detail read models of a request's installation progress

Every update cascades to the item and request statuses inside the same
commit; the history entry is written afterwards.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Optional, Dict, Any, List

from app.core.exceptions import BusinessRuleViolation, NotFoundError
from app.core.logging_config import get_logger
from app.models.enums import HistoryAction, StatusPin
from app.models.request import Request, RequestItem
from app.schemas.history import HistoryEntryCreate
from app.services.history_service import HistoryService, history_service
from app.services.installation_sync_service import (
    InstallationSyncService,
    installation_sync_service,
    load_request_graph,
    find_item,
    count_rooms,
)

logger = get_logger(__name__)


def completion_percentage(total: int, installed: int) -> int:
    if total == 0:
        return 0
    return round(installed * 100 / total)


class InstallationService:
    """Room installation updates and installation progress views"""

    def __init__(
        self,
        sync_service: InstallationSyncService,
        history_recorder: Optional[HistoryService] = None
    ):
        self.sync_service = sync_service
        self.history_recorder = history_recorder

    async def _commit_cascade(self, db: AsyncSession, request: Request, item: RequestItem) -> None:
        self.sync_service.recalculate_item_status(item)
        self.sync_service.recalculate_request_status(request)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def update_room_installation(
        self,
        db: AsyncSession,
        request_id: str,
        item_id: str,
        room_id: str,
        installed: bool,
        actor_id: str,
        installation_date: Optional[datetime] = None,
        comment: Optional[str] = None
    ) -> Request:
        """Mark one room of a request item as installed or not installed"""
        request = await load_request_graph(db, request_id)
        item = find_item(request, item_id)

        room_id = str(room_id).lower()
        installation = next(
            (ri for ri in item.room_installations if ri.room_id == room_id),
            None
        )
        if installation is None:
            raise NotFoundError("Room installation", room_id)

        previous_item_status = item.installation_status
        previous_request_status = request.status

        installation.installed = installed
        installation.installation_date = (installation_date or datetime.utcnow()) if installed else None
        if comment is not None:
            installation.comment = comment
        installation.last_modified = datetime.utcnow()

        await self._commit_cascade(db, request, item)
        logger.info(
            f"Room {room_id} marked {'installed' if installed else 'not installed'} "
            f"for request item {item.id}"
        )

        if self.history_recorder:
            await self.history_recorder.record_action(db, HistoryEntryCreate(
                request_id=request.id,
                request_item_id=item.id,
                software_id=item.software_id,
                user_id=actor_id,
                action=HistoryAction.INSTALLATION if installed else HistoryAction.UNINSTALLATION,
                previous_status=previous_request_status,
                new_status=request.status,
                previous_installation_status=previous_item_status,
                new_installation_status=item.installation_status,
                comment=comment or f"Room {installation.room.name if installation.room else room_id}",
            ))

        return await load_request_graph(db, request_id)

    async def install_all_rooms(
        self,
        db: AsyncSession,
        request_id: str,
        item_id: str,
        actor_id: str,
        installation_date: Optional[datetime] = None,
        comment: Optional[str] = None
    ) -> Request:
        """Flip every room installation of the item with a shared date and comment"""
        request = await load_request_graph(db, request_id)
        item = find_item(request, item_id)
        return await self.install_item_everywhere(
            db, request, item, actor_id, installation_date, comment
        )

    async def install_item_everywhere(
        self,
        db: AsyncSession,
        request: Request,
        item: RequestItem,
        actor_id: str,
        installation_date: Optional[datetime] = None,
        comment: Optional[str] = None,
        clear_pin: bool = False
    ) -> Request:
        if not item.room_installations:
            raise BusinessRuleViolation(
                f"Request item {item.id} has no rooms to install",
                rule="item_without_rooms",
            )

        request_id = request.id
        previous_item_status = item.installation_status
        previous_request_status = request.status

        if clear_pin:
            item.status_pin = StatusPin.NONE

        now = datetime.utcnow()
        date = installation_date or now
        for installation in item.room_installations:
            installation.installed = True
            installation.installation_date = date
            if comment is not None:
                installation.comment = comment
            installation.last_modified = now

        await self._commit_cascade(db, request, item)
        logger.info(f"Request item {item.id} installed in {len(item.room_installations)} room(s)")

        if self.history_recorder:
            await self.history_recorder.record_action(db, HistoryEntryCreate(
                request_id=request.id,
                request_item_id=item.id,
                software_id=item.software_id,
                user_id=actor_id,
                action=HistoryAction.INSTALLATION,
                previous_status=previous_request_status,
                new_status=request.status,
                previous_installation_status=previous_item_status,
                new_installation_status=item.installation_status,
                comment=comment or "Installed in all rooms",
            ))

        return await load_request_graph(db, request_id)

    # ==================== READ MODELS ====================

    async def get_installation_summary(self, db: AsyncSession, request_id: str) -> Dict[str, Any]:
        """Per item room counts, completion and installed / pending room lists"""
        request = await load_request_graph(db, request_id)

        items: List[Dict[str, Any]] = []
        for item in request.items:
            total, installed = count_rooms(item)
            installed_in = []
            pending_in = []
            for installation in item.room_installations:
                ref = {"room_id": installation.room_id, "room_name": installation.room.name}
                (installed_in if installation.installed else pending_in).append(ref)

            items.append({
                "request_item_id": item.id,
                "software_id": item.software_id,
                "software_name": item.software.name,
                "software_version": item.software.version,
                "installation_status": item.installation_status,
                "total_rooms": total,
                "installed_rooms": installed,
                "pending_rooms": total - installed,
                "completion_percentage": completion_percentage(total, installed),
                "installed_in": installed_in,
                "pending_in": pending_in,
            })

        return {"request_id": request.id, "request_status": request.status, "items": items}

    async def get_installation_details(self, db: AsyncSession, request_id: str) -> Dict[str, Any]:
        request = await load_request_graph(db, request_id)
        return {
            "request_id": request.id,
            "items": [
                {
                    "request_item_id": item.id,
                    "software_id": item.software_id,
                    "software_name": item.software.name,
                    "software_version": item.software.version,
                    "installation_status": item.installation_status,
                    "rooms": [
                        {
                            "room_id": installation.room_id,
                            "room_name": installation.room.name,
                            "installed": installation.installed,
                            "installation_date": installation.installation_date,
                            "comment": installation.comment,
                            "last_modified": installation.last_modified,
                        }
                        for installation in item.room_installations
                    ],
                }
                for item in request.items
            ],
        }


# Singleton instance
installation_service = InstallationService(installation_sync_service, history_service)
