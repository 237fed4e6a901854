"""
Installation Sync Service - status reconciliation cascade

Room installations -> request item installation status -> request status.

The recalculate_* methods only mutate objects already loaded in the session
and never commit; callers run them inside their own transaction so that the
room change and the cascaded statuses are persisted together.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from datetime import datetime
from typing import Dict, Any, List

from app.core.exceptions import NotFoundError
from app.core.logging_config import get_logger
from app.models.enums import (
    InstallationStatus,
    calculate_installation_status,
    calculate_request_status,
)
from app.models.request import Request, RequestItem, RoomInstallation

logger = get_logger(__name__)


async def load_request_graph(db: AsyncSession, request_id: str) -> Request:
    """
    Request with its items, their software, room installations and rooms.

    populate_existing refreshes objects already in the identity map, so only
    call this when nothing is pending in the session.
    """
    result = await db.execute(
        select(Request)
        .options(
            selectinload(Request.items).selectinload(RequestItem.software),
            selectinload(Request.items)
            .selectinload(RequestItem.room_installations)
            .selectinload(RoomInstallation.room),
        )
        .where(Request.id == request_id)
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if not request:
        raise NotFoundError("Request", request_id)
    return request


def find_item(request: Request, item_id: str) -> RequestItem:
    """Item of a loaded request; NotFoundError when it belongs elsewhere"""
    item_id = str(item_id).lower()
    for item in request.items:
        if item.id == item_id:
            return item
    raise NotFoundError("Request item", item_id)


def count_rooms(item: RequestItem) -> tuple:
    installations = item.room_installations
    return len(installations), sum(1 for installation in installations if installation.installed)


class InstallationSyncService:
    """Recomputes derived installation and request statuses"""

    def recalculate_item_status(self, item: RequestItem) -> bool:
        """
        Recompute an item's installation status from its room installations.

        Writes only when the status changes; returns whether it did.
        """
        total, installed = count_rooms(item)
        new_status = calculate_installation_status(total, installed, item.status_pin)
        previous = item.installation_status

        if new_status == previous:
            return False

        item.installation_status = new_status
        if new_status == InstallationStatus.ALL_INSTALLED:
            if item.installation_date is None:
                item.installation_date = datetime.utcnow()
        elif previous == InstallationStatus.ALL_INSTALLED:
            item.installation_date = None

        logger.log_status_change("RequestItem", item.id, previous, new_status, installed=installed, total=total)
        return True

    def recalculate_request_status(self, request: Request) -> bool:
        """
        Recompute a request's status from its items.

        Writes only when the status changes; returns whether it did.
        """
        previous = request.status
        new_status = calculate_request_status(
            previous,
            [item.installation_status for item in request.items],
        )
        if new_status == previous:
            return False

        request.status = new_status
        request.last_modified = datetime.utcnow()
        logger.log_status_change("Request", request.id, previous, new_status)
        return True

    async def synchronize_request(self, db: AsyncSession, request_id: str) -> Dict[str, Any]:
        """Recompute every item then the request, in one transaction"""
        request = await load_request_graph(db, request_id)

        items_updated = 0
        for item in request.items:
            if self.recalculate_item_status(item):
                items_updated += 1
        request_updated = self.recalculate_request_status(request)

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            f"Synchronized request {request_id}: {items_updated} item(s) updated, "
            f"request {'updated' if request_updated else 'unchanged'}"
        )
        return {
            "request_id": request.id,
            "request_status": request.status,
            "items_updated": items_updated,
            "request_updated": request_updated,
        }

    async def check_consistency(self, db: AsyncSession, request_id: str) -> Dict[str, Any]:
        """Compare stored statuses with recomputed ones without writing anything"""
        request = await load_request_graph(db, request_id)

        details: List[Dict[str, Any]] = []
        problems: List[str] = []
        for item in request.items:
            total, installed = count_rooms(item)
            expected = calculate_installation_status(total, installed, item.status_pin)
            coherent = expected == item.installation_status
            if not coherent:
                problems.append(
                    f"Request item {item.id}: status is '{item.installation_status.value}' "
                    f"but should be '{expected.value}'"
                )
            details.append({
                "request_item_id": item.id,
                "total_rooms": total,
                "installed_rooms": installed,
                "stored_status": item.installation_status,
                "expected_status": expected,
                "coherent": coherent,
            })

        expected_request_status = calculate_request_status(
            request.status,
            [item.installation_status for item in request.items],
        )
        if expected_request_status != request.status:
            problems.append(
                f"Request {request.id}: status is '{request.status.value}' "
                f"but should be '{expected_request_status.value}'"
            )

        return {
            "request_id": request.id,
            "coherent": not problems,
            "stored_request_status": request.status,
            "expected_request_status": expected_request_status,
            "details": details,
            "problems": problems,
        }


# Singleton instance
installation_sync_service = InstallationSyncService()
