"""
History Service - append-only audit trail

Other services hold an optional reference to the recorder and call
record_action after their own commit. A failed write is rolled back,
logged and dropped so that it never aborts or undoes the business change
that triggered it.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_, or_, desc
from datetime import datetime
from typing import Optional, List, Tuple, Dict, Any

from app.core.logging_config import get_logger
from app.models.enums import HistoryAction
from app.models.history import HistoryEntry
from app.schemas.history import HistoryEntryCreate, HistoryFilter

logger = get_logger(__name__)

TOP_USERS_LIMIT = 10


def _date_range_conditions(start_date: Optional[datetime], end_date: Optional[datetime]) -> list:
    conditions = []
    if start_date:
        conditions.append(HistoryEntry.created_at >= start_date)
    if end_date:
        conditions.append(HistoryEntry.created_at <= end_date)
    return conditions


class HistoryService:
    """Writes and queries history entries"""

    async def record_action(
        self,
        db: AsyncSession,
        entry: HistoryEntryCreate
    ) -> Optional[HistoryEntry]:
        """
        Persist one entry in its own commit.

        Returns the entry, or None when the write failed.
        """
        try:
            history_entry = HistoryEntry(**entry.model_dump())
            db.add(history_entry)
            await db.commit()
            return history_entry
        except Exception as e:
            await db.rollback()
            logger.error(
                f"Failed to record history action {entry.action.value} "
                f"for request {entry.request_id}: {e}"
            )
            return None

    async def find_all(
        self,
        db: AsyncSession,
        filters: HistoryFilter
    ) -> Tuple[List[HistoryEntry], int]:
        """
        List entries matching the filters, newest first.

        `status` matches either the previous or the new request status.
        """
        conditions = []
        if filters.request_id:
            conditions.append(HistoryEntry.request_id == filters.request_id)
        if filters.software_id:
            conditions.append(HistoryEntry.software_id == filters.software_id)
        if filters.user_id:
            conditions.append(HistoryEntry.user_id == filters.user_id)
        if filters.action:
            conditions.append(HistoryEntry.action == filters.action)
        if filters.status:
            conditions.append(or_(
                HistoryEntry.previous_status == filters.status,
                HistoryEntry.new_status == filters.status,
            ))
        conditions.extend(_date_range_conditions(filters.start_date, filters.end_date))

        query = select(HistoryEntry)
        count_query = select(func.count(HistoryEntry.id))
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        total = (await db.execute(count_query)).scalar() or 0

        page = max(1, filters.page)
        page_size = max(1, min(200, filters.page_size))
        query = (
            query.order_by(desc(HistoryEntry.created_at))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def _find_by(self, db: AsyncSession, column, value: str) -> List[HistoryEntry]:
        result = await db.execute(
            select(HistoryEntry)
            .where(column == value)
            .order_by(desc(HistoryEntry.created_at))
        )
        return list(result.scalars().all())

    async def find_by_request(self, db: AsyncSession, request_id: str) -> List[HistoryEntry]:
        return await self._find_by(db, HistoryEntry.request_id, request_id)

    async def find_by_software(self, db: AsyncSession, software_id: str) -> List[HistoryEntry]:
        return await self._find_by(db, HistoryEntry.software_id, software_id)

    async def find_by_user(self, db: AsyncSession, user_id: str) -> List[HistoryEntry]:
        return await self._find_by(db, HistoryEntry.user_id, user_id)

    async def get_statistics(
        self,
        db: AsyncSession,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Total count, count per action (every action listed) and the 10 most active users"""
        conditions = _date_range_conditions(start_date, end_date)

        total_query = select(func.count(HistoryEntry.id))
        by_action_query = (
            select(HistoryEntry.action, func.count(HistoryEntry.id))
            .group_by(HistoryEntry.action)
        )
        count_col = func.count(HistoryEntry.id).label("count")
        by_user_query = (
            select(HistoryEntry.user_id, count_col)
            .group_by(HistoryEntry.user_id)
            .order_by(desc(count_col))
            .limit(TOP_USERS_LIMIT)
        )
        if conditions:
            total_query = total_query.where(and_(*conditions))
            by_action_query = by_action_query.where(and_(*conditions))
            by_user_query = by_user_query.where(and_(*conditions))

        total = (await db.execute(total_query)).scalar() or 0

        by_action = {action.value: 0 for action in HistoryAction}
        for action, count in (await db.execute(by_action_query)).all():
            by_action[action.value] = count

        top_users = [
            {"user_id": user_id, "count": count}
            for user_id, count in (await db.execute(by_user_query)).all()
        ]

        return {
            "total": total,
            "by_action": by_action,
            "top_users": top_users,
        }


# Singleton instance
history_service = HistoryService()
