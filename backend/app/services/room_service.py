"""
Room Service - rooms, their department pairing and installed software
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.core.exceptions import BusinessRuleViolation, ConflictError, NotFoundError
from app.core.logging_config import get_logger
from app.models.enums import RoomType
from app.models.infrastructure import Department, Room
from app.models.request import RoomInstallation
from app.models.software import Software
from app.schemas.infrastructure import RoomCreate, RoomUpdate

logger = get_logger(__name__)


def check_department_pairing(room_type: RoomType, department_id: Optional[str]) -> None:
    """Departmental rooms need a department, shared rooms must not have one"""
    if room_type.requires_department and not department_id:
        raise BusinessRuleViolation(
            "A departmental room must be attached to a department",
            rule="room_department_pairing",
        )
    if not room_type.requires_department and department_id:
        raise BusinessRuleViolation(
            "A shared room cannot be attached to a department",
            rule="room_department_pairing",
        )


class RoomService:
    """Service for managing rooms"""

    async def _resolve_department(self, db: AsyncSession, department_id: Optional[str]) -> None:
        if department_id and not await db.get(Department, department_id):
            raise NotFoundError("Department", department_id)

    async def _resolve_software(self, db: AsyncSession, software_ids: List[str]) -> List[Software]:
        if not software_ids:
            return []
        unique_ids = list(dict.fromkeys(str(software_id).lower() for software_id in software_ids))
        result = await db.execute(select(Software).where(Software.id.in_(unique_ids)))
        found = {software.id: software for software in result.scalars().all()}
        for software_id in unique_ids:
            if software_id not in found:
                raise NotFoundError("Software", software_id)
        return [found[software_id] for software_id in unique_ids]

    async def create(self, db: AsyncSession, data: RoomCreate) -> Room:
        check_department_pairing(data.type, data.department_id)
        await self._resolve_department(db, data.department_id)
        software = await self._resolve_software(db, data.software_ids)

        room = Room(
            name=data.name,
            capacity=data.capacity,
            type=data.type,
            department_id=data.department_id,
        )
        room.software = software
        db.add(room)
        await db.commit()

        logger.info(f"Created {room.type.value} room {room.name}")
        return await self.get(db, room.id)

    async def list_rooms(self, db: AsyncSession, room_type: Optional[RoomType] = None) -> List[Room]:
        query = select(Room).options(selectinload(Room.software)).order_by(Room.name)
        if room_type:
            query = query.where(Room.type == room_type)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, room_id: str) -> Room:
        result = await db.execute(
            select(Room)
            .options(selectinload(Room.software), selectinload(Room.department))
            .where(Room.id == room_id)
            .execution_options(populate_existing=True)
        )
        room = result.scalar_one_or_none()
        if not room:
            raise NotFoundError("Room", room_id)
        return room

    async def update(self, db: AsyncSession, room_id: str, data: RoomUpdate) -> Room:
        room = await self.get(db, room_id)
        provided = data.model_fields_set

        room_type = data.type or room.type
        department_id = data.department_id if "department_id" in provided else room.department_id
        check_department_pairing(room_type, department_id)
        await self._resolve_department(db, department_id)

        if data.software_ids is not None:
            room.software = await self._resolve_software(db, data.software_ids)

        if data.name is not None:
            room.name = data.name
        if data.capacity is not None:
            room.capacity = data.capacity
        room.type = room_type
        room.department_id = department_id

        await db.commit()
        return await self.get(db, room_id)

    async def delete(self, db: AsyncSession, room_id: str) -> None:
        """Refused while request installations still point at the room"""
        room = await self.get(db, room_id)
        in_use = (await db.execute(
            select(func.count(RoomInstallation.id)).where(RoomInstallation.room_id == room_id)
        )).scalar() or 0
        if in_use:
            raise ConflictError(
                f"Room '{room.name}' is referenced by {in_use} installation(s) and cannot be deleted"
            )
        await db.delete(room)
        await db.commit()
        logger.info(f"Deleted room {room.name}")

    async def list_installed_software(self, db: AsyncSession, room_id: str) -> List[Software]:
        room = await self.get(db, room_id)
        return sorted(room.software, key=lambda software: software.name)


# Singleton instance
room_service = RoomService()
