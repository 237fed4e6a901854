"""
Software Service - catalog management

Versions are validated through SoftwareVersion; (name, version) is unique and
deleting a catalog entry only deactivates it so past requests keep their
reference.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.models.infrastructure import Room, room_software
from app.models.software import Software
from app.models.value_objects import SoftwareVersion
from app.schemas.software import SoftwareCreate, SoftwareUpdate

logger = get_logger(__name__)


def check_max_duration(days: int) -> None:
    if days < 1 or days > settings.SOFTWARE_MAX_DURATION_DAYS:
        raise ValidationError(
            f"Maximum usage duration must be between 1 and {settings.SOFTWARE_MAX_DURATION_DAYS} days",
            field="max_duration_days",
        )


class SoftwareService:
    """Service for managing the software catalog"""

    async def _ensure_unique(
        self,
        db: AsyncSession,
        name: str,
        version: str,
        exclude_id: Optional[str] = None
    ) -> None:
        query = select(Software).where(and_(Software.name == name, Software.version == version))
        if exclude_id:
            query = query.where(Software.id != exclude_id)
        if (await db.execute(query)).scalars().first():
            raise ConflictError(f"Software '{name}' version {version} already exists", field="version")

    async def create(self, db: AsyncSession, data: SoftwareCreate) -> Software:
        version = SoftwareVersion.from_string(data.version)
        check_max_duration(data.max_duration_days)
        await self._ensure_unique(db, data.name, str(version))

        software = Software(
            name=data.name,
            publisher=data.publisher,
            version=str(version),
            usage=data.usage,
            max_duration_days=data.max_duration_days,
            license=data.license,
            logo_url=data.logo_url,
            active=data.active,
        )
        db.add(software)
        await db.commit()
        await db.refresh(software)

        logger.info(f"Added software {software.name} {software.version} to the catalog")
        return software

    async def list_software(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        active: Optional[bool] = None
    ) -> List[Software]:
        query = select(Software)
        if search:
            query = query.where(Software.name.ilike(f"%{search}%"))
        if active is not None:
            query = query.where(Software.active == active)
        result = await db.execute(query.order_by(Software.name, Software.version))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, software_id: str) -> Software:
        software = await db.get(Software, software_id)
        if not software:
            raise NotFoundError("Software", software_id)
        return software

    async def update(self, db: AsyncSession, software_id: str, data: SoftwareUpdate) -> Software:
        software = await self.get(db, software_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "version" in changes:
            changes["version"] = str(SoftwareVersion.from_string(changes["version"]))
        if "max_duration_days" in changes:
            check_max_duration(changes["max_duration_days"])

        name = changes.get("name", software.name)
        version = changes.get("version", software.version)
        if name != software.name or version != software.version:
            await self._ensure_unique(db, name, version, exclude_id=software.id)

        for field, value in changes.items():
            setattr(software, field, value)

        await db.commit()
        await db.refresh(software)
        return software

    async def deactivate(self, db: AsyncSession, software_id: str) -> Software:
        """Soft delete"""
        software = await self.get(db, software_id)
        software.active = False
        await db.commit()
        logger.info(f"Deactivated software {software.name} {software.version}")
        return software

    async def is_installed_in(self, db: AsyncSession, room_id: str, software_id: str) -> bool:
        """Whether the software is in the room's current catalog"""
        result = await db.execute(
            select(room_software.c.room_id).where(and_(
                room_software.c.room_id == room_id,
                room_software.c.software_id == software_id,
            ))
        )
        return result.first() is not None

    async def list_rooms(self, db: AsyncSession, software_id: str) -> List[Room]:
        """Rooms whose current catalog contains the software"""
        result = await db.execute(
            select(Software)
            .options(selectinload(Software.rooms))
            .where(Software.id == software_id)
        )
        software = result.scalar_one_or_none()
        if not software:
            raise NotFoundError("Software", software_id)
        return sorted(software.rooms, key=lambda room: room.name)


# Singleton instance
software_service = SoftwareService()
