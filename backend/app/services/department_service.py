"""
Department Service - CRUD for university departments
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from typing import List, Optional

from app.core.exceptions import ConflictError, NotFoundError
from app.core.logging_config import get_logger
from app.models.infrastructure import Department, Room
from app.schemas.infrastructure import DepartmentCreate, DepartmentUpdate

logger = get_logger(__name__)


class DepartmentService:
    """Service for managing departments"""

    async def _ensure_unique(
        self,
        db: AsyncSession,
        name: Optional[str],
        code: Optional[str],
        exclude_id: Optional[str] = None
    ) -> None:
        conditions = []
        if name is not None:
            conditions.append(Department.name == name)
        if code is not None:
            conditions.append(Department.code == code)
        if not conditions:
            return

        query = select(Department).where(or_(*conditions))
        if exclude_id:
            query = query.where(Department.id != exclude_id)
        existing = (await db.execute(query)).scalars().first()
        if existing:
            field = "name" if name is not None and existing.name == name else "code"
            raise ConflictError(
                f"A department with {field} '{getattr(existing, field)}' already exists",
                field=field,
            )

    async def create(self, db: AsyncSession, data: DepartmentCreate) -> Department:
        await self._ensure_unique(db, data.name, data.code)

        department = Department(
            name=data.name,
            code=data.code,
            description=data.description,
        )
        db.add(department)
        await db.commit()
        await db.refresh(department)

        logger.info(f"Created department {department.code}")
        return department

    async def list_departments(self, db: AsyncSession) -> List[Department]:
        result = await db.execute(select(Department).order_by(Department.name))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, department_id: str) -> Department:
        department = await db.get(Department, department_id)
        if not department:
            raise NotFoundError("Department", department_id)
        return department

    async def list_rooms(self, db: AsyncSession, department_id: str) -> List[Room]:
        await self.get(db, department_id)
        result = await db.execute(
            select(Room)
            .where(Room.department_id == department_id)
            .order_by(Room.name)
        )
        return list(result.scalars().all())

    async def update(
        self,
        db: AsyncSession,
        department_id: str,
        data: DepartmentUpdate
    ) -> Department:
        department = await self.get(db, department_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        await self._ensure_unique(
            db,
            changes.get("name") if changes.get("name") != department.name else None,
            changes.get("code") if changes.get("code") != department.code else None,
            exclude_id=department.id,
        )

        for field, value in changes.items():
            setattr(department, field, value)

        await db.commit()
        await db.refresh(department)
        return department

    async def delete(self, db: AsyncSession, department_id: str) -> None:
        """Refused while the department still owns rooms"""
        department = await self.get(db, department_id)

        room_count = (await db.execute(
            select(func.count(Room.id)).where(Room.department_id == department_id)
        )).scalar() or 0
        if room_count:
            raise ConflictError(
                f"Department '{department.code}' still owns {room_count} room(s) and cannot be deleted"
            )

        await db.delete(department)
        await db.commit()
        logger.info(f"Deleted department {department.code}")


# Singleton instance
department_service = DepartmentService()
