"""
User Service - accounts, teacher profiles and IT-service members

Handles:
- User CRUD with unique emails and soft delete
- Teacher creation (user + profile in one transaction)
- Lookups used by authentication and request ownership checks
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.core.exceptions import BusinessRuleViolation, ConflictError, NotFoundError
from app.core.logging_config import get_logger
from app.core.security import get_password_hash
from app.models.enums import UserRole
from app.models.user import User, Teacher, ITServiceMember, Administrator
from app.schemas.user import UserCreate, UserUpdate, TeacherCreate

logger = get_logger(__name__)


class UserService:
    """Service for managing users"""

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def _ensure_email_free(self, db: AsyncSession, email: str) -> None:
        if await self.get_by_email(db, email):
            raise ConflictError(f"A user with email '{email}' already exists", field="email")

    def _attach_profile(self, user: User) -> None:
        """Create the specialisation row matching the user's role"""
        if user.role == UserRole.IT_SERVICE:
            user.it_service_member = ITServiceMember()
        elif user.role == UserRole.ADMIN:
            user.administrator = Administrator()

    def _change_role(self, user: User, role: UserRole) -> None:
        """Swap the specialisation row; teacher profiles own requests and are never converted"""
        if UserRole.TEACHER in (user.role, role):
            raise BusinessRuleViolation(
                f"Cannot change role from {user.role.value} to {role.value}",
                rule="teacher_role_change",
            )
        user.it_service_member = None
        user.administrator = None
        user.role = role
        self._attach_profile(user)

    async def create(self, db: AsyncSession, data: UserCreate) -> User:
        await self._ensure_email_free(db, data.email)

        user = User(
            email=data.email.lower(),
            last_name=data.last_name,
            first_name=data.first_name,
            hashed_password=get_password_hash(data.password) if data.password else None,
            sso_id=data.sso_id,
            role=data.role,
            is_active=data.is_active,
        )
        self._attach_profile(user)
        db.add(user)
        await db.commit()

        logger.info(f"Created {user.role.value} user {user.email}")
        return await self.get(db, user.id)

    async def list_users(self, db: AsyncSession, is_active: Optional[bool] = None) -> List[User]:
        query = select(User).order_by(User.last_name, User.first_name)
        if is_active is not None:
            query = query.where(User.is_active == is_active)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, user_id: str) -> User:
        result = await db.execute(
            select(User)
            .options(
                selectinload(User.teacher),
                selectinload(User.it_service_member),
                selectinload(User.administrator),
            )
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def update(self, db: AsyncSession, user_id: str, data: UserUpdate) -> User:
        user = await self.get(db, user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        role = changes.pop("role", None)
        if role is not None and role != user.role:
            self._change_role(user, role)

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            if changes["email"] != user.email:
                await self._ensure_email_free(db, changes["email"])

        password = changes.pop("password", None)
        if password:
            user.hashed_password = get_password_hash(password)

        for field, value in changes.items():
            setattr(user, field, value)

        await db.commit()
        return await self.get(db, user_id)

    async def deactivate(self, db: AsyncSession, user_id: str) -> User:
        """Soft delete"""
        user = await self.get(db, user_id)
        user.is_active = False
        await db.commit()
        logger.info(f"Deactivated user {user.email}")
        return user

    async def list_it_service(self, db: AsyncSession) -> List[User]:
        result = await db.execute(
            select(User)
            .where(User.role == UserRole.IT_SERVICE, User.is_active.is_(True))
            .order_by(User.last_name, User.first_name)
        )
        return list(result.scalars().all())

    # ==================== TEACHERS ====================

    async def create_teacher(self, db: AsyncSession, data: TeacherCreate) -> User:
        """User and teacher profile are committed together or not at all"""
        existing = await db.execute(
            select(Teacher).where(Teacher.employee_number == data.employee_number)
        )
        if existing.scalar_one_or_none():
            raise ConflictError(
                f"A teacher with employee number '{data.employee_number}' already exists",
                field="employee_number",
            )
        await self._ensure_email_free(db, data.email)

        user = User(
            email=data.email.lower(),
            last_name=data.last_name,
            first_name=data.first_name,
            hashed_password=get_password_hash(data.password) if data.password else None,
            sso_id=data.sso_id,
            role=UserRole.TEACHER,
            is_active=data.is_active,
        )
        user.teacher = Teacher(employee_number=data.employee_number, office=data.office)
        db.add(user)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(f"Created teacher {data.employee_number} ({user.email})")
        return await self.get(db, user.id)

    async def list_teachers(self, db: AsyncSession) -> List[User]:
        result = await db.execute(
            select(User)
            .options(selectinload(User.teacher))
            .where(User.role == UserRole.TEACHER, User.is_active.is_(True))
            .order_by(User.last_name, User.first_name)
        )
        return list(result.scalars().all())

    async def get_teacher(self, db: AsyncSession, user_id: str) -> User:
        user = await self.get(db, user_id)
        if user.role != UserRole.TEACHER:
            raise NotFoundError("Teacher", user_id)
        return user


# Singleton instance
user_service = UserService()
