"""
Unit Tests for UserService
"""
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BusinessRuleViolation, ConflictError, NotFoundError
from app.core.security import verify_password
from app.models.enums import UserRole
from app.models.user import Administrator, ITServiceMember
from app.schemas.user import UserCreate, UserUpdate, TeacherCreate
from app.services.user_service import user_service


def teacher_data(**overrides) -> TeacherCreate:
    data = {
        "email": "ada.lovelace@example.com",
        "last_name": "Lovelace",
        "first_name": "Ada",
        "password": "analytical-engine",
        "employee_number": "EMP-00042",
        "office": "C-101",
    }
    data.update(overrides)
    return TeacherCreate(**data)


class TestUserService:

    async def test_create_it_member(self, db_session: AsyncSession):
        user = await user_service.create(db_session, UserCreate(
            email="Grace.Hopper@Example.com",
            last_name="Hopper",
            first_name="Grace",
            password="cobol-rules",
            role=UserRole.IT_SERVICE,
        ))

        assert user.email == "grace.hopper@example.com"
        assert verify_password("cobol-rules", user.hashed_password)
        members = await user_service.list_it_service(db_session)
        assert [m.id for m in members] == [user.id]

    async def test_duplicate_email(self, db_session: AsyncSession, it_user):
        with pytest.raises(ConflictError) as exc_info:
            await user_service.create(db_session, UserCreate(
                email=it_user.email, last_name="Dup", first_name="Dup"
            ))
        assert exc_info.value.details == {"field": "email"}

    async def test_sso_only_account(self, db_session: AsyncSession):
        user = await user_service.create(db_session, UserCreate(
            email="sso@example.com", last_name="Sso", first_name="Only", sso_id="cas-123",
            role=UserRole.ADMIN,
        ))

        assert user.hashed_password is None

    async def test_update_and_deactivate(self, db_session: AsyncSession, it_user):
        updated = await user_service.update(db_session, it_user.id, UserUpdate(first_name="Linus"))
        assert updated.first_name == "Linus"

        await user_service.deactivate(db_session, it_user.id)

        assert await user_service.list_users(db_session, is_active=True) == []
        assert (await user_service.get(db_session, it_user.id)).is_active is False

    async def test_role_change_swaps_profile(self, db_session: AsyncSession, it_user):
        updated = await user_service.update(db_session, it_user.id, UserUpdate(role=UserRole.ADMIN))

        assert updated.role == UserRole.ADMIN
        assert updated.administrator is not None
        assert updated.it_service_member is None
        it_rows = await db_session.scalar(select(func.count()).select_from(ITServiceMember))
        admin_rows = await db_session.scalar(select(func.count()).select_from(Administrator))
        assert it_rows == 0
        assert admin_rows == 1

    async def test_teacher_role_is_not_convertible(self, db_session: AsyncSession, teacher_user, it_user):
        with pytest.raises(BusinessRuleViolation) as exc_info:
            await user_service.update(db_session, teacher_user.id, UserUpdate(role=UserRole.ADMIN))
        assert exc_info.value.details == {"rule": "teacher_role_change"}

        with pytest.raises(BusinessRuleViolation):
            await user_service.update(db_session, it_user.id, UserUpdate(role=UserRole.TEACHER))
        assert (await user_service.get(db_session, it_user.id)).role == UserRole.IT_SERVICE


class TestTeacherOperations:

    async def test_create_teacher_with_profile(self, db_session: AsyncSession):
        user = await user_service.create_teacher(db_session, teacher_data())

        assert user.role == UserRole.TEACHER
        assert user.teacher.employee_number == "EMP-00042"
        assert user.teacher.office == "C-101"

    async def test_duplicate_employee_number(self, db_session: AsyncSession):
        await user_service.create_teacher(db_session, teacher_data())

        with pytest.raises(ConflictError) as exc_info:
            await user_service.create_teacher(db_session, teacher_data(email="other@example.com"))
        assert exc_info.value.details == {"field": "employee_number"}

    async def test_get_teacher_rejects_other_roles(self, db_session: AsyncSession, it_user):
        with pytest.raises(NotFoundError) as exc_info:
            await user_service.get_teacher(db_session, it_user.id)
        assert exc_info.value.code == "TEACHER_NOT_FOUND"

    async def test_list_teachers_skips_inactive(self, db_session: AsyncSession, teacher_user, other_teacher):
        await user_service.deactivate(db_session, other_teacher.id)

        teachers = await user_service.list_teachers(db_session)

        assert [t.id for t in teachers] == [teacher_user.id]
