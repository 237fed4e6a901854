"""
Unit Tests for department, room and software services
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BusinessRuleViolation, ConflictError, NotFoundError, ValidationError
from app.models.enums import RoomType
from app.schemas.infrastructure import DepartmentCreate, DepartmentUpdate, RoomCreate, RoomUpdate
from app.schemas.software import SoftwareCreate, SoftwareUpdate
from app.services.department_service import department_service
from app.services.room_service import room_service, check_department_pairing
from app.services.software_service import software_service


class TestDepartmentService:

    async def test_create_and_list(self, db_session: AsyncSession):
        await department_service.create(db_session, DepartmentCreate(name="Physics", code="PHY"))
        await department_service.create(db_session, DepartmentCreate(name="Chemistry", code="CHE"))

        departments = await department_service.list_departments(db_session)

        assert [d.name for d in departments] == ["Chemistry", "Physics"]

    async def test_duplicate_code(self, db_session: AsyncSession, department):
        with pytest.raises(ConflictError) as exc_info:
            await department_service.create(db_session, DepartmentCreate(name="Informatics", code="CS"))
        assert exc_info.value.details == {"field": "code"}

    async def test_duplicate_name(self, db_session: AsyncSession, department):
        with pytest.raises(ConflictError) as exc_info:
            await department_service.create(db_session, DepartmentCreate(name="Computer Science", code="INF"))
        assert exc_info.value.details == {"field": "name"}

    async def test_update_keeps_own_code(self, db_session: AsyncSession, department):
        updated = await department_service.update(
            db_session, department.id, DepartmentUpdate(code="CS", description="Renamed labs")
        )

        assert updated.description == "Renamed labs"

    async def test_cannot_delete_department_with_rooms(self, db_session: AsyncSession, department, rooms):
        with pytest.raises(ConflictError):
            await department_service.delete(db_session, department.id)

    async def test_delete_empty_department(self, db_session: AsyncSession):
        department = await department_service.create(db_session, DepartmentCreate(name="History", code="HIS"))

        await department_service.delete(db_session, department.id)

        with pytest.raises(NotFoundError):
            await department_service.get(db_session, department.id)

    async def test_list_rooms(self, db_session: AsyncSession, department, rooms):
        department_rooms = await department_service.list_rooms(db_session, department.id)

        assert [room.name for room in department_rooms] == ["Lab A", "Lab B"]


class TestRoomService:

    def test_pairing_rule(self):
        check_department_pairing(RoomType.DEPARTMENTAL, "dep-1")
        check_department_pairing(RoomType.SHARED, None)
        with pytest.raises(BusinessRuleViolation):
            check_department_pairing(RoomType.DEPARTMENTAL, None)
        with pytest.raises(BusinessRuleViolation):
            check_department_pairing(RoomType.SHARED, "dep-1")

    async def test_create_with_installed_software(self, db_session: AsyncSession, department, software):
        room = await room_service.create(db_session, RoomCreate(
            name="Lab C",
            capacity=16,
            type=RoomType.DEPARTMENTAL,
            department_id=department.id,
            software_ids=[software.id],
        ))

        assert room.department.code == "CS"
        assert [s.id for s in room.software] == [software.id]
        assert await software_service.is_installed_in(db_session, room.id, software.id) is True

    async def test_software_ids_are_case_insensitive(self, db_session: AsyncSession, department, software):
        room = await room_service.create(db_session, RoomCreate(
            name="Lab D",
            capacity=12,
            type=RoomType.DEPARTMENTAL,
            department_id=department.id,
            software_ids=[software.id.upper(), software.id],
        ))

        assert [s.id for s in room.software] == [software.id]

    async def test_unknown_department(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await room_service.create(db_session, RoomCreate(
                name="Lab Z",
                capacity=10,
                type=RoomType.DEPARTMENTAL,
                department_id="00000000-0000-0000-0000-000000000000",
            ))

    async def test_switching_to_shared_requires_detaching(self, db_session: AsyncSession, rooms):
        with pytest.raises(BusinessRuleViolation):
            await room_service.update(db_session, rooms[0].id, RoomUpdate(type=RoomType.SHARED))

        room = await room_service.update(
            db_session, rooms[0].id, RoomUpdate(type=RoomType.SHARED, department_id=None)
        )
        assert room.type == RoomType.SHARED
        assert room.department_id is None

    async def test_filter_by_type(self, db_session: AsyncSession, rooms):
        shared = await room_service.list_rooms(db_session, RoomType.SHARED)

        assert [room.name for room in shared] == ["Amphi 1"]

    async def test_room_in_use_cannot_be_deleted(self, db_session: AsyncSession, make_request, rooms):
        await make_request()

        with pytest.raises(ConflictError):
            await room_service.delete(db_session, rooms[0].id)
        await room_service.delete(db_session, rooms[2].id)


class TestSoftwareService:

    async def test_version_is_normalized(self, db_session: AsyncSession):
        software = await software_service.create(
            db_session, SoftwareCreate(name="R", publisher="R Foundation", version="4.03.1")
        )

        assert software.version == "4.3.1"
        assert software.active is True

    async def test_invalid_version(self, db_session: AsyncSession):
        with pytest.raises(ValidationError) as exc_info:
            await software_service.create(db_session, SoftwareCreate(name="R", version="4.3"))
        assert exc_info.value.details == {"field": "version"}

    async def test_duration_limit(self, db_session: AsyncSession):
        with pytest.raises(ValidationError):
            await software_service.create(
                db_session, SoftwareCreate(name="R", version="4.3.1", max_duration_days=400)
            )

    async def test_same_name_and_version_conflict(self, db_session: AsyncSession, software):
        with pytest.raises(ConflictError):
            await software_service.create(db_session, SoftwareCreate(name="MATLAB", version="2.4.1"))

        newer = await software_service.create(db_session, SoftwareCreate(name="MATLAB", version="2.5.0"))
        assert newer.version == "2.5.0"

    async def test_update_to_existing_version(self, db_session: AsyncSession, software):
        newer = await software_service.create(db_session, SoftwareCreate(name="MATLAB", version="2.5.0"))

        with pytest.raises(ConflictError):
            await software_service.update(db_session, newer.id, SoftwareUpdate(version="2.4.1"))

    async def test_deactivate_keeps_entry(self, db_session: AsyncSession, software, second_software):
        await software_service.deactivate(db_session, software.id)

        active = await software_service.list_software(db_session, active=True)
        assert [s.name for s in active] == ["Python"]
        assert (await software_service.get(db_session, software.id)).active is False

    async def test_search_by_name(self, db_session: AsyncSession, software, second_software):
        found = await software_service.list_software(db_session, search="pyth")

        assert [s.id for s in found] == [second_software.id]
