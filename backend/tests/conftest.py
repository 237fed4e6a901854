"""
CampusSoft - Test Configuration and Fixtures
"""
import os
from datetime import date
from typing import AsyncGenerator, Awaitable, Callable, List
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['JWT_REFRESH_SECRET_KEY'] = 'test-jwt-refresh-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_access_token, build_token_data
from app.models import (
    User,
    Teacher,
    ITServiceMember,
    Administrator,
    Department,
    Room,
    Software,
    Request,
    UserRole,
    RoomType,
)
from app.schemas.request import RequestCreate
from app.services.request_service import request_service

fake = Faker()

TEST_PASSWORD = 'testpassword123'
ACADEMIC_YEAR = '2025'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


# ==================== Users ====================

async def _create_user(db_session: AsyncSession, role: UserRole, **profile) -> User:
    user = User(
        email=fake.unique.email(),
        last_name=fake.last_name(),
        first_name=fake.first_name(),
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
        is_active=True,
    )
    if role == UserRole.TEACHER:
        user.teacher = Teacher(employee_number=fake.unique.bothify('EMP-#####'), **profile)
    elif role == UserRole.IT_SERVICE:
        user.it_service_member = ITServiceMember()
    elif role == UserRole.ADMIN:
        user.administrator = Administrator()
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token(build_token_data(user))
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def teacher_user(db_session: AsyncSession) -> User:
    """Teacher who owns the requests created by make_request"""
    return await _create_user(db_session, UserRole.TEACHER, office='B-204')


@pytest.fixture
async def other_teacher(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.TEACHER)


@pytest.fixture
async def it_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.IT_SERVICE)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.ADMIN)


@pytest.fixture
def teacher_headers(teacher_user: User) -> dict:
    return _headers(teacher_user)


@pytest.fixture
def other_teacher_headers(other_teacher: User) -> dict:
    return _headers(other_teacher)


@pytest.fixture
def it_headers(it_user: User) -> dict:
    return _headers(it_user)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return _headers(admin_user)


# ==================== Catalog ====================

@pytest.fixture
async def department(db_session: AsyncSession) -> Department:
    department = Department(name='Computer Science', code='CS', description='CS department')
    db_session.add(department)
    await db_session.commit()
    await db_session.refresh(department)
    return department


@pytest.fixture
async def rooms(db_session: AsyncSession, department: Department) -> List[Room]:
    """Two departmental labs and one shared lecture hall"""
    created = [
        Room(name='Lab A', capacity=30, type=RoomType.DEPARTMENTAL, department_id=department.id),
        Room(name='Lab B', capacity=24, type=RoomType.DEPARTMENTAL, department_id=department.id),
        Room(name='Amphi 1', capacity=200, type=RoomType.SHARED),
    ]
    db_session.add_all(created)
    await db_session.commit()
    for room in created:
        await db_session.refresh(room)
    return created


@pytest.fixture
async def software(db_session: AsyncSession) -> Software:
    software = Software(
        name='MATLAB',
        publisher='MathWorks',
        version='2.4.1',
        usage='Numerical computing',
        max_duration_days=365,
        license='Campus',
        active=True,
    )
    db_session.add(software)
    await db_session.commit()
    await db_session.refresh(software)
    return software


@pytest.fixture
async def second_software(db_session: AsyncSession) -> Software:
    software = Software(name='Python', publisher='PSF', version='3.12.0', active=True)
    db_session.add(software)
    await db_session.commit()
    await db_session.refresh(software)
    return software


# ==================== Requests ====================

@pytest.fixture
def make_request(
    db_session: AsyncSession,
    teacher_user: User,
    software: Software,
    rooms: List[Room],
) -> Callable[..., Awaitable[Request]]:
    """
    Factory creating a request through the service layer.

    Defaults to one software in the first two rooms for the teacher_user.
    """
    async def factory(entries=None, academic_year: str = ACADEMIC_YEAR, comment=None) -> Request:
        if entries is None:
            entries = [(software.id, [rooms[0].id, rooms[1].id])]
        data = RequestCreate(
            desired_date=date(2025, 9, 15),
            academic_year=academic_year,
            comment=comment,
            software=[
                {'software_id': software_id, 'room_ids': room_ids}
                for software_id, room_ids in entries
            ],
        )
        return await request_service.create(db_session, data, actor_id=teacher_user.id)

    return factory
