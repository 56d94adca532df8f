"""
NexByte - Test Configuration and Fixtures
"""
import os
from datetime import datetime, timedelta
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['ENVIRONMENT'] = 'test'
os.environ['DEBUG'] = 'false'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['CERT_SECRET'] = 'test-certificate-secret'
os.environ['CERT_ENC_KEY'] = ''
os.environ['CERT_RENDER_ENABLED'] = 'false'
os.environ['COMPLETION_CHECK_ENABLED'] = 'false'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['SMTP_USER'] = ''
os.environ['SMTP_PASSWORD'] = ''
os.environ['OPENAI_API_KEY'] = 'test-openai-key'
os.environ['GEMINI_API_KEY'] = 'test-gemini-key'
os.environ['UPLOAD_PATH'] = './test_uploads'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_user_token
from app.models.user import User, UserRole, InternshipStatus
from app.models.client import Client
from app.models.internship import Internship, InternshipState
from app.services.internship_completion import internship_completion_service

fake = Faker()

# Test database setup. A file database so separate sessions see each other's commits.
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
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
def session_factory(db_session: AsyncSession):
    """Session factory bound to the test database (tables already created)"""
    return TestSessionLocal


@pytest.fixture
async def client(db_session: AsyncSession, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(internship_completion_service, 'session_factory', TestSessionLocal)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, role: UserRole, password: str, **extra) -> User:
    user = User(
        email=fake.unique.email(),
        hashed_password=get_password_hash(password),
        name=fake.name(),
        role=role,
        is_active=True,
        **extra
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.ADMIN, 'adminpassword123')


@pytest.fixture
async def intern_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.INTERN, 'internpassword123')


@pytest.fixture
async def member_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.MEMBER, 'memberpassword123')


@pytest.fixture
async def client_account(db_session: AsyncSession) -> Client:
    """A Client company record"""
    record = Client(
        client_name=fake.name(),
        contact_person=fake.name(),
        email=fake.unique.email(),
        phone='9876543210',
        project_name='Company Website',
    )
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


@pytest.fixture
async def client_user(db_session: AsyncSession, client_account: Client) -> User:
    """Client-role user linked to client_account"""
    return await _create_user(
        db_session, UserRole.CLIENT, 'clientpassword123', client_id=client_account.id
    )


@pytest.fixture
async def internship(db_session: AsyncSession, intern_user: User) -> Internship:
    """In-progress internship for intern_user"""
    record = Internship(
        intern_id=intern_user.id,
        internship_title='Web Development',
        status=InternshipState.IN_PROGRESS,
        start_date=datetime.utcnow() - timedelta(days=60),
    )
    db_session.add(record)
    await db_session.flush()
    intern_user.internship_status = InternshipStatus.IN_PROGRESS
    intern_user.current_internship_id = record.id
    await db_session.commit()
    await db_session.refresh(record)
    return record


def _headers(user: User) -> dict:
    token = create_user_token(user.id, user.role.value)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return _headers(admin_user)


@pytest.fixture
def intern_auth_headers(intern_user: User) -> dict:
    return _headers(intern_user)


@pytest.fixture
def member_auth_headers(member_user: User) -> dict:
    return _headers(member_user)


@pytest.fixture
def client_auth_headers(client_user: User) -> dict:
    return _headers(client_user)
