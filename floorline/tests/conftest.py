import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from floorline.db.base import Base
from floorline.db.models import *  # noqa: F401,F403 - ensure all models loaded

# In-memory SQLite shared across the connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session):
    from floorline.api.deps import get_db
    from floorline.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def installer(db_session):
    from floorline.db.models.installer import Installer

    record = Installer(
        id=uuid.uuid4(),
        installer_name=f"Installer {uuid.uuid4().hex[:6]}",
        contact_email="crew@test.com",
        color="#336699",
    )
    db_session.add(record)
    await db_session.flush()
    await db_session.refresh(record)
    return record


@pytest.fixture
async def second_installer(db_session):
    from floorline.db.models.installer import Installer

    record = Installer(id=uuid.uuid4(), installer_name="Second Crew")
    db_session.add(record)
    await db_session.flush()
    await db_session.refresh(record)
    return record
