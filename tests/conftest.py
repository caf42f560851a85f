import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["LOG_FILE"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from coastwatch.core.database import Base, get_db
from coastwatch.models.user import Role
from coastwatch.services.auth import AuthService
import main


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    main.app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test") as client:
        yield client
    main.app.dependency_overrides.clear()


@pytest.fixture
async def citizen(db):
    user, token = await AuthService.register(db, "alice@example.com", "s3cret-pass", name="Alice")
    return user


@pytest.fixture
async def official(db):
    user, token = await AuthService.register(
        db, "bob@example.com", "s3cret-pass", name="Bob", role=Role.OFFICIAL.value
    )
    return user


@pytest.fixture
async def bystander(db):
    user, token = await AuthService.register(db, "carol@example.com", "s3cret-pass", name="Carol")
    return user


@pytest.fixture
def auth_headers():
    def make(user_id: int) -> dict:
        return {"Authorization": f"Bearer {AuthService.issue_token(user_id)}"}
    return make
