from typing import AsyncGenerator, Awaitable, Callable, Dict
import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.core.security import token_manager
from bookreview.crud.user_crud import user_repository
from bookreview.db.session import enable_unicode_lower, get_session
from bookreview.main import app
from bookreview.models.book_model import Book  # noqa: F401  (registers the table)
from bookreview.models.review_model import Review  # noqa: F401
from bookreview.models.user_model import User

# --- Test Database Setup ---
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# --- Pytest Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh in-memory database per test, so tests never see each other's rows.
    """
    engine = enable_unicode_lower(
        create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an HTTP client for API testing, overriding the DB dependency.
    """

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Test Data Fixtures ---


async def _create_user(db_session: AsyncSession, username: str = None) -> User:
    user = User(username=username or f"user_{uuid.uuid4().hex[:8]}")
    return await user_repository.create(db=db_session, obj_in=user)


@pytest.fixture
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Returns a coroutine function that inserts a user row."""

    async def factory(username: str = None) -> User:
        return await _create_user(db_session, username)

    return factory


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Returns a function building a bearer header with a valid access token."""

    def build(user: User) -> Dict[str, str]:
        token = token_manager.create_access_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest_asyncio.fixture
async def sample_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "reader_one")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "reader_two")
