import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.core.config import settings

logger = logging.getLogger(__name__)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def enable_unicode_lower(engine: AsyncEngine) -> AsyncEngine:
    """
    Replace SQLite's ASCII-only ``lower()`` on every new connection.

    ``ilike`` compiles to ``lower(x) LIKE lower(y)`` on SQLite, so this makes
    case-insensitive filters fold accented and other non-ASCII letters too.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _register_lower(dbapi_connection, connection_record):
        dbapi_connection.create_function(
            "lower", 1, _unicode_lower, deterministic=True
        )

    return engine


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine; pool settings only apply to server databases."""
    if database_url.startswith("sqlite"):
        return enable_unicode_lower(
            create_async_engine(
                database_url,
                echo=settings.DB_ECHO,
                connect_args={"check_same_thread": False},
            )
        )

    return create_async_engine(
        database_url,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )


engine = build_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """Create all tables. Models must be imported before this runs."""
    from bookreview.models import book_model, review_model, user_model  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured")


async def dispose_engine() -> None:
    await engine.dispose()
    logger.info("Database engine disposed")
