"""Database connection and session management using SQLAlchemy async ORM"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from scholarlink import config
from scholarlink.services.exceptions import StorageError

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Convert sync postgresql:// URLs to the async postgresql+asyncpg:// driver"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def create_engine(url: str) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Server databases get a tuned connection pool:
    pool_size=20 connections kept alive, max_overflow=30 extra under load,
    pool_recycle=3600 to avoid stale connections. SQLite keeps driver defaults.
    """
    url = normalize_database_url(url)
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False)

    return create_async_engine(
        url,
        echo=False,  # Set to True for SQL query logging during development
        pool_size=20,
        max_overflow=30,
        pool_recycle=3600,
        pool_pre_ping=True,  # Verify connection health before using
    )


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """Session factory shared by every service; objects stay usable after commit"""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


DATABASE_URL = normalize_database_url(config.DATABASE_URL)

engine = create_engine(DATABASE_URL)

AsyncSessionLocal = create_session_factory(engine)

# Base class for declarative models
Base = declarative_base()


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker,
    db: Optional[AsyncSession] = None,
) -> AsyncIterator[AsyncSession]:
    """
    Yield a session inside a transaction.

    If `db` is supplied the caller owns the transaction and it is yielded
    unchanged. Otherwise a new session is opened, committed on success and
    rolled back on error; database failures surface as StorageError.
    """
    if db is not None:
        yield db
        return

    async with session_factory() as session:
        try:
            async with session.begin():
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Database operation failed: {e}", exc_info=True)
            raise StorageError("The data store could not complete the operation") from e


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Create all tables from model metadata (local development and tests)"""
    import scholarlink.models  # noqa: F401  registers every table on Base.metadata

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(session_factory: async_sessionmaker = AsyncSessionLocal) -> bool:
    """Return True if the database answers a trivial query"""
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database ping failed: {e}")
        return False
