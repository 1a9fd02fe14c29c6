import asyncio
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.pool import NullPool, StaticPool

from src.core import get_settings

# Get application settings
settings = get_settings()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; in-memory SQLite must share one connection"""
    if database_url.startswith("sqlite") and (":memory:" in database_url or database_url.endswith("://")):
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(database_url, echo=echo, poolclass=NullPool)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
async_session_factory = build_session_factory(engine)

# Single writer for the whole store: every request session runs under it.
# Created lazily in the running loop: on Python 3.9 asyncio.Lock binds to its creation loop
_store_lock: Optional[asyncio.Lock] = None
_store_lock_loop: Optional[asyncio.AbstractEventLoop] = None


def get_store_lock() -> asyncio.Lock:
    global _store_lock, _store_lock_loop
    loop = asyncio.get_running_loop()
    if _store_lock is None or _store_lock_loop is not loop:
        _store_lock = asyncio.Lock()
        _store_lock_loop = loop
    return _store_lock


# Dependency for FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_store_lock():
        async with async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


async def create_tables(bind: AsyncEngine) -> None:
    # Import here to avoid circular imports
    from src.db.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Initialize database
async def init_db() -> None:
    await create_tables(engine)
