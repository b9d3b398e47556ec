# luxselle/database.py

from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from luxselle.core.config import get_settings

Base = declarative_base()


def normalise_database_url(database_url: str) -> str:
    """Convert postgresql:// to postgresql+asyncpg:// for async support."""
    if database_url.startswith('postgresql://'):
        return database_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
    if database_url.startswith('sqlite://'):
        return database_url.replace('sqlite://', 'sqlite+aiosqlite://', 1)
    return database_url


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    url = normalise_database_url(database_url)
    if url.startswith('sqlite'):
        return create_async_engine(url, echo=echo, future=True)
    return create_async_engine(
        url,
        echo=echo,
        future=True,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=1800,
    )


settings = get_settings()

engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@asynccontextmanager
async def get_session() -> AsyncSession:
    session = async_session()
    try:
        yield session
    finally:
        await session.close()


async def create_all_tables(bind: AsyncEngine = None) -> None:
    """Create every mapped table (development and tests)."""
    # Import models so they register on Base.metadata
    from luxselle import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
