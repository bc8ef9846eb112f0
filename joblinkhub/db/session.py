"""Async engine and per-request sessions."""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from joblinkhub.config import Settings, settings
from joblinkhub.db.base import Base


def build_engine(settings: Settings) -> AsyncEngine:
    """Engine for DATABASE_URL; pool sizing only applies to server databases."""
    options: Dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if make_url(settings.DATABASE_URL).get_backend_name() != "sqlite":
        options["pool_size"] = settings.DATABASE_POOL_SIZE
        options["max_overflow"] = settings.DATABASE_MAX_OVERFLOW
    return create_async_engine(settings.DATABASE_URL, **options)


engine = build_engine(settings)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request: committed on success, rolled back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create tables directly when running in DEBUG; otherwise Alembic owns the schema."""
    if not settings.DEBUG:
        return

    from joblinkhub.models import profile, record, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
