"""Shared SQLAlchemy Base and the async engine used by the catalog repository."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def init_engine(database_url: str, pool_size: int = 10) -> AsyncEngine:
    """Create the process-wide engine. Called once from the app lifespan."""
    global _engine, _session_factory
    kwargs = {"pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        kwargs.update(pool_size=pool_size, pool_recycle=3600)
    _engine = create_async_engine(database_url, **kwargs)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
