from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
)

from .models import Base


def build_engine(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create the async engine. SQLite needs check_same_thread disabled."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_async_engine(database_url, connect_args=connect_args, echo=echo, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False
    )


async def create_tables(engine: AsyncEngine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: one session per request, taken from the factory that
    create_app() put on app.state.
    """
    session_factory: Optional[async_sessionmaker] = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Database is not configured on this application")
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
