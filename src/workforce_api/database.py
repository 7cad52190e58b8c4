"""Database connection and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from workforce_api.config import Settings, get_settings

settings = get_settings()


def _engine_options(config: Settings) -> dict[str, Any]:
    """Build engine keyword arguments for the configured backend."""
    if config.is_sqlite:
        # SQLite uses a static/single-file pool; pool sizing does not apply
        return {"connect_args": {"check_same_thread": False}, "echo": False}
    return {
        "pool_size": config.database_pool_size,
        "max_overflow": config.database_max_overflow,
        # Validate connections before checkout to detect stale connections
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        # Never echo SQL statements, they carry national identifiers
        "echo": False,
    }


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(settings.async_database_url, **_engine_options(settings))
if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
