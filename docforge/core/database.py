"""Database engine, session factory and lifecycle management.

A single ``DatabaseClient`` is built at application startup and handed to
request handlers through FastAPI dependencies; nothing here opens a
connection at import time.
"""

from collections.abc import AsyncGenerator
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from docforge.core.config import DatabaseSettings
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def create_engine_from_settings(db_settings: DatabaseSettings) -> AsyncEngine:
    """Create the async engine described by the database settings."""
    url = db_settings.connection_url
    kwargs = {"echo": db_settings.echo, "future": True}
    if url.startswith("postgresql+asyncpg"):
        kwargs.update(
            pool_size=db_settings.pool_size,
            max_overflow=db_settings.max_overflow,
            # Disable prepared statement cache for PgBouncer compatibility
            connect_args={"statement_cache_size": 0},
        )
    return create_async_engine(url, **kwargs)


class DatabaseClient:
    """Database client with connection, session and schema management."""

    def __init__(self, engine: AsyncEngine):
        """Initialize database client.

        Args:
            engine: SQLAlchemy async engine
        """
        self.engine = engine
        self.session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        self._connected = False

    @classmethod
    def from_settings(cls, db_settings: DatabaseSettings) -> "DatabaseClient":
        return cls(create_engine_from_settings(db_settings))

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that is closed when the caller is done with it."""
        async with self.session_maker() as session:
            try:
                yield session
            finally:
                await session.close()

    async def connect(self) -> bool:
        """Test database connection."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            self._connected = True
            LOGGER.info("Database connection successful")
            return True
        except Exception:
            self._connected = False
            LOGGER.error("Database connection failed", exc_info=True)
            raise

    async def disconnect(self) -> None:
        """Dispose of the engine's connection pool."""
        await self.engine.dispose()
        self._connected = False
        LOGGER.info("Database connection closed")

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        # Models must be registered on Base.metadata before create_all.
        from docforge.database import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        LOGGER.info("Database tables created/verified successfully")

    async def health_check(self) -> dict:
        """Check database health."""
        try:
            async with self.engine.connect() as conn:
                val = await conn.scalar(text("SELECT 1"))
            self._connected = True
            return {
                "status": "healthy",
                "connected": True,
                "latency_test": "passed" if val == 1 else "failed",
            }
        except Exception as e:
            self._connected = False
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {
                "status": "unhealthy",
                "connected": False,
                "error": str(e),
            }

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._connected


async def init_database(client: DatabaseClient, create_tables: bool = True) -> None:
    """Verify connectivity and optionally create the schema."""
    LOGGER.info("Initializing database connection...")
    await client.connect()
    if create_tables:
        await client.create_tables()


async def close_database(client: Optional[DatabaseClient]) -> None:
    if client is not None:
        await client.disconnect()
