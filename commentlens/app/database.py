# commentlens/app/database.py
"""
Database Configuration and Session Management
Uses SQLAlchemy with async support
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from commentlens.app.config import get_config
from commentlens.app.models import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Owns the async engine and session factory

    The engine is created lazily so importing this module never opens a
    connection.
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self._url = url
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def url(self) -> str:
        return self._url or get_config().database.url

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            echo = self._echo if self._echo is not None else get_config().database.echo
            kwargs = {"echo": echo}
            if ":memory:" in self.url:
                # One shared connection, otherwise every session sees an empty DB
                kwargs["poolclass"] = StaticPool
            self._engine = create_async_engine(self.url, **kwargs)
            self._session_factory = async_sessionmaker(
                self._engine, class_=AsyncSession, expire_on_commit=False
            )
            logger.info(f"🗄️  Database engine created: {self.url.split('/')[-1]}")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker:
        if self._session_factory is None:
            _ = self.engine
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session, rolling back if the block raises"""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create all tables defined by models"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ Database tables created successfully")

    async def drop_tables(self) -> None:
        """Drop all tables (development/testing only)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("⚠️  All tables dropped")

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            return result.scalar() == 1

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("🔌 Database connections closed")


db_manager = DatabaseManager()

