"""Async engine, sessions and schema creation."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import settings
from .models import Base

URL_SCHEMES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


def to_async_url(url: str) -> str:
    """Point plain Postgres URLs (as Supabase hands them out) at asyncpg."""
    for scheme, async_scheme in URL_SCHEMES.items():
        if url.startswith(scheme):
            return async_scheme + url[len(scheme):]
    return url


class DatabaseSessionManager:
    """
    Owns the engine and hands out sessions.

    One session is one database transaction: a wallet balance change and
    its ledger row, or a repayment and every lender credit it produces,
    are committed together or not at all.
    """

    def __init__(self):
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def init(self, database_url: str | None = None):
        url = to_async_url(database_url or settings.database_url)

        engine_kwargs: Dict[str, Any] = {"echo": settings.debug}
        # SQLite (tests, local runs) has no connection pool to size
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=True,
            )

        self._engine = create_async_engine(url, **engine_kwargs)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._engine

    async def create_tables(self):
        """Create any missing tables. Existing tables are left untouched."""
        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self):
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Commit on success, roll back on any exception."""
        self._require_engine()

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


db_manager = DatabaseSessionManager()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one transactional session per request."""
    async with db_manager.session() as session:
        yield session
