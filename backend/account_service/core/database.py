import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from account_service.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """Owns the async engine and session factory for one application."""

    def __init__(self, settings: Settings):
        self.url = settings.DATABASE_URL
        engine_kwargs = {"pool_pre_ping": True}
        if self.url.startswith("sqlite"):
            # In-memory SQLite must share one connection
            engine_kwargs = {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        self.engine = create_async_engine(self.url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    async def check_connection(self) -> None:
        """Ping the database, retrying while it comes up."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")

    async def create_all(self) -> None:
        # Importing the models registers them on Base.metadata
        from account_service import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session bound to the application's database."""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
