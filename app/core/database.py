from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..shared.models.base import Base
from ..shared.utils.logger import get_logger
from .config import Environment, settings

logger = get_logger(__name__)


engine = create_async_engine(
    settings.DATABASE_URL,
    pool_size=20,
    max_overflow=10,
    pool_timeout=30,
    pool_recycle=3600,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    if settings.ENVIRONMENT in (Environment.LOCAL, Environment.DEV):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        # staging/prod go through alembic only
        logger.info("Skipping auto table creation in %s", settings.ENVIRONMENT.value)


async def check_connection() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.warning(f"Database probe failed: {e}")
        return False
