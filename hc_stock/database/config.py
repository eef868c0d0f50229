"""
HC Stock - Database Connection

Async SQLAlchemy engine, session factory and the FastAPI session dependency.
"""
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from hc_stock.config.settings import settings
from hc_stock.utils.logger import get_logger
from hc_stock.utils.retry import RetryConfig, retry_with_backoff_async

logger = get_logger(__name__)

# Database Engine
engine = create_async_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=False,
)

# Session Factory
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

# Base Model
Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency for getting DB session"""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """Create all tables (development helper; production uses alembic)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@retry_with_backoff_async(config=RetryConfig(max_retries=settings.db_connect_retries, base_delay=1.0))
async def check_connection() -> None:
    """Run SELECT 1 against the database, retrying transient connection errors"""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection established")
