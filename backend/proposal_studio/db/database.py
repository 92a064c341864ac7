from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool
from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.core.config import settings

# Pool configuration for serverless Postgres
DB_POOL_SIZE = 5
MAX_OVERFLOW = 10
POOL_RECYCLE = 300  # seconds
POOL_PRE_PING = True

DATABASE_URI = str(settings.ASYNC_DATABASE_URI)

if DATABASE_URI.startswith("sqlite"):
    # Local and test runs on aiosqlite; the dialect picks its own pool.
    engine = create_async_engine(DATABASE_URI, echo=False)
else:
    engine = create_async_engine(
        DATABASE_URI,
        echo=False,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=DB_POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_recycle=POOL_RECYCLE,
        pool_pre_ping=POOL_PRE_PING,
    )

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
