from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker
from coastwatch.core.config import settings
from contextlib import asynccontextmanager
from datetime import datetime, timezone


def async_url(url: str) -> str:
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


engine = create_async_engine(async_url(settings.DATABASE_URL), echo=settings.DATABASE_ECHO)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
)

Base = declarative_base()

@asynccontextmanager
async def get_async_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

async def get_db():
    """Request-scoped session for FastAPI dependencies."""
    async with get_async_db() as session:
        yield session

def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)
