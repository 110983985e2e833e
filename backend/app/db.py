from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

_ASYNC_SCHEMES = ("postgresql://", "postgres://")


def async_database_url(url: str) -> str:
    """Hosting providers hand out postgresql:// URLs; asyncpg needs postgresql+asyncpg://."""
    for scheme in _ASYNC_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+asyncpg://" + url[len(scheme):]
    return url


# One engine per process, shared by every request and the scheduler job.
# The pool stays at a single connection outside production (see Settings.db_pool_size).
engine = create_async_engine(
    async_database_url(settings.DATABASE_URL),
    echo=settings.DEBUG,
    pool_size=settings.db_pool_size,
    pool_pre_ping=True,
)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
