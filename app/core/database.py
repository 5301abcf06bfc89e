import logging
from typing import AsyncGenerator
from sqlmodel import SQLModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.exceptions import StorageFailure

logger = logging.getLogger(__name__)

# Async SQLModel engine + session
engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True)
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db() -> None:
    """Run SQLModel metadata.create_all() using an async connection.
    Note: in production, Alembic migrations should manage schema. This helper
    is useful for local dev when INIT_DB_ON_START is enabled.
    """
    import app.models  # noqa: F401  (register tables on the metadata)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an AsyncSession."""
    async with AsyncSessionLocal() as session:
        yield session


async def commit_or_fail(session: AsyncSession) -> None:
    """Commit the unit of work, turning driver/ORM errors into StorageFailure.

    No compensation is attempted beyond rolling back the session.
    """
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Commit failed", extra={"error": str(exc)})
        raise StorageFailure("The storage layer rejected the operation") from exc
