import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import JSON, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from catalog.core.config import get_settings
from catalog.core.exceptions import InternalException

logger = logging.getLogger("catalog.db")

# SQLSTATE cho serialization_failure / deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


class CustomBase:
    """Base class cho tất cả các model."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"


Base = declarative_base(cls=CustomBase)

# JSON document column: JSONB trên PostgreSQL, JSON ở các dialect khác
JSONDocument = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), "postgresql"
)


def _engine_options(url: str) -> Dict[str, Any]:
    settings = get_settings()
    options: Dict[str, Any] = {"echo": settings.DB_ECHO, "future": True}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_recycle=settings.DATABASE_POOL_RECYCLE,
            pool_pre_ping=True,
        )
    return options


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@lru_cache()
def get_engine() -> AsyncEngine:
    """Engine cho write path."""
    url = get_settings().DATABASE_URL
    return create_async_engine(url, **_engine_options(url))


@lru_cache()
def get_read_engine() -> AsyncEngine:
    """Engine cho read path (có thể trỏ tới replica)."""
    settings = get_settings()
    if settings.READ_DATABASE_URL == settings.DATABASE_URL:
        return get_engine()
    url = settings.READ_DATABASE_URL
    return create_async_engine(url, **_engine_options(url))


@lru_cache()
def get_session_factory() -> async_sessionmaker:
    return create_session_factory(get_engine())


@lru_cache()
def get_read_session_factory() -> async_sessionmaker:
    return create_session_factory(get_read_engine())


def is_serialization_failure(exc: BaseException) -> bool:
    """True nếu lỗi DB là xung đột serialization có thể retry."""
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return sqlstate in RETRYABLE_SQLSTATES


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker,
    isolation_level: Optional[str] = None,
    retry_on_conflict: bool = False,
) -> AsyncIterator[AsyncSession]:
    """
    Mở một unit of work: commit khi thành công, rollback khi có bất kỳ lỗi nào.

    Args:
        session_factory: Factory tạo AsyncSession
        isolation_level: Isolation level cho riêng transaction này
        retry_on_conflict: Để lỗi serialization/deadlock đi ra nguyên dạng
            cho caller tự retry

    Raises:
        InternalException: Khi gặp lỗi lưu trữ không mong đợi
    """
    async with session_factory() as session:
        try:
            if isolation_level:
                await session.connection(
                    execution_options={"isolation_level": isolation_level}
                )
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            if retry_on_conflict and is_serialization_failure(e):
                raise
            logger.error(f"Database error, transaction rolled back: {str(e)}")
            raise InternalException(detail="Database error") from e
        except BaseException:
            await session.rollback()
            raise


@asynccontextmanager
async def read_only(session_factory: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    """
    Session chỉ đọc; không bao giờ commit.

    Đóng session (không rollback) để các object đã tải vẫn giữ nguyên thuộc tính.
    """
    async with session_factory() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(f"Database read error: {str(e)}")
            raise InternalException(detail="Database error") from e


async def check_database_connection() -> bool:
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {str(e)}")
        return False


async def dispose_engines() -> None:
    await get_engine().dispose()
    read_engine = get_read_engine()
    if read_engine is not get_engine():
        await read_engine.dispose()
