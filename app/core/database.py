"""Async database engine, session factory and store-call guard."""

import asyncio
import functools
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.core.config import get_settings
from app.core.errors import TransientStoreError

logger = logging.getLogger(__name__)

settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
)

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

P = ParamSpec("P")
T = TypeVar("T")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create all tables. Use Alembic migrations in production."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


def store_call(fn: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Bound a store operation by the configured timeout.

    Driver errors and timeouts are re-raised as TransientStoreError.
    """

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            async with asyncio.timeout(get_settings().store_timeout_seconds):
                return await fn(*args, **kwargs)
        except TimeoutError as exc:
            logger.warning("Store call %s timed out", fn.__qualname__)
            raise TransientStoreError(f"{fn.__qualname__} timed out") from exc
        except SQLAlchemyError as exc:
            logger.warning("Store call %s failed: %s", fn.__qualname__, exc)
            raise TransientStoreError(f"{fn.__qualname__} failed") from exc

    return wrapper
