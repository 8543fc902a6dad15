"""SQL backend plumbing: declarative base, lazily built engine, session dependency.

Nothing connects at import time; the engine is created on the first call
to get_engine() from the configured database_url.
"""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from docrepo.infrastructure.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for the tables behind SqlDocumentCollection."""


@lru_cache
def get_engine() -> AsyncEngine:
    return create_async_engine(get_settings().database_url, pool_pre_ping=True)


@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=get_engine(), expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session in one transaction; commits on success, rolls back on error.

    Repository writes run in savepoints inside this transaction, so a
    ConflictError leaves the session usable.
    """
    async with get_sessionmaker()() as session:
        async with session.begin():
            yield session
