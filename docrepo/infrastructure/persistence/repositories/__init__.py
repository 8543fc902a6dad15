"""Repository wiring for both storage backends.

Exports the Repositories bundle and one factory per backend for use at
the application boundary (FastAPI dependency injection, workers, scripts).
"""

from __future__ import annotations

from dataclasses import dataclass

from motor.motor_asyncio import AsyncIOMotorDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from docrepo.domain.repositories import UserRepository
from docrepo.infrastructure.persistence.models import UserRow
from docrepo.infrastructure.persistence.mongo import USERS_COLLECTION, MongoDocumentCollection
from docrepo.infrastructure.persistence.sql import SqlDocumentCollection


@dataclass
class Repositories:
    """All repository instances bound to a single session or database."""

    users: UserRepository


def get_sql_repositories(session: AsyncSession) -> Repositories:
    """Construct all repositories bound to the given session.

    Intended for use as a FastAPI dependency:

        async def handler(
            session: AsyncSession = Depends(get_session),
        ) -> ...:
            repos = get_sql_repositories(session)
            user = await repos.users.get_one_by_id(user_id)
    """
    return Repositories(
        users=UserRepository(SqlDocumentCollection(session, UserRow)),
    )


def get_mongo_repositories(database: AsyncIOMotorDatabase) -> Repositories:
    """Construct all repositories bound to the given Motor database.

        repos = get_mongo_repositories(get_database())
        await repos.users.create({"email": "a@example.com", "name": "A"})
    """
    return Repositories(
        users=UserRepository(MongoDocumentCollection(database[USERS_COLLECTION])),
    )


__all__ = [
    "Repositories",
    "get_sql_repositories",
    "get_mongo_repositories",
]
