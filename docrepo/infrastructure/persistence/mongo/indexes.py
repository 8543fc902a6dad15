"""MongoDB index definitions.

Indexes by collection:
- users: email (unique), created_at

Every managed collection gets a created_at index because it is the
default sort key of DocumentRepository.get_all().  Call ensure_indexes()
once on application startup; create_index is idempotent.
"""

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, IndexModel

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"

INDEXES: dict[str, list[IndexModel]] = {
    USERS_COLLECTION: [
        IndexModel([("email", ASCENDING)], unique=True, name="uq_users_email"),
        IndexModel([("created_at", DESCENDING)], name="ix_users_created_at"),
    ],
}


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    for collection_name, indexes in INDEXES.items():
        names = await database[collection_name].create_indexes(indexes)
        logger.info("Ensured indexes on %s: %s", collection_name, ", ".join(names))
