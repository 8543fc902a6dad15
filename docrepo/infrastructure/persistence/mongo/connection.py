"""MongoDB client lifecycle via Motor.

This module provides:
- A process-wide AsyncIOMotorClient created by init_mongo()
- Database access for repository factories
- Health check and connection info utilities
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from docrepo.infrastructure.config import Settings, get_settings

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_database_name: Optional[str] = None


def init_mongo(settings: Optional[Settings] = None) -> AsyncIOMotorClient:
    """
    Create the MongoDB client.  Motor connects lazily, so this never blocks.
    Calling it again returns the existing client.
    """
    global _client, _database_name

    if _client is None:
        settings = settings or get_settings()
        _client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
        _database_name = settings.mongodb_database
        logger.info("MongoDB client created for %s", _sanitize_mongodb_url(settings.mongodb_url))
    return _client


def close_mongo() -> None:
    """
    Close the MongoDB client.
    """
    global _client, _database_name
    if _client is not None:
        _client.close()
        _client = None
        _database_name = None


def get_client() -> AsyncIOMotorClient:
    """
    Get the MongoDB client instance.
    """
    if _client is None:
        raise RuntimeError("MongoDB not initialized. Call init_mongo() first.")
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """
    Get the configured MongoDB database.
    """
    return get_client()[_database_name]


async def check_mongo_connection() -> bool:
    """
    Check if MongoDB answers a ping.
    """
    if _client is None:
        return False

    try:
        await _client.admin.command("ping")
        return True
    except PyMongoError:
        logger.warning("MongoDB ping failed", exc_info=True)
        return False


def get_mongo_info(settings: Optional[Settings] = None) -> dict[str, Any]:
    """
    Get connection information and status, safe for logs.
    """
    settings = settings or get_settings()
    return {
        "status": "connected" if _client is not None else "disconnected",
        "url": _sanitize_mongodb_url(settings.mongodb_url),
        "database": settings.mongodb_database,
    }


def _sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" not in credentials:
        return url
    username = credentials.split(":", 1)[0]
    return f"{protocol}://{username}:***@{host}"
