"""MongoDB backend: Motor collection adapter, client lifecycle, indexes."""

from .collection import MongoDocumentCollection, classify_mongo_error
from .connection import (
    check_mongo_connection,
    close_mongo,
    get_client,
    get_database,
    get_mongo_info,
    init_mongo,
)
from .indexes import USERS_COLLECTION, ensure_indexes

__all__ = [
    "MongoDocumentCollection",
    "classify_mongo_error",
    "init_mongo",
    "close_mongo",
    "get_client",
    "get_database",
    "check_mongo_connection",
    "get_mongo_info",
    "ensure_indexes",
    "USERS_COLLECTION",
]
