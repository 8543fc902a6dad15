"""SQL backend: SQLAlchemy collection adapter and error classifier."""

from .collection import SqlDocumentCollection, classify_sql_error

__all__ = [
    "SqlDocumentCollection",
    "classify_sql_error",
]
