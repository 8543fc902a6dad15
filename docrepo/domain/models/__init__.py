"""Domain model package.

All domain objects are pure Python / Pydantic models with no driver or
ORM dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .documents import Document, StoredDocument
from .enums import Role, SortDirection
from .query import DEFAULT_SORT, Filter, QueryOptions, SaveOptions, UpdateOptions
from .users import User

__all__ = [
    # enums
    "Role",
    "SortDirection",
    # documents
    "Document",
    "StoredDocument",
    # query
    "DEFAULT_SORT",
    "Filter",
    "QueryOptions",
    "SaveOptions",
    "UpdateOptions",
    # users
    "User",
]
