"""Persistence package.

Importing this package registers every ORM mapper with Base.metadata
(required for Alembic autogenerate and SQLAlchemy mapper configuration)
and exports both storage backends and the repository factories.
"""

from docrepo.infrastructure.persistence.models import *  # noqa: F401, F403
from docrepo.infrastructure.persistence.models import __all__ as _orm_all
from docrepo.infrastructure.persistence.mongo import MongoDocumentCollection, classify_mongo_error
from docrepo.infrastructure.persistence.repositories import (
    Repositories,
    get_mongo_repositories,
    get_sql_repositories,
)
from docrepo.infrastructure.persistence.sql import SqlDocumentCollection, classify_sql_error

__all__ = _orm_all + [
    "MongoDocumentCollection",
    "SqlDocumentCollection",
    "classify_mongo_error",
    "classify_sql_error",
    "Repositories",
    "get_mongo_repositories",
    "get_sql_repositories",
]
