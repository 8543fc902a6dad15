"""Generic repository base interface.

Repository[T] is the root abstraction for all data-access interfaces in
this domain layer.  DocumentRepository (documents.py) is the generic
implementation; storage backends plug in underneath it as
DocumentCollection implementations from docrepo/infrastructure/persistence/.

Design notes:
  - All methods are async to accommodate async drivers (Motor / SQLAlchemy async).
  - T is the domain model type (never a driver document or ORM row).
  - Read operations degrade to [] / None / False on failure; write
    operations raise.  Callers on the read path cannot tell "no match"
    from "backend error" without the logs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from docrepo.domain.models.query import Filter, QueryOptions, SaveOptions, UpdateOptions

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Abstract CRUD and validation interface for one document collection."""

    @abstractmethod
    async def create(self, data: Mapping[str, Any], options: SaveOptions | None = None) -> T:
        """Persist a new document and return it.  Raises ConflictError on a duplicate key."""

    @abstractmethod
    async def get_all(
        self, filter: Filter | None = None, options: QueryOptions | None = None
    ) -> list[T]:
        """Return matching documents, newest first unless options.sort says otherwise."""

    @abstractmethod
    async def get_one_where(self, filter: Filter, options: QueryOptions | None = None) -> T | None:
        """Return the first matching document, or None."""

    @abstractmethod
    async def get_one_by_id(self, document_id: str, options: QueryOptions | None = None) -> T | None:
        """Return the document with the given identifier, or None."""

    @abstractmethod
    async def update_one_by_id(
        self,
        document_id: str,
        data: Mapping[str, Any],
        options: UpdateOptions | None = None,
    ) -> T:
        """Apply a partial update and return the result.  Raises NotFoundError or ConflictError."""

    @abstractmethod
    async def remove_one_by_id(self, document_id: str) -> bool:
        """Delete a document and return the store's acknowledgement."""

    @abstractmethod
    async def count(self, filter: Filter | None = None) -> int:
        """Return the number of matching documents."""

    @abstractmethod
    async def validate_object_ids(self, ids: Sequence[str]) -> bool:
        """Return True iff ids is non-empty and every entry names a distinct stored document."""
