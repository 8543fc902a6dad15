"""Storage collaborator interface.

A DocumentCollection is one named collection (or table) in one backend.
It speaks plain dicts: every document it returns carries its identifier
under "_id" as a str, whatever the backend's native identifier type is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from docrepo.domain.errors import ErrorKind
from docrepo.domain.models.query import Filter, QueryOptions, SaveOptions, UpdateOptions


class DocumentCollection(ABC):
    """Backend-neutral access to a single collection."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Collection or table name, used in log records."""

    @abstractmethod
    def parse_id(self, value: Any) -> Any:
        """Convert an external identifier to the native type.

        Raises InvalidIdentifierError when the value cannot name a document.
        """

    @abstractmethod
    async def insert(self, fields: Mapping[str, Any], options: SaveOptions) -> dict[str, Any]:
        """Insert a document and return it as stored."""

    @abstractmethod
    async def find(self, filter: Filter, options: QueryOptions) -> list[dict[str, Any]]:
        """Return detached copies of all matching documents."""

    @abstractmethod
    async def find_one(self, filter: Filter, options: QueryOptions) -> dict[str, Any] | None:
        """Return the first matching document in options' sort order, or None."""

    @abstractmethod
    async def find_one_and_update(
        self, document_id: str, changes: Mapping[str, Any], options: UpdateOptions
    ) -> dict[str, Any] | None:
        """Atomically set fields on one document and return the updated version, or None."""

    @abstractmethod
    async def delete_one(self, document_id: str) -> bool:
        """Delete one document and return whether the store acknowledged the request."""

    @abstractmethod
    async def count(self, filter: Filter) -> int:
        """Return the number of matching documents."""

    @abstractmethod
    def classify_error(self, exc: BaseException) -> ErrorKind:
        """Sort a backend exception into an ErrorKind."""
