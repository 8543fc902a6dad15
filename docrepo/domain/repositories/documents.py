"""Generic document repository.

DocumentRepository[T] implements Repository[T] once, for every backend.
It owns the policy; the DocumentCollection underneath owns the I/O.

Policy:
  - create() stamps created_at and updated_at with a single clock reading.
  - update_one_by_id() never touches _id / id / created_at and always
    refreshes updated_at, whatever the caller sent.
  - Write paths (create, update_one_by_id, remove_one_by_id, count) log
    and raise.  Duplicate keys become ConflictError, a missing update
    target becomes NotFoundError, anything else propagates unchanged.
  - Read paths (get_all, get_one_where, get_one_by_id, validate_object_ids)
    log and fall back to [], None or False.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, TypeVar

from docrepo.domain.errors import (
    ConflictError,
    ErrorClassifier,
    ErrorKind,
    InvalidIdentifierError,
    NotFoundError,
)
from docrepo.domain.models.documents import StoredDocument
from docrepo.domain.models.query import Filter, QueryOptions, SaveOptions, UpdateOptions

from .base import Repository
from .collection import DocumentCollection

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

T = TypeVar("T", bound=StoredDocument)

_IMMUTABLE_FIELDS = frozenset({"_id", "id", "created_at"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentRepository(Repository[T]):
    """Repository over one DocumentCollection, returning instances of ``model``.

    Subclasses usually bind ``model`` as a class attribute:

        class UserRepository(DocumentRepository[User]):
            model = User

    When no logger is given, one named after the concrete subclass is used;
    it stays silent until the application configures logging.
    """

    model: type[T]

    def __init__(
        self,
        collection: DocumentCollection,
        model: type[T] | None = None,
        *,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        classifier: ErrorClassifier | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if model is not None:
            self.model = model
        if getattr(self, "model", None) is None:
            raise TypeError(f"{type(self).__name__} needs a document model")
        self._collection = collection
        self._logger = logger or logging.getLogger(f"{__name__}.{type(self).__name__}")
        self._classify = classifier or collection.classify_error
        self._clock = clock or _utcnow

    @property
    def collection(self) -> DocumentCollection:
        return self._collection

    def _to_model(self, document: Mapping[str, Any], partial: bool = False) -> T:
        if not partial:
            return self.model.model_validate(document)
        # Projected documents lack required fields, so skip validation.  Fields
        # the projection left out stay unset, defaults included.
        instance = self.model.model_construct(**document)
        for name in self.model.model_fields.keys() - instance.model_fields_set:
            instance.__dict__.pop(name, None)
        return instance

    def _extra(self, **context: Any) -> dict[str, Any]:
        return {"collection": self._collection.name, **context}

    # --- write path ---

    async def create(self, data: Mapping[str, Any], options: SaveOptions | None = None) -> T:
        now = self._clock()
        fields = {**data, "created_at": now, "updated_at": now}
        try:
            stored = await self._collection.insert(fields, options or SaveOptions())
        except Exception as exc:
            if self._classify(exc) is ErrorKind.CONFLICT:
                self._logger.warning(
                    "Duplicate key on create in %s", self._collection.name, extra=self._extra()
                )
                raise ConflictError() from exc
            self._logger.error(
                "Failed to create document in %s",
                self._collection.name,
                exc_info=True,
                extra=self._extra(),
            )
            raise
        return self._to_model(stored)

    async def update_one_by_id(
        self,
        document_id: str,
        data: Mapping[str, Any],
        options: UpdateOptions | None = None,
    ) -> T:
        options = options or UpdateOptions()
        changes = {key: value for key, value in data.items() if key not in _IMMUTABLE_FIELDS}
        changes["updated_at"] = self._clock()
        try:
            stored = await self._collection.find_one_and_update(document_id, changes, options)
        except InvalidIdentifierError as exc:
            raise NotFoundError(document_id) from exc
        except Exception as exc:
            kind = self._classify(exc)
            if kind is ErrorKind.CONFLICT:
                self._logger.warning(
                    "Duplicate key on update of %s in %s",
                    document_id,
                    self._collection.name,
                    extra=self._extra(document_id=document_id),
                )
                raise ConflictError() from exc
            if kind is ErrorKind.NOT_FOUND:
                raise NotFoundError(document_id) from exc
            self._logger.error(
                "Failed to update %s in %s",
                document_id,
                self._collection.name,
                exc_info=True,
                extra=self._extra(document_id=document_id),
            )
            raise
        if stored is None:
            raise NotFoundError(document_id)
        return self._to_model(stored, partial=options.projection is not None)

    async def remove_one_by_id(self, document_id: str) -> bool:
        try:
            return await self._collection.delete_one(document_id)
        except Exception:
            self._logger.error(
                "Failed to remove %s from %s",
                document_id,
                self._collection.name,
                exc_info=True,
                extra=self._extra(document_id=document_id),
            )
            raise

    async def count(self, filter: Filter | None = None) -> int:
        try:
            return await self._collection.count(filter or {})
        except Exception:
            self._logger.error(
                "Failed to count documents in %s",
                self._collection.name,
                exc_info=True,
                extra=self._extra(),
            )
            raise

    # --- read path ---

    async def get_all(
        self, filter: Filter | None = None, options: QueryOptions | None = None
    ) -> list[T]:
        options = options or QueryOptions()
        partial = options.projection is not None
        try:
            documents = await self._collection.find(filter or {}, options)
            return [self._to_model(document, partial) for document in documents]
        except Exception:
            self._logger.error(
                "Failed to fetch documents from %s",
                self._collection.name,
                exc_info=True,
                extra=self._extra(),
            )
            return []

    async def get_one_where(self, filter: Filter, options: QueryOptions | None = None) -> T | None:
        options = options or QueryOptions()
        try:
            document = await self._collection.find_one(filter, options)
            if document is None:
                return None
            return self._to_model(document, partial=options.projection is not None)
        except Exception:
            self._logger.error(
                "Failed to fetch document from %s",
                self._collection.name,
                exc_info=True,
                extra=self._extra(),
            )
            return None

    async def get_one_by_id(self, document_id: str, options: QueryOptions | None = None) -> T | None:
        return await self.get_one_where({"_id": document_id}, options)

    async def validate_object_ids(self, ids: Sequence[str]) -> bool:
        # Duplicates are kept: [a, a] needs two distinct documents and fails.
        if isinstance(ids, (str, bytes)) or not ids:
            return False
        try:
            for value in ids:
                self._collection.parse_id(value)
            found = await self._collection.count({"_id": {"$in": list(ids)}})
        except Exception:
            self._logger.warning(
                "Identifier validation failed in %s",
                self._collection.name,
                exc_info=True,
                extra=self._extra(),
            )
            return False
        return found == len(ids)
