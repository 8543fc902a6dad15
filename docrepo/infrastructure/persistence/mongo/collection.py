"""Motor implementation of DocumentCollection."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError, OperationFailure

from docrepo.domain.errors import ErrorKind, InvalidIdentifierError
from docrepo.domain.models.query import Filter, QueryOptions, SaveOptions, UpdateOptions
from docrepo.domain.repositories.collection import DocumentCollection

# E11000 / E11001: duplicate key on insert / update (the latter from pre-2.6 servers).
DUPLICATE_KEY_CODES = frozenset({11000, 11001})

_ID_LIST_OPERATORS = ("$in", "$nin")
_ID_SCALAR_OPERATORS = ("$eq", "$ne")


def classify_mongo_error(exc: BaseException) -> ErrorKind:
    """Classify a PyMongo exception; duplicate keys are CONFLICT, everything else OTHER."""
    if isinstance(exc, DuplicateKeyError):
        return ErrorKind.CONFLICT
    if isinstance(exc, BulkWriteError):
        write_errors = (exc.details or {}).get("writeErrors", [])
        if any(err.get("code") in DUPLICATE_KEY_CODES for err in write_errors):
            return ErrorKind.CONFLICT
        return ErrorKind.OTHER
    if isinstance(exc, OperationFailure) and exc.code in DUPLICATE_KEY_CODES:
        return ErrorKind.CONFLICT
    return ErrorKind.OTHER


def _to_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdentifierError(value)
    return ObjectId(value)


def _coerce_id_condition(condition: Any) -> Any:
    if not isinstance(condition, Mapping):
        return _to_object_id(condition)
    coerced: dict[str, Any] = {}
    for op, operand in condition.items():
        if op in _ID_LIST_OPERATORS:
            coerced[op] = [_to_object_id(v) for v in operand]
        elif op in _ID_SCALAR_OPERATORS:
            coerced[op] = _to_object_id(operand)
        else:
            coerced[op] = operand
    return coerced


def _to_query(filter: Filter) -> dict[str, Any]:
    """Copy a filter, converting every _id operand to ObjectId."""
    query: dict[str, Any] = {}
    for key, value in filter.items():
        if key == "_id":
            query[key] = _coerce_id_condition(value)
        elif key in ("$and", "$or", "$nor"):
            query[key] = [_to_query(sub) for sub in value]
        else:
            query[key] = value
    return query


def _to_projection(fields: tuple[str, ...] | None) -> dict[str, int] | None:
    if fields is None:
        return None
    return {field: 1 for field in fields}


def _to_sort(options: QueryOptions) -> list[tuple[str, int]]:
    return [(field, int(direction)) for field, direction in options.resolved_sort()]


def _to_bson_datetime(value: datetime) -> datetime:
    # BSON dates carry milliseconds; anything finer is lost on the server.
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _to_stored(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Copy fields as the server will store them."""
    return {
        key: _to_bson_datetime(value) if isinstance(value, datetime) else value
        for key, value in fields.items()
    }


def _to_document(raw: Mapping[str, Any]) -> dict[str, Any]:
    document = dict(raw)
    if "_id" in document:
        document["_id"] = str(document["_id"])
    # Clients opened without tz_aware=True decode dates as naive UTC.
    for key, value in document.items():
        if isinstance(value, datetime) and value.tzinfo is None:
            document[key] = value.replace(tzinfo=timezone.utc)
    return document


class MongoDocumentCollection(DocumentCollection):
    """DocumentCollection over a single Motor collection.

    Identifiers are BSON ObjectIds, exposed to callers as 24-char hex strings.
    """

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    @property
    def name(self) -> str:
        return self._collection.name

    def parse_id(self, value: Any) -> ObjectId:
        return _to_object_id(value)

    def classify_error(self, exc: BaseException) -> ErrorKind:
        return classify_mongo_error(exc)

    async def insert(self, fields: Mapping[str, Any], options: SaveOptions) -> dict[str, Any]:
        document = _to_stored(fields)
        if "_id" in document:
            document["_id"] = _to_object_id(document["_id"])
        result = await self._collection.insert_one(
            document, bypass_document_validation=options.bypass_validation
        )
        document["_id"] = result.inserted_id
        return _to_document(document)

    async def find(self, filter: Filter, options: QueryOptions) -> list[dict[str, Any]]:
        cursor = self._collection.find(
            _to_query(filter), projection=_to_projection(options.projection)
        )
        sort = _to_sort(options)
        if sort:
            cursor = cursor.sort(sort)
        if options.skip:
            cursor = cursor.skip(options.skip)
        if options.limit is not None:
            cursor = cursor.limit(options.limit)
        return [_to_document(raw) for raw in await cursor.to_list(length=None)]

    async def find_one(self, filter: Filter, options: QueryOptions) -> dict[str, Any] | None:
        raw = await self._collection.find_one(
            _to_query(filter),
            projection=_to_projection(options.projection),
            sort=_to_sort(options) or None,
            skip=options.skip,
        )
        return _to_document(raw) if raw is not None else None

    async def find_one_and_update(
        self, document_id: str, changes: Mapping[str, Any], options: UpdateOptions
    ) -> dict[str, Any] | None:
        raw = await self._collection.find_one_and_update(
            {"_id": _to_object_id(document_id)},
            {"$set": _to_stored(changes)},
            projection=_to_projection(options.projection),
            return_document=ReturnDocument.AFTER,
        )
        return _to_document(raw) if raw is not None else None

    async def delete_one(self, document_id: str) -> bool:
        # Acknowledged writes report True even when nothing matched.
        result = await self._collection.delete_one({"_id": _to_object_id(document_id)})
        return result.acknowledged

    async def count(self, filter: Filter) -> int:
        return await self._collection.count_documents(_to_query(filter))
