"""SQLAlchemy implementation of DocumentCollection.

A SQL "collection" is one ORM-mapped table whose primary key column is
``id`` (UUID).  MongoDB-style filters are translated to column
expressions; only the operators listed in _COMPARISONS plus top-level
$and / $or are understood.
"""

from __future__ import annotations

import operator
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import ColumnElement, and_, delete, func, inspect, or_, select, true
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docrepo.domain.errors import ErrorKind, InvalidIdentifierError
from docrepo.domain.models.enums import SortDirection
from docrepo.domain.models.query import Filter, QueryOptions, SaveOptions, UpdateOptions
from docrepo.domain.repositories.collection import DocumentCollection
from docrepo.infrastructure.database import Base

UNIQUE_VIOLATION = "23505"  # PostgreSQL SQLSTATE

_COMPARISONS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "$eq": operator.eq,
    "$ne": operator.ne,
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
    "$in": lambda column, operand: column.in_(operand),
    "$nin": lambda column, operand: column.not_in(operand),
}


def classify_sql_error(exc: BaseException) -> ErrorKind:
    """Classify a SQLAlchemy exception; unique-constraint violations are CONFLICT."""
    if not isinstance(exc, IntegrityError):
        return ErrorKind.OTHER
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNIQUE_VIOLATION:
        return ErrorKind.CONFLICT
    message = str(orig).lower()
    if "unique constraint" in message or "duplicate key" in message:
        return ErrorKind.CONFLICT
    return ErrorKind.OTHER


def _is_operator_map(condition: Any) -> bool:
    return (
        isinstance(condition, Mapping)
        and bool(condition)
        and all(isinstance(key, str) and key.startswith("$") for key in condition)
    )


class SqlDocumentCollection(DocumentCollection):
    """DocumentCollection over one ORM model, bound to an AsyncSession.

    Writes run inside a SAVEPOINT so that a failed statement leaves the
    caller's transaction usable.  Committing is the caller's job (see
    docrepo.infrastructure.database.get_session).
    """

    def __init__(self, session: AsyncSession, model: type[Base]) -> None:
        self._session = session
        self._model = model
        self._fields = frozenset(attr.key for attr in inspect(model).column_attrs)

    @property
    def name(self) -> str:
        return self._model.__tablename__

    def parse_id(self, value: Any) -> uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        if not isinstance(value, str):
            raise InvalidIdentifierError(value)
        try:
            return uuid.UUID(value)
        except ValueError as exc:
            raise InvalidIdentifierError(value) from exc

    def classify_error(self, exc: BaseException) -> ErrorKind:
        return classify_sql_error(exc)

    # --- translation helpers ---

    def _key(self, field: str) -> str:
        key = "id" if field == "_id" else field
        if key not in self._fields:
            raise ValueError(f"{self.name} has no field {field!r}")
        return key

    def _column(self, field: str) -> Any:
        return getattr(self._model, self._key(field))

    def _operand(self, field: str, value: Any) -> Any:
        if self._key(field) != "id":
            return value
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.parse_id(v) for v in value]
        return self.parse_id(value)

    def _where(self, filter: Filter) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        for field, condition in filter.items():
            if field in ("$and", "$or"):
                if not condition:
                    raise ValueError(f"{field} needs at least one condition")
                parts = [and_(true(), *self._where(sub)) for sub in condition]
                clauses.append(and_(*parts) if field == "$and" else or_(*parts))
                continue
            column = self._column(field)
            if _is_operator_map(condition):
                for op, operand in condition.items():
                    if op not in _COMPARISONS:
                        raise ValueError(f"Unsupported filter operator {op!r}")
                    clauses.append(_COMPARISONS[op](column, self._operand(field, operand)))
            else:
                clauses.append(column == self._operand(field, condition))
        return clauses

    def _order_by(self, options: QueryOptions) -> list[Any]:
        return [
            self._column(field).asc()
            if direction is SortDirection.ASCENDING
            else self._column(field).desc()
            for field, direction in options.resolved_sort()
        ]

    def _values(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        values = {self._key(field): value for field, value in fields.items()}
        if "id" in values:
            values["id"] = self.parse_id(values["id"])
        return values

    def _to_document(self, row: Any, projection: tuple[str, ...] | None = None) -> dict[str, Any]:
        document = {key: getattr(row, key) for key in self._fields}
        document["_id"] = str(document.pop("id"))
        if projection is not None:
            keep = {"_id", *projection}
            document = {key: value for key, value in document.items() if key in keep}
        return document

    # --- DocumentCollection ---

    async def insert(self, fields: Mapping[str, Any], options: SaveOptions) -> dict[str, Any]:
        row = self._model(**self._values(fields))
        async with self._session.begin_nested():
            self._session.add(row)
            await self._session.flush()
        return self._to_document(row)

    async def find(self, filter: Filter, options: QueryOptions) -> list[dict[str, Any]]:
        stmt = (
            select(self._model)
            .where(*self._where(filter))
            .order_by(*self._order_by(options))
            .offset(options.skip)
        )
        if options.limit is not None:
            stmt = stmt.limit(options.limit)
        result = await self._session.execute(stmt)
        return [self._to_document(row, options.projection) for row in result.scalars()]

    async def find_one(self, filter: Filter, options: QueryOptions) -> dict[str, Any] | None:
        stmt = (
            select(self._model)
            .where(*self._where(filter))
            .order_by(*self._order_by(options))
            .offset(options.skip)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.scalars().first()
        return self._to_document(row, options.projection) if row is not None else None

    async def find_one_and_update(
        self, document_id: str, changes: Mapping[str, Any], options: UpdateOptions
    ) -> dict[str, Any] | None:
        pk = self.parse_id(document_id)
        values = self._values(changes)
        async with self._session.begin_nested():
            row = await self._session.get(self._model, pk)
            if row is None:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            await self._session.flush()
        return self._to_document(row, options.projection)

    async def delete_one(self, document_id: str) -> bool:
        # A DELETE that matched nothing still counts as acknowledged.
        stmt = delete(self._model).where(self._column("_id") == self.parse_id(document_id))
        async with self._session.begin_nested():
            await self._session.execute(stmt)
        return True

    async def count(self, filter: Filter) -> int:
        stmt = select(func.count()).select_from(self._model).where(*self._where(filter))
        return await self._session.scalar(stmt)
