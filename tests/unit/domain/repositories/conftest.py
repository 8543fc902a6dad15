"""Shared fixtures: an in-memory DocumentCollection and a deterministic clock."""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from docrepo.domain.errors import ErrorKind, InvalidIdentifierError
from docrepo.domain.models.documents import Document
from docrepo.domain.models.enums import SortDirection
from docrepo.domain.repositories.collection import DocumentCollection


class DuplicateKey(Exception):
    """Raised by InMemoryCollection when a unique field collides."""


class Note(Document):
    title: str
    rank: int = 0


class TickingClock:
    """Each call returns a time one second after the previous one."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class InMemoryCollection(DocumentCollection):
    """Dict-backed collection understanding equality, $in, $ne, $gt and $lt."""

    def __init__(self, unique: tuple[str, ...] = ("title",)) -> None:
        self.documents: dict[str, dict] = {}
        self.unique = unique
        self.fail_with: Exception | None = None

    @property
    def name(self) -> str:
        return "memory"

    def parse_id(self, value):
        if not isinstance(value, str):
            raise InvalidIdentifierError(value)
        try:
            return uuid.UUID(value).hex
        except ValueError as exc:
            raise InvalidIdentifierError(value) from exc

    def classify_error(self, exc):
        return ErrorKind.CONFLICT if isinstance(exc, DuplicateKey) else ErrorKind.OTHER

    def _raise_if_failing(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _norm(self, field, value):
        return self.parse_id(value) if field == "_id" else value

    def _matches(self, doc, filter):
        for field, condition in filter.items():
            value = doc.get(field)
            if isinstance(condition, dict):
                for op, operand in condition.items():
                    if op == "$in":
                        ok = value in [self._norm(field, o) for o in operand]
                    elif op == "$ne":
                        ok = value != self._norm(field, operand)
                    elif op == "$gt":
                        ok = value is not None and value > operand
                    elif op == "$lt":
                        ok = value is not None and value < operand
                    else:
                        raise ValueError(op)
                    if not ok:
                        return False
            elif value != self._norm(field, condition):
                return False
        return True

    def _check_unique(self, candidate, exclude=None):
        for key, doc in self.documents.items():
            if key == exclude:
                continue
            for field in self.unique:
                if field in candidate and doc.get(field) == candidate[field]:
                    raise DuplicateKey(field)

    @staticmethod
    def _project(doc, projection):
        if projection is None:
            return copy.deepcopy(doc)
        return {k: copy.deepcopy(v) for k, v in doc.items() if k == "_id" or k in projection}

    def _select(self, filter, options):
        docs = [d for d in self.documents.values() if self._matches(d, filter)]
        for field, direction in reversed(options.resolved_sort()):
            docs.sort(key=lambda d: d[field], reverse=direction is SortDirection.DESCENDING)
        docs = docs[options.skip:]
        if options.limit is not None:
            docs = docs[: options.limit]
        return docs

    async def insert(self, fields, options):
        self._raise_if_failing()
        doc = copy.deepcopy(dict(fields))
        doc["_id"] = self.parse_id(doc["_id"]) if "_id" in doc else uuid.uuid4().hex
        if doc["_id"] in self.documents:
            raise DuplicateKey("_id")
        self._check_unique(doc)
        self.documents[doc["_id"]] = doc
        return copy.deepcopy(doc)

    async def find(self, filter, options):
        self._raise_if_failing()
        return [self._project(d, options.projection) for d in self._select(filter, options)]

    async def find_one(self, filter, options):
        self._raise_if_failing()
        docs = self._select(filter, options)
        return self._project(docs[0], options.projection) if docs else None

    async def find_one_and_update(self, document_id, changes, options):
        self._raise_if_failing()
        key = self.parse_id(document_id)
        current = self.documents.get(key)
        if current is None:
            return None
        updated = {**current, **copy.deepcopy(dict(changes))}
        self._check_unique(updated, exclude=key)
        self.documents[key] = updated
        return self._project(updated, options.projection)

    async def delete_one(self, document_id):
        self._raise_if_failing()
        self.documents.pop(self.parse_id(document_id), None)
        return True

    async def count(self, filter):
        self._raise_if_failing()
        return sum(1 for d in self.documents.values() if self._matches(d, filter))


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def collection():
    return InMemoryCollection()


@pytest.fixture
def note_model():
    return Note


@pytest.fixture
def duplicate_key():
    return DuplicateKey


@pytest.fixture
def make_collection():
    return InMemoryCollection
