"""Caller-facing repository errors and the storage-error classification seam.

Backends never leak their own conflict vocabulary to callers.  Each one
supplies an ErrorClassifier that sorts a raised exception into an
ErrorKind; the repository maps CONFLICT and NOT_FOUND onto the exceptions
below and re-raises anything classified as OTHER unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum


class ErrorKind(str, Enum):
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    OTHER = "other"


ErrorClassifier = Callable[[BaseException], ErrorKind]


class RepositoryError(Exception):
    """Base class for errors raised by repositories."""


class ConflictError(RepositoryError):
    """A uniqueness constraint was violated."""

    MESSAGE = "Document already exists"

    def __init__(self, message: str = MESSAGE) -> None:
        super().__init__(message)


class NotFoundError(RepositoryError):
    """The document targeted by a write does not exist."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id!r} not found")
        self.document_id = document_id


class InvalidIdentifierError(RepositoryError, ValueError):
    """A value cannot be converted to the backend's identifier type."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid document identifier: {value!r}")
        self.value = value

