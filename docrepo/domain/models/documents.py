"""Document capability protocol and the default Pydantic document base.

A repository only needs three things from the type it manages: a string
identifier, the two timestamps, and a way to build an instance from the
plain mapping a storage backend returns.  StoredDocument states that as a
structural protocol; Document is the ready-made Pydantic implementation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class StoredDocument(Protocol):
    """Structural contract for anything a DocumentRepository can manage."""

    id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def model_validate(cls, obj: Any) -> Any: ...

    @classmethod
    def model_construct(cls, **values: Any) -> Any: ...


class Document(BaseModel):
    """Base model for persisted documents.

    The identifier is exposed as ``id`` but read from and written to the
    store as ``_id``.  Both names are accepted on construction.  Stored
    fields the model does not declare are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    created_at: datetime
    updated_at: datetime
