"""Per-call query and write options.

None of these objects is persisted; each is consumed by a single
repository call.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import SortDirection

# MongoDB query vocabulary: {"field": value}, {"field": {"$in": [...]}},
# {"$or": [{...}, {...}]}.  "_id" addresses the document identifier.
Filter = Mapping[str, Any]

DEFAULT_SORT: tuple[tuple[str, SortDirection], ...] = (
    ("created_at", SortDirection.DESCENDING),
)


class QueryOptions(BaseModel):
    """Sort, projection and pagination for a single read.

    sort=None means "newest first" (created_at descending); any explicit
    sort replaces that default entirely.  projection lists the fields to
    return; the identifier is always included.
    """

    model_config = ConfigDict(frozen=True)

    sort: tuple[tuple[str, SortDirection], ...] | None = None
    projection: tuple[str, ...] | None = None
    skip: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=1)

    def resolved_sort(self) -> tuple[tuple[str, SortDirection], ...]:
        return DEFAULT_SORT if self.sort is None else self.sort


class SaveOptions(BaseModel):
    """Options for create().  bypass_validation is ignored by SQL backends."""

    model_config = ConfigDict(frozen=True)

    bypass_validation: bool = False


class UpdateOptions(BaseModel):
    """Options for update_one_by_id(); projection shapes the returned document."""

    model_config = ConfigDict(frozen=True)

    projection: tuple[str, ...] | None = None
