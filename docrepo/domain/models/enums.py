"""Domain enumerations for docrepo.

String-valued enums use the str mixin so they serialize cleanly to JSON
and BSON and remain comparable to plain strings.  SortDirection is an
IntEnum whose values match the MongoDB sort convention.
"""

from enum import Enum, IntEnum


class SortDirection(IntEnum):
    ASCENDING = 1
    DESCENDING = -1


class Role(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"
