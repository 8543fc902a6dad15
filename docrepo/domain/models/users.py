"""User aggregate.

Users are the example collection shipped with docrepo: email is the
unique key, so a second user with the same email is a conflict.
"""

from __future__ import annotations

from .documents import Document
from .enums import Role


class User(Document):
    email: str
    name: str
    role: Role = Role.VIEWER
