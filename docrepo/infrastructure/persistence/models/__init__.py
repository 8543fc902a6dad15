"""ORM model registry: imports every mapper class so it is registered with
Base.metadata before Alembic or SQLAlchemy runs.
"""

from docrepo.infrastructure.persistence.models.users import UserRow

__all__ = [
    "UserRow",
]
