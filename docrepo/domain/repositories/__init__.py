"""Domain repository interfaces and the generic document repository.

Repository and DocumentCollection are abstract; DocumentRepository holds
the backend-independent policy.  Concrete collections live in
docrepo/infrastructure/persistence/ and are wired at the application
boundary via the factories in docrepo.infrastructure.persistence.repositories.

Import from this package rather than individual modules to avoid coupling
callers to specific repository module paths.
"""

from .base import Repository
from .collection import DocumentCollection
from .documents import DocumentRepository
from .users import UserRepository

__all__ = [
    "Repository",
    "DocumentCollection",
    "DocumentRepository",
    "UserRepository",
]
