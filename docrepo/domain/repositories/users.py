"""User repository."""

from __future__ import annotations

from docrepo.domain.models.users import User

from .documents import DocumentRepository


class UserRepository(DocumentRepository[User]):
    """DocumentRepository bound to User.

    get_by_email follows read-path semantics: None on a miss or a backend error.
    """

    model = User

    async def get_by_email(self, email: str) -> User | None:
        return await self.get_one_where({"email": email})
