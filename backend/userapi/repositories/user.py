"""User repository: lookups keyed by username."""

from __future__ import annotations

from userapi.models.user import User
from userapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Usernames are matched exactly as stored (case-sensitive, no trimming).
    """

    model = User

    def _filterable_fields(self):
        """Whitelist fields safe for equality filters."""
        return {"username": User.username}

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact username.

        :param username: Username to search.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        return self.find_one(username=username)

    def exists_by_username(self, username: str) -> bool:
        """Return ``True`` when a user with the provided username exists."""
        return self.exists(username=username)
