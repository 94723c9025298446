"""Repository exports."""

from userapi.repositories.base import BaseRepository
from userapi.repositories.user import UserRepository

__all__ = ["BaseRepository", "UserRepository"]
