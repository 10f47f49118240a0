"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from blog.domain.model.user import User
from blog.domain.value import UserId


class UserRepository(ABC):
    """Repository for User aggregate."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, user_ids: Iterable[UserId]) -> list[User]:
        """Find every user whose ID is in ``user_ids``.

        Unknown IDs are skipped, so the result may be shorter than the input.
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass
