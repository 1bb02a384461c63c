"""
User Repository Interface.
"""

from typing import List, Optional

from saferadius.domain.repositories.base import BaseRepository
from saferadius.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, case-insensitively."""
        ...

    def list_newest_first(self) -> List[User]:
        """All users, most recently created first."""
        ...

    def count_by_role(self, role: str) -> int:
        """Number of users holding ``role``."""
        ...
