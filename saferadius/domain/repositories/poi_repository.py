"""
POI Repository Interface.
"""

from datetime import datetime
from typing import List, Optional

from saferadius.domain.repositories.base import BaseRepository
from saferadius.domain.models.poi import POI


class POIRepository(BaseRepository[POI]):
    """Interface for POI-specific operations."""

    def list_by_owner(self, owner_id: int) -> List[POI]:
        """POIs submitted by one account, newest first."""
        ...

    def list_with_owner(self) -> List[POI]:
        """All POIs with their owner loaded, newest first."""
        ...

    def list_search_candidates(self, category: Optional[str] = None) -> List[POI]:
        """Candidate snapshot for proximity search, optionally pre-filtered by category."""
        ...

    def count(self) -> int:
        """Total number of POIs."""
        ...

    def count_created_since(self, since: datetime) -> int:
        """Number of POIs created at or after ``since``."""
        ...
