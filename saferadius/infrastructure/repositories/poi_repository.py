"""
SQLAlchemy Implementation of POI Repository.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import joinedload, load_only

from saferadius.domain.models.poi import POI
from saferadius.domain.repositories.poi_repository import POIRepository
from saferadius.infrastructure.repositories.base_repository import SQLAlchemyRepository

_NEWEST_FIRST = (POI.created_at.desc(), POI.id.desc())


class SQLAlchemyPOIRepository(SQLAlchemyRepository[POI], POIRepository):
    """POI repository implementation using SQLAlchemy."""

    def list_by_owner(self, owner_id: int) -> List[POI]:
        return (
            self.db.query(POI)
            .filter(POI.owner_id == owner_id)
            .order_by(*_NEWEST_FIRST)
            .all()
        )

    def list_with_owner(self) -> List[POI]:
        return (
            self.db.query(POI)
            .options(joinedload(POI.owner))
            .order_by(*_NEWEST_FIRST)
            .all()
        )

    def list_search_candidates(self, category: Optional[str] = None) -> List[POI]:
        """Only the encrypted columns are loaded for the search path."""
        query = self.db.query(POI).options(
            load_only(
                POI.id,
                POI.encrypted_name,
                POI.encrypted_lat,
                POI.encrypted_lon,
                POI.category,
                POI.created_at,
            )
        )
        if category:
            query = query.filter(POI.category == category)
        return query.order_by(*_NEWEST_FIRST).all()

    def count(self) -> int:
        return self.db.query(func.count(POI.id)).scalar() or 0

    def count_created_since(self, since: datetime) -> int:
        return (
            self.db.query(func.count(POI.id))
            .filter(POI.created_at >= since)
            .scalar()
            or 0
        )
