"""
API Dependencies — repositories and infrastructure adapters.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from saferadius.config import get_settings
from saferadius.domain.models.poi import POI
from saferadius.domain.models.user import User
from saferadius.domain.repositories.poi_repository import POIRepository
from saferadius.domain.repositories.user_repository import UserRepository
from saferadius.infrastructure.cipher import FieldCipher
from saferadius.infrastructure.database import get_db
from saferadius.infrastructure.geocoder import NominatimGeocoder
from saferadius.infrastructure.repositories.poi_repository import SQLAlchemyPOIRepository
from saferadius.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_poi_repository(db: Session = Depends(get_db)) -> POIRepository:
    """Get POI repository instance."""
    return SQLAlchemyPOIRepository(db, POI)


@lru_cache
def get_cipher() -> FieldCipher:
    """Process-wide key ring; key derivation runs once."""
    return FieldCipher.from_settings(get_settings())


def get_geocoder() -> NominatimGeocoder:
    return NominatimGeocoder.from_settings(get_settings())
