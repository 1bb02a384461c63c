"""POI service — submission, management views and search."""

from typing import List, Optional, Protocol

import structlog

from saferadius.core.exceptions import EntityNotFoundException
from saferadius.domain.geo import GeoPoint
from saferadius.domain.models.poi import POI
from saferadius.domain.models.user import User
from saferadius.domain.repositories.poi_repository import POIRepository
from saferadius.domain.schemas.poi import POICategory, POICreate, POISearchResult
from saferadius.application.services.search_service import search_nearby, validate_search_arguments
from saferadius.infrastructure.cipher import FieldCipher

logger = structlog.get_logger(__name__)


class Geocoder(Protocol):
    async def geocode(self, area: str, city: str, postal_code: str, country: str) -> GeoPoint:
        ...


async def submit_poi(
    repo: POIRepository,
    cipher: FieldCipher,
    geocoder: Geocoder,
    owner: User,
    body: POICreate,
    country: str,
) -> POI:
    """Geocode, encrypt, then persist.

    Nothing is written unless both the lookup and the encryption succeed.
    """
    point = await geocoder.geocode(body.area, body.city, body.postal_code, country)

    encrypted = {
        "encrypted_name": cipher.encrypt(body.name),
        "encrypted_lat": cipher.encrypt(str(point.lat)),
        "encrypted_lon": cipher.encrypt(str(point.lon)),
    }

    poi = repo.create(
        {
            **encrypted,
            "name": body.name,
            "address": body.address,
            "area": body.area,
            "city": body.city,
            "postal_code": body.postal_code,
            "category": body.category.value,
            "owner_id": owner.id,
        }
    )
    logger.info("POI created", poi_id=poi.id, owner_id=owner.id, category=poi.category)
    return poi


def list_owner_pois(repo: POIRepository, owner: User) -> List[POI]:
    return repo.list_by_owner(owner.id)


def list_all_pois(repo: POIRepository) -> List[POI]:
    return repo.list_with_owner()


def delete_poi(repo: POIRepository, poi_id: int, actor: User) -> None:
    deleted = repo.delete(poi_id)
    if deleted is None:
        raise EntityNotFoundException("POI not found", details={"poi_id": poi_id})
    logger.info("POI deleted", poi_id=poi_id, deleted_by=actor.id)


def search_pois(
    repo: POIRepository,
    cipher: FieldCipher,
    origin: GeoPoint,
    radius_km: float,
    category: Optional[POICategory] = None,
) -> List[POISearchResult]:
    """Fetch the candidate snapshot and run the proximity search over it."""
    # Fail fast before touching the database
    validate_search_arguments(origin, radius_km)
    category_value = category.value if category else None
    candidates = repo.list_search_candidates(category_value)
    return search_nearby(origin, radius_km, candidates, cipher, category_value)
