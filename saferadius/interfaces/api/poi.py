"""POI API routes — submit, list own, search."""

from fastapi import APIRouter, Depends, status

from saferadius.application.services import poi_service
from saferadius.config import get_settings
from saferadius.domain.geo import GeoPoint
from saferadius.domain.models.user import User
from saferadius.domain.policy import Operation
from saferadius.domain.repositories.poi_repository import POIRepository
from saferadius.domain.schemas.poi import POICreate, POICreated, POIRead, SearchRequest, SearchResponse
from saferadius.infrastructure.cipher import FieldCipher
from saferadius.infrastructure.geocoder import NominatimGeocoder
from saferadius.interfaces.api.deps import require_permission
from saferadius.interfaces.deps import get_cipher, get_geocoder, get_poi_repository

router = APIRouter(prefix="/api/poi", tags=["POI"])


@router.post("", response_model=POICreated, status_code=status.HTTP_201_CREATED)
async def submit_poi(
    body: POICreate,
    repo: POIRepository = Depends(get_poi_repository),
    cipher: FieldCipher = Depends(get_cipher),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
    user: User = Depends(require_permission(Operation.SUBMIT_POI)),
):
    poi = await poi_service.submit_poi(
        repo, cipher, geocoder, user, body, country=get_settings().GEOCODER_COUNTRY
    )
    return POICreated(poi_id=poi.id)


@router.get("/mine", response_model=list[POIRead])
def my_pois(
    repo: POIRepository = Depends(get_poi_repository),
    user: User = Depends(require_permission(Operation.VIEW_OWN_POIS)),
):
    return [POIRead.model_validate(p) for p in poi_service.list_owner_pois(repo, user)]


@router.post("/search", response_model=SearchResponse)
def search_pois(
    body: SearchRequest,
    repo: POIRepository = Depends(get_poi_repository),
    cipher: FieldCipher = Depends(get_cipher),
    user: User = Depends(require_permission(Operation.SEARCH_POIS)),
):
    results = poi_service.search_pois(
        repo, cipher, GeoPoint(body.lat, body.lon), body.radius_km, body.category
    )
    return SearchResponse(count=len(results), radius_km=body.radius_km, results=results)
