"""Proximity search over encrypted POI coordinates.

Candidates are filtered by category, decrypted, measured against the
requester's location, cut at the radius and ordered nearest first. A record
that cannot be decrypted or parsed is skipped; it never fails the search.
"""

import math
from typing import Any, Iterable, List, Optional

import structlog

from saferadius.core.exceptions import InvalidArgumentException
from saferadius.domain.geo import GeoPoint, distance_km
from saferadius.domain.schemas.poi import POISearchResult
from saferadius.infrastructure.cipher import DecryptionError, FieldCipher

logger = structlog.get_logger(__name__)


def _category_value(category: Any) -> Optional[str]:
    if category is None:
        return None
    return getattr(category, "value", category)


def _parse_coordinate(text: str) -> Optional[float]:
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def validate_search_arguments(origin: GeoPoint, radius_km: float) -> None:
    if radius_km is None or isinstance(radius_km, bool):
        raise InvalidArgumentException("A search radius is required")
    try:
        radius = float(radius_km)
    except (TypeError, ValueError):
        raise InvalidArgumentException("Search radius must be a number", details={"radius_km": str(radius_km)}) from None
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidArgumentException(
            "Search radius must be a positive, finite number",
            details={"radius_km": radius},
        )

    if origin is None:
        raise InvalidArgumentException("A search location is required")
    try:
        lat, lon = origin
    except (TypeError, ValueError):
        raise InvalidArgumentException("Search location must be a (lat, lon) pair") from None
    for value in (lat, lon):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidArgumentException("Search location must have finite coordinates")


def decrypt_candidate(poi: Any, cipher: FieldCipher) -> Optional[tuple[str, float, float]]:
    """Return (name, lat, lon) or None if any field is unusable."""
    try:
        name = cipher.decrypt(poi.encrypted_name)
        lat_text = cipher.decrypt(poi.encrypted_lat)
        lon_text = cipher.decrypt(poi.encrypted_lon)
    except DecryptionError as e:
        logger.warning("Skipping undecryptable POI", poi_id=poi.id, reason=str(e))
        return None

    if not name:
        logger.warning("Skipping POI with empty name", poi_id=poi.id)
        return None

    lat, lon = _parse_coordinate(lat_text), _parse_coordinate(lon_text)
    if lat is None or lon is None:
        logger.warning("Skipping POI with unparsable coordinates", poi_id=poi.id)
        return None
    return name, lat, lon


def search_nearby(
    origin: GeoPoint,
    radius_km: float,
    candidates: Iterable[Any],
    cipher: FieldCipher,
    category: Any = None,
) -> List[POISearchResult]:
    """Decrypt ``candidates`` and return those within ``radius_km`` of ``origin``.

    ``candidates`` are objects exposing ``id``, ``category``,
    ``encrypted_name``, ``encrypted_lat``, ``encrypted_lon`` and
    ``created_at``. The boundary is inclusive and equal distances keep their
    input order.
    """
    validate_search_arguments(origin, radius_km)
    radius_km = float(radius_km)
    wanted = _category_value(category)

    results: List[POISearchResult] = []
    skipped = 0
    for poi in candidates:
        poi_category = _category_value(poi.category)
        if wanted is not None and poi_category != wanted:
            continue

        decrypted = decrypt_candidate(poi, cipher)
        if decrypted is None:
            skipped += 1
            continue
        name, lat, lon = decrypted

        distance = distance_km(origin[0], origin[1], lat, lon)
        if distance > radius_km:
            continue

        results.append(
            POISearchResult(
                id=poi.id,
                name=name,
                lat=lat,
                lon=lon,
                category=poi_category,
                distance_km=distance,
                created_at=poi.created_at,
            )
        )

    results.sort(key=lambda r: r.distance_km)
    logger.info(
        "Proximity search completed",
        radius_km=radius_km,
        category=wanted,
        matches=len(results),
        skipped=skipped,
    )
    return results
