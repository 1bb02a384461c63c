"""Nominatim (OpenStreetMap) geocoding client.

Resolves a submitted address to one coordinate pair. Lookups are single
attempts with a bounded timeout; failures are reported to the caller, never
replaced with default coordinates.
"""

import math
from typing import Optional

import httpx
import structlog

from saferadius.config import Settings, get_settings
from saferadius.core.exceptions import AddressNotFoundException, GeocoderUnavailableException
from saferadius.domain.geo import GeoPoint

logger = structlog.get_logger(__name__)


def build_query(area: str, city: str, postal_code: str, country: str) -> str:
    return ", ".join(part.strip() for part in (area, city, postal_code, country) if part and part.strip())


class NominatimGeocoder:
    """Async client for the Nominatim ``/search`` endpoint."""

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        # Nominatim's usage policy rejects requests without an identifying agent
        self.headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NominatimGeocoder":
        settings = settings or get_settings()
        return cls(
            base_url=settings.GEOCODER_URL,
            user_agent=settings.GEOCODER_USER_AGENT,
            timeout=settings.GEOCODER_TIMEOUT_SECONDS,
        )

    async def geocode(self, area: str, city: str, postal_code: str, country: str) -> GeoPoint:
        """Return the first candidate's coordinates.

        Raises AddressNotFoundException when the provider has no usable result
        and GeocoderUnavailableException on timeouts, transport errors and
        non-2xx responses.
        """
        query = build_query(area, city, postal_code, country)
        params = {"format": "json", "q": query, "limit": 1}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=params, headers=self.headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Geocoder returned an error status", status_code=e.response.status_code, query=query)
            raise GeocoderUnavailableException(details={"status_code": e.response.status_code}) from e
        except httpx.HTTPError as e:
            logger.warning("Geocoder request failed", error=str(e), query=query)
            raise GeocoderUnavailableException(details={"reason": e.__class__.__name__}) from e
        except ValueError as e:
            logger.warning("Geocoder returned invalid JSON", query=query)
            raise GeocoderUnavailableException(details={"reason": "invalid_response"}) from e

        point = _first_point(data)
        if point is None:
            logger.info("No location data found", query=query)
            raise AddressNotFoundException(details={"query": query})
        return point


def _first_point(data) -> Optional[GeoPoint]:
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    if not isinstance(first, dict):
        return None
    try:
        lat, lon = float(first["lat"]), float(first["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    return GeoPoint(lat=lat, lon=lon)
