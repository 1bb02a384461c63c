import asyncio

import httpx
import pytest

from saferadius.core.exceptions import AddressNotFoundException, GeocoderUnavailableException
from saferadius.domain.geo import GeoPoint
from saferadius.infrastructure.geocoder import NominatimGeocoder, build_query

URL = "https://nominatim.test/search"


def make_geocoder(handler):
    return NominatimGeocoder(URL, "SafeRadius-tests/1.0", timeout=2, transport=httpx.MockTransport(handler))


def lookup(geocoder):
    return asyncio.run(geocoder.geocode("Indiranagar", "Bengaluru", "560038", "India"))


def test_build_query_skips_blank_parts():
    assert build_query(" Indiranagar ", "Bengaluru", "", "India") == "Indiranagar, Bengaluru, India"


def test_returns_first_candidate():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[
            {"lat": "12.9784", "lon": "77.6408", "display_name": "Indiranagar"},
            {"lat": "1.0", "lon": "2.0"},
        ])

    assert lookup(make_geocoder(handler)) == GeoPoint(12.9784, 77.6408)

    request = seen[0]
    assert request.url.params["q"] == "Indiranagar, Bengaluru, 560038, India"
    assert request.url.params["format"] == "json"
    assert request.url.params["limit"] == "1"
    assert request.headers["User-Agent"] == "SafeRadius-tests/1.0"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"error": "Unable to geocode"},
        [{"lat": "north", "lon": "77.6"}],
        [{"display_name": "no coordinates"}],
    ],
)
def test_no_usable_result_is_address_not_found(payload):
    geocoder = make_geocoder(lambda request: httpx.Response(200, json=payload))
    with pytest.raises(AddressNotFoundException) as exc:
        lookup(geocoder)
    assert exc.value.status_code == 400


@pytest.mark.parametrize("status_code", [403, 429, 500, 503])
def test_error_status_is_unavailable(status_code):
    geocoder = make_geocoder(lambda request: httpx.Response(status_code, text="nope"))
    with pytest.raises(GeocoderUnavailableException) as exc:
        lookup(geocoder)
    assert exc.value.status_code == 503
    assert exc.value.details["status_code"] == status_code


@pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ReadTimeout])
def test_transport_failures_are_unavailable(error):
    def handler(request):
        raise error("boom", request=request)

    with pytest.raises(GeocoderUnavailableException):
        lookup(make_geocoder(handler))


def test_invalid_json_is_unavailable():
    geocoder = make_geocoder(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(GeocoderUnavailableException):
        lookup(geocoder)
