import math
import random
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from saferadius.application.services.search_service import search_nearby
from saferadius.core.exceptions import InvalidArgumentException
from saferadius.domain.geo import GeoPoint, distance_km
from saferadius.infrastructure.cipher import FieldCipher

KM_PER_DEGREE = 2 * math.pi * 6371.0 / 360
ORIGIN = GeoPoint(0.0, 0.0)


class CountingCipher(FieldCipher):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.decrypted = []

    def decrypt(self, token):
        self.decrypted.append(token)
        return super().decrypt(token)


@pytest.fixture
def cipher():
    return CountingCipher({"v1": "search-key"}, "v1", iterations=1000)


@pytest.fixture
def make_poi(cipher):
    ids = iter(range(1, 10_000))

    def factory(lat, lon, name="Place", category="cafe", encrypted=None):
        fields = {
            "encrypted_name": cipher.encrypt(name),
            "encrypted_lat": cipher.encrypt(str(lat)),
            "encrypted_lon": cipher.encrypt(str(lon)),
        }
        fields.update(encrypted or {})
        return SimpleNamespace(
            id=next(ids),
            category=category,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
            **fields,
        )

    return factory


def east_of_origin(km):
    return 0.0, km / KM_PER_DEGREE


def test_poi_at_requester_location_is_included(cipher, make_poi):
    poi = make_poi(0, 0, name="Here")
    results = search_nearby(ORIGIN, 5, [poi], cipher)
    assert [r.id for r in results] == [poi.id]
    assert results[0].distance_km == 0
    assert f"{results[0].distance_km:.2f}" == "0.00"
    assert results[0].name == "Here"


def test_poi_outside_radius_is_excluded(cipher, make_poi):
    poi = make_poi(0, 1)  # about 111 km east
    assert search_nearby(ORIGIN, 1, [poi], cipher) == []


def test_results_are_sorted_by_distance(cipher, make_poi):
    two_km = make_poi(*east_of_origin(2), name="Two")
    one_km = make_poi(*east_of_origin(1), name="One")
    results = search_nearby(ORIGIN, 5, [two_km, one_km], cipher)
    assert [r.name for r in results] == ["One", "Two"]
    assert results[0].distance_km == pytest.approx(1, abs=1e-6)
    assert results[1].distance_km == pytest.approx(2, abs=1e-6)


def test_radius_boundary_is_inclusive(cipher, make_poi):
    poi = make_poi(0.0, 0.01)
    radius = distance_km(0, 0, 0.0, 0.01)
    assert len(search_nearby(ORIGIN, radius, [poi], cipher)) == 1


def test_equal_distances_keep_input_order(cipher, make_poi):
    first = make_poi(0.0, 0.01, name="First")
    second = make_poi(0.0, 0.01, name="Second")
    third = make_poi(0.0, -0.01, name="Third")
    results = search_nearby(ORIGIN, 5, [first, second, third], cipher)
    assert [r.name for r in results] == ["First", "Second", "Third"]


def test_category_filter_excludes_other_categories(cipher, make_poi):
    cafe = make_poi(0, 0, category="cafe")
    park = make_poi(0, 0, category="park")
    results = search_nearby(ORIGIN, 5, [cafe, park], cipher, category="park")
    assert [r.id for r in results] == [park.id]
    assert all(r.category == "park" for r in results)


def test_category_filter_runs_before_decryption(cipher, make_poi):
    park = make_poi(0, 0, category="park")
    cafes = [make_poi(0, 0, category="cafe") for _ in range(3)]
    cipher.decrypted.clear()

    search_nearby(ORIGIN, 5, cafes + [park], cipher, category="park")

    assert len(cipher.decrypted) == 3
    assert set(cipher.decrypted) == {park.encrypted_name, park.encrypted_lat, park.encrypted_lon}


def test_undecryptable_records_are_skipped(cipher, make_poi):
    foreign = FieldCipher({"v1": "another-key"}, "v1", iterations=1000)
    good = make_poi(0, 0, name="Good")
    corrupt = make_poi(0, 0, encrypted={"encrypted_lat": "v1:garbage"})
    wrong_key = make_poi(0, 0, encrypted={"encrypted_name": foreign.encrypt("Spy")})
    unknown_version = make_poi(0, 0, encrypted={"encrypted_lon": "v7:" + "A" * 60})

    results = search_nearby(ORIGIN, 5, [corrupt, wrong_key, good, unknown_version], cipher)

    assert [r.name for r in results] == ["Good"]


@pytest.mark.parametrize(
    "name,lat,lon",
    [
        ("", "0", "0"),
        ("Place", "north", "0"),
        ("Place", "0", ""),
        ("Place", "nan", "0"),
        ("Place", "0", "inf"),
    ],
)
def test_unusable_plaintext_is_skipped(cipher, make_poi, name, lat, lon):
    bad = make_poi(0, 0, encrypted={
        "encrypted_name": cipher.encrypt(name),
        "encrypted_lat": cipher.encrypt(lat),
        "encrypted_lon": cipher.encrypt(lon),
    })
    good = make_poi(0, 0, name="Good")
    assert [r.id for r in search_nearby(ORIGIN, 5, [bad, good], cipher)] == [good.id]


@pytest.mark.parametrize("radius", [0, -1, float("inf"), float("nan"), None, "far"])
def test_invalid_radius_is_rejected(cipher, make_poi, radius):
    with pytest.raises(InvalidArgumentException):
        search_nearby(ORIGIN, radius, [make_poi(0, 0)], cipher)


@pytest.mark.parametrize("origin", [None, GeoPoint(float("nan"), 0.0), GeoPoint(0.0, float("inf"))])
def test_invalid_origin_is_rejected(cipher, origin):
    with pytest.raises(InvalidArgumentException):
        search_nearby(origin, 5, [], cipher)


@pytest.mark.parametrize(
    "origin",
    [(1.0,), (1.0, 2.0, 3.0), 42, (True, 0.0), (0.0, False), ("12.9", "77.5")],
)
def test_malformed_origin_is_an_invalid_argument(cipher, origin):
    with pytest.raises(InvalidArgumentException):
        search_nearby(origin, 5, [], cipher)


def test_no_result_cap(cipher, make_poi):
    pois = [make_poi(0, 0) for _ in range(150)]
    assert len(search_nearby(ORIGIN, 1, pois, cipher)) == 150


def test_results_respect_radius_and_order(cipher, make_poi):
    rng = random.Random(42)
    origin = GeoPoint(12.97, 77.59)
    pois = [
        make_poi(origin.lat + rng.uniform(-0.5, 0.5), origin.lon + rng.uniform(-0.5, 0.5), category=rng.choice(["cafe", "gym"]))
        for _ in range(60)
    ]

    for radius in (1, 10, 25, 80):
        results = search_nearby(origin, radius, pois, cipher)
        distances = [r.distance_km for r in results]
        assert all(d <= radius for d in distances)
        assert distances == sorted(distances)
        expected = sum(
            1 for p in pois
            if distance_km(origin.lat, origin.lon, float(cipher.decrypt(p.encrypted_lat)), float(cipher.decrypt(p.encrypted_lon))) <= radius
        )
        assert len(results) == expected
