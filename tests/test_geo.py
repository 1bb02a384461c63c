import math

import pytest

from saferadius.domain.geo import EARTH_RADIUS_KM, distance_km

POINTS = [
    (0.0, 0.0),
    (12.9716, 77.5946),
    (-33.8688, 151.2093),
    (89.9999, -179.9999),
    (-90.0, 0.0),
    (51.5074, -0.1278),
]


@pytest.mark.parametrize("lat,lon", POINTS)
def test_distance_to_self_is_zero(lat, lon):
    assert distance_km(lat, lon, lat, lon) == 0


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_is_symmetric_and_non_negative(a, b):
    forward = distance_km(*a, *b)
    assert forward == pytest.approx(distance_km(*b, *a), rel=1e-12, abs=1e-12)
    assert forward >= 0


def test_one_degree_of_longitude_at_equator():
    assert distance_km(0, 0, 0, 1) == pytest.approx(111.195, abs=0.001)


def test_known_city_pair():
    # London to Paris
    assert distance_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1.0)


def test_antipodal_points_do_not_overflow():
    half_circumference = math.pi * EARTH_RADIUS_KM
    assert distance_km(0, 0, 0, 180) == pytest.approx(half_circumference)
    assert distance_km(90, 0, -90, 0) == pytest.approx(half_circumference)
    assert distance_km(45.0, 10.0, -45.0, -170.0000000001) == pytest.approx(half_circumference)
