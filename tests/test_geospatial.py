import pytest

from geofee.services.distance import calculate_distance
from geofee.services.geospatial import estimate_duration_minutes, haversine_miles

POINTS = [
    (37.7749, -122.4194),
    (40.7128, -74.0060),
    (-33.8688, 151.2093),
    (0.0, 0.0),
    (89.9, 179.9),
    (-90.0, -180.0),
]


@pytest.mark.parametrize("lat,lon", POINTS)
def test_distance_to_self_is_zero(lat: float, lon: float):
    assert calculate_distance(lat, lon, lat, lon) == 0


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_is_symmetric(a, b):
    assert calculate_distance(*a, *b) == calculate_distance(*b, *a)


def test_san_francisco_to_new_york():
    miles = calculate_distance(37.7749, -122.4194, 40.7128, -74.0060)
    assert miles == pytest.approx(2565, abs=5)
    assert miles == round(miles, 1)


def test_one_degree_of_longitude_on_equator():
    assert haversine_miles(0, 0, 0, 1) == pytest.approx(69.0976, abs=1e-3)


def test_duration_heuristic_is_two_and_a_half_minutes_per_mile():
    assert estimate_duration_minutes(4.0) == 10.0
    assert estimate_duration_minutes(-3.0) == 0.0
