"""Geospatial helper functions."""

from __future__ import annotations

import math

EARTH_RADIUS_MILES = 3959.0
# Fallback travel-time heuristic, roughly 24 mph effective average speed.
DEFAULT_MINUTES_PER_MILE = 2.5


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute great-circle distance in miles between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in miles rounded to one decimal place."""

    return round(haversine_miles(lat1, lon1, lat2, lon2), 1)


def estimate_duration_minutes(distance_miles: float, minutes_per_mile: float = DEFAULT_MINUTES_PER_MILE) -> float:
    return max(0.0, distance_miles) * minutes_per_mile
