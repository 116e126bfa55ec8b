from __future__ import annotations

from typing import Sequence

import pytest

from geofee.errors import ProviderError
from geofee.models.domain import Coordinates, ProviderElement
from geofee.services.geospatial import haversine_miles
from geofee.services.providers.base import MappingProvider


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubProvider(MappingProvider):
    """Records calls; answers from a fixed address book and a straight-line matrix."""

    name = "stub"

    def __init__(self, addresses: dict[str, Coordinates] | None = None, statuses: Sequence[str] | None = None) -> None:
        self.addresses = addresses or {}
        self.statuses = list(statuses) if statuses else None
        self.geocode_calls: list[str] = []
        self.matrix_calls: list[tuple[Coordinates, list[Coordinates]]] = []

    def geocode(self, address: str) -> Coordinates:
        self.geocode_calls.append(address)
        try:
            return self.addresses[address.strip().lower()]
        except KeyError:
            raise ProviderError(f"Geocoding failed: ZERO_RESULTS for {address}") from None

    def distance_matrix(self, origin, destinations):
        self.matrix_calls.append((origin, list(destinations)))
        elements = []
        for index, dest in enumerate(destinations):
            status = self.statuses[index] if self.statuses else "OK"
            if status != "OK":
                elements.append(ProviderElement(0.0, 0.0, status))
                continue
            miles = haversine_miles(origin.latitude, origin.longitude, dest.latitude, dest.longitude) * 1.2
            elements.append(ProviderElement(miles, miles * 2.0, "OK"))
        return elements


class FailingProvider(MappingProvider):
    name = "failing"

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or ConnectionError("provider unavailable")
        self.calls = 0

    def geocode(self, address: str) -> Coordinates:
        self.calls += 1
        raise self.exc

    def distance_matrix(self, origin, destinations):
        self.calls += 1
        raise self.exc


def point_miles_east(miles: float) -> Coordinates:
    """A point on the equator ``miles`` east of (0, 0) by great-circle distance."""
    return Coordinates(0.0, miles / 69.0976)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider(
        addresses={
            "123 union square, san francisco, ca": Coordinates(37.7879, -122.4075),
            "456 castro st, san francisco, ca": Coordinates(37.7609, -122.4350),
        }
    )
