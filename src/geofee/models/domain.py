"""Domain models for coordinates, distances, pricing policies and stored locations."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Optional, TypeVar

from ..errors import InvalidInput

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Coordinates:
    """A validated latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        for name, value, bound in (("latitude", self.latitude, 90.0), ("longitude", self.longitude, 180.0)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInput(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or not -bound <= value <= bound:
                raise InvalidInput(f"{name} {value} is outside [-{bound:g}, {bound:g}]")

    def as_key(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class DistanceResult:
    distance_miles: float
    duration_minutes: float
    source: str = "provider"


@dataclass(frozen=True, slots=True)
class ProviderElement:
    """One origin/destination cell of a provider distance matrix."""

    distance_miles: float
    duration_minutes: float
    status: str = "OK"

    @property
    def ok(self) -> bool:
        return self.status == "OK"


@dataclass(frozen=True, slots=True)
class DistanceTier:
    up_to_miles: float
    fee: float


@dataclass(frozen=True, slots=True)
class DeliveryZone:
    name: str
    radius_miles: float
    base_fee: float
    per_mile_rate: float


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True, slots=True)
class PricingPolicy:
    """Read-only snapshot of merchant/platform delivery pricing."""

    base_fee: float
    per_mile_rate: float
    min_fee: float
    max_fee: float
    free_delivery_threshold: float = 0.0
    surge_active: bool = False
    surge_multiplier: float = 1.0
    distance_tiers: tuple[DistanceTier, ...] = ()
    zones: tuple[DeliveryZone, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PricingPolicy":
        """Build a policy from a settings snapshot using snake_case or camelCase keys.

        Tiers are sorted ascending by ``up_to_miles``. Consistency checks such as
        ``min_fee <= max_fee`` belong to the settings layer that owns the policy.
        """
        tiers = sorted(
            (
                DistanceTier(
                    up_to_miles=float(_pick(tier, "up_to_miles", "upToMiles")),
                    fee=float(_pick(tier, "fee")),
                )
                for tier in _pick(data, "distance_tiers", "distanceTiers", default=()) or ()
            ),
            key=lambda tier: tier.up_to_miles,
        )
        zones = tuple(
            DeliveryZone(
                name=str(_pick(zone, "name", default="")),
                radius_miles=float(_pick(zone, "radius_miles", "radiusMiles")),
                base_fee=float(_pick(zone, "base_fee", "baseFee")),
                per_mile_rate=float(_pick(zone, "per_mile_rate", "perMileRate")),
            )
            for zone in _pick(data, "zones", "delivery_zones", default=()) or ()
        )
        return cls(
            base_fee=float(_pick(data, "base_fee", "baseFee")),
            per_mile_rate=float(_pick(data, "per_mile_rate", "perMileRate")),
            min_fee=float(_pick(data, "min_fee", "minFee")),
            max_fee=float(_pick(data, "max_fee", "maxFee")),
            free_delivery_threshold=float(_pick(data, "free_delivery_threshold", "freeDeliveryThreshold", default=0.0)),
            surge_active=bool(_pick(data, "surge_active", "surgeActive", default=False)),
            surge_multiplier=float(_pick(data, "surge_multiplier", "surgeMultiplier", default=1.0)),
            distance_tiers=tuple(tiers),
            zones=zones,
        )


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    key: str
    value: T
    inserted_at: float


@dataclass(frozen=True, slots=True)
class StoredUserLocation:
    coordinates: Coordinates
    resolved_at: float
    address: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "latitude": self.coordinates.latitude,
            "longitude": self.coordinates.longitude,
            "address": self.address,
            "resolved_at": self.resolved_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StoredUserLocation":
        return cls(
            coordinates=Coordinates(float(data["latitude"]), float(data["longitude"])),
            resolved_at=float(data["resolved_at"]),
            address=data.get("address"),
        )


@dataclass(frozen=True, slots=True)
class StoreLocation:
    """A candidate store considered by the nearby-stores search."""

    id: str
    coordinates: Coordinates
    name: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True, slots=True)
class NearbyStore:
    id: str
    distance_miles: float
    duration_minutes: float = 0.0
    name: Optional[str] = None
    address: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "distance_miles": self.distance_miles,
            "duration_minutes": self.duration_minutes,
            "name": self.name,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NearbyStore":
        return cls(
            id=str(data["id"]),
            distance_miles=float(data["distance_miles"]),
            duration_minutes=float(data.get("duration_minutes") or 0.0),
            name=data.get("name"),
            address=data.get("address"),
        )


@dataclass(frozen=True, slots=True)
class FeeQuote:
    fee: float
    distance_miles: float
    duration_minutes: float
    metadata: dict = field(default_factory=dict, compare=False)
