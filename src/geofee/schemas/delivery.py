"""Delivery fee and nearby-store request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Coordinates, DeliveryZone, DistanceTier, PricingPolicy, StoreLocation


class CoordinatesModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)


class LocationInput(BaseModel):
    """A location given either as an address or as coordinates."""

    address: Optional[Union[str, Dict[str, Any]]] = Field(
        default=None,
        description="Single-line address or structured fields (street, city, state, postal_code, country).",
    )
    coordinates: Optional[CoordinatesModel] = None

    @model_validator(mode="after")
    def _require_one(self) -> "LocationInput":
        if self.coordinates is None and not self.address:
            raise ValueError("Either address or coordinates is required.")
        return self

    def to_domain(self) -> Union[Coordinates, str, Dict[str, Any]]:
        if self.coordinates is not None:
            return self.coordinates.to_domain()
        return self.address


class DistanceTierModel(BaseModel):
    up_to_miles: float = Field(..., ge=0)
    fee: float = Field(..., ge=0)


class DeliveryZoneModel(BaseModel):
    name: str
    radius_miles: float = Field(..., ge=0)
    base_fee: float = Field(..., ge=0)
    per_mile_rate: float = Field(..., ge=0)


class PricingPolicyModel(BaseModel):
    base_fee: float = Field(..., ge=0)
    per_mile_rate: float = Field(..., ge=0)
    min_fee: float = Field(..., ge=0)
    max_fee: float = Field(..., ge=0)
    free_delivery_threshold: float = Field(default=0.0, ge=0)
    surge_active: bool = False
    surge_multiplier: float = Field(default=1.0, ge=1.0)
    distance_tiers: List[DistanceTierModel] = Field(default_factory=list)
    zones: List[DeliveryZoneModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_fee_bounds(self) -> "PricingPolicyModel":
        if self.min_fee > self.max_fee:
            raise ValueError("min_fee must not exceed max_fee.")
        return self

    def to_domain(self) -> PricingPolicy:
        return PricingPolicy(
            base_fee=self.base_fee,
            per_mile_rate=self.per_mile_rate,
            min_fee=self.min_fee,
            max_fee=self.max_fee,
            free_delivery_threshold=self.free_delivery_threshold,
            surge_active=self.surge_active,
            surge_multiplier=self.surge_multiplier,
            distance_tiers=tuple(
                DistanceTier(tier.up_to_miles, tier.fee)
                for tier in sorted(self.distance_tiers, key=lambda tier: tier.up_to_miles)
            ),
            zones=tuple(
                DeliveryZone(zone.name, zone.radius_miles, zone.base_fee, zone.per_mile_rate) for zone in self.zones
            ),
        )


class FeeQuoteRequest(BaseModel):
    origin: LocationInput = Field(..., description="Store location.")
    destination: LocationInput = Field(..., description="Delivery location.")
    policy: Optional[PricingPolicyModel] = Field(default=None, description="Defaults to the platform policy.")
    zone_pricing: bool = False
    order_subtotal: Optional[float] = Field(default=None, ge=0)


class FeeQuoteResponse(BaseModel):
    fee: float
    display_fee: float
    distance_miles: float
    duration_minutes: float
    distance_source: str
    free_delivery: Optional[bool] = None


class ComputeFeeRequest(BaseModel):
    distance_miles: float
    policy: Optional[PricingPolicyModel] = None
    zone_pricing: bool = False


class ComputeFeeResponse(BaseModel):
    fee: float
    display_fee: float


class StoreCandidateModel(BaseModel):
    id: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    name: Optional[str] = None
    address: Optional[str] = None

    def to_domain(self) -> StoreLocation:
        return StoreLocation(
            id=self.id,
            coordinates=Coordinates(self.latitude, self.longitude),
            name=self.name,
            address=self.address,
        )


class NearbyStoresRequest(BaseModel):
    user: CoordinatesModel
    stores: List[StoreCandidateModel]
    max_distance_miles: Optional[float] = Field(default=None, ge=0)
    remember: bool = Field(
        default=False,
        description="Keep the result as the session's nearby-stores snapshot. Requires the X-Session-ID header.",
    )


class NearbyStoreModel(BaseModel):
    id: str
    distance_miles: float
    duration_minutes: float
    name: Optional[str] = None
    address: Optional[str] = None


class NearbyStoresResponse(BaseModel):
    max_distance_miles: float
    stores: List[NearbyStoreModel]
