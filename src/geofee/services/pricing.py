"""Delivery fee computation from distance and pricing policy."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..models.domain import DeliveryZone, DistanceTier, PricingPolicy

__all__ = [
    "compute_fee",
    "compute_zone_fee",
    "default_pricing_policy",
    "qualifies_for_free_delivery",
    "round_money",
]


def _apply_surge_and_clamp(fee: float, policy: PricingPolicy) -> float:
    if policy.surge_active and policy.surge_multiplier > 1.0:
        fee *= policy.surge_multiplier
    return max(policy.min_fee, min(policy.max_fee, fee))


def _matching_tier(distance_miles: float, tiers: tuple[DistanceTier, ...]) -> Optional[DistanceTier]:
    covering = [tier for tier in tiers if distance_miles <= tier.up_to_miles]
    return min(covering, key=lambda tier: tier.up_to_miles) if covering else None


def _matching_zone(distance_miles: float, zones: tuple[DeliveryZone, ...]) -> Optional[DeliveryZone]:
    covering = [zone for zone in zones if distance_miles <= zone.radius_miles]
    return min(covering, key=lambda zone: zone.radius_miles) if covering else None


def compute_fee(distance_miles: float, policy: PricingPolicy) -> float:
    """Delivery fee for ``distance_miles`` under ``policy``, at full float precision.

    The linear base + per-mile fee is replaced by the tier with the smallest
    ``up_to_miles`` that still covers the distance. Surge
    then scales the fee and the result is clamped to ``[min_fee, max_fee]``.
    Negative distances count as zero. The free-delivery threshold is never
    applied here; waiving the fee is the caller's decision.
    """
    distance = max(0.0, distance_miles)
    fee = policy.base_fee + distance * policy.per_mile_rate
    tier = _matching_tier(distance, policy.distance_tiers)
    if tier is not None:
        fee = tier.fee
    return _apply_surge_and_clamp(fee, policy)


def compute_zone_fee(distance_miles: float, policy: PricingPolicy) -> float:
    """Zone-aware variant: the tightest zone covering the distance sets base and per-mile rate.

    Distance tiers are not consulted for zoned distances. Outside every zone
    this is ``compute_fee``.
    """
    distance = max(0.0, distance_miles)
    zone = _matching_zone(distance, policy.zones)
    if zone is None:
        return compute_fee(distance, policy)
    return _apply_surge_and_clamp(zone.base_fee + distance * zone.per_mile_rate, policy)


def qualifies_for_free_delivery(order_subtotal: float, policy: PricingPolicy) -> bool:
    return policy.free_delivery_threshold > 0 and order_subtotal >= policy.free_delivery_threshold


def round_money(value: float) -> float:
    """Round to cents for display."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def default_pricing_policy() -> PricingPolicy:
    return PricingPolicy(
        base_fee=3.99,
        per_mile_rate=1.5,
        min_fee=3.99,
        max_fee=25.0,
        free_delivery_threshold=50.0,
        surge_active=False,
        surge_multiplier=1.2,
        distance_tiers=(
            DistanceTier(up_to_miles=2, fee=3.99),
            DistanceTier(up_to_miles=5, fee=6.99),
            DistanceTier(up_to_miles=10, fee=9.99),
            DistanceTier(up_to_miles=20, fee=14.99),
        ),
    )
