import pytest

from geofee.models.domain import DeliveryZone, DistanceTier, PricingPolicy
from geofee.services.pricing import (
    compute_fee,
    compute_zone_fee,
    default_pricing_policy,
    qualifies_for_free_delivery,
    round_money,
)

DISTANCES = [-5.0, 0.0, 0.3, 1.0, 2.0, 2.01, 4.0, 5.0, 7.5, 10.0, 19.9, 20.0, 30.0, 250.0]


def _policy(**overrides) -> PricingPolicy:
    values = dict(base_fee=3.99, per_mile_rate=1.50, min_fee=3.99, max_fee=25.99)
    values.update(overrides)
    return PricingPolicy(**values)


TIERS = (DistanceTier(2, 3.99), DistanceTier(5, 6.99))


def test_direct_formula_scenario():
    assert compute_fee(4.0, _policy()) == pytest.approx(9.99)


def test_zero_distance_is_base_fee():
    assert compute_fee(0.0, _policy()) == pytest.approx(3.99)


def test_zero_mile_tier_applies_at_zero_distance():
    policy = _policy(min_fee=0.0, distance_tiers=(DistanceTier(0, 1.99), DistanceTier(3, 4.99)))
    assert compute_fee(0.0, policy) == pytest.approx(1.99)


def test_negative_distance_is_not_a_discount():
    policy = _policy(min_fee=0.0)
    assert compute_fee(-10.0, policy) == compute_fee(0.0, policy) == pytest.approx(3.99)


def test_tier_replaces_linear_formula():
    policy = _policy(distance_tiers=TIERS)
    assert compute_fee(1.0, policy) == 3.99
    assert compute_fee(2.0, policy) == 3.99
    assert compute_fee(2.5, policy) == 6.99


def test_distance_beyond_all_tiers_keeps_linear_formula():
    policy = _policy(distance_tiers=TIERS)
    assert compute_fee(8.0, policy) == pytest.approx(3.99 + 8.0 * 1.50)


def test_unsorted_tiers_still_pick_tightest_match():
    policy = _policy(distance_tiers=(DistanceTier(5, 6.99), DistanceTier(2, 3.99)))
    assert compute_fee(1.0, policy) == 3.99


def test_surge_multiplies_tier_fee():
    policy = _policy(
        distance_tiers=TIERS, surge_active=True, surge_multiplier=1.2, min_fee=0.0, max_fee=100.0
    )
    assert compute_fee(4.0, policy) == pytest.approx(8.388)


def test_inactive_surge_is_ignored():
    policy = _policy(distance_tiers=TIERS, surge_active=False, surge_multiplier=3.0)
    assert compute_fee(4.0, policy) == 6.99


def test_surge_multiplier_of_one_is_noop():
    policy = _policy(surge_active=True, surge_multiplier=1.0)
    assert compute_fee(4.0, policy) == pytest.approx(9.99)


def test_surge_is_applied_before_clamp():
    policy = _policy(surge_active=True, surge_multiplier=2.0, max_fee=15.0)
    assert compute_fee(4.0, policy) == 15.0


@pytest.mark.parametrize("distance", DISTANCES)
@pytest.mark.parametrize(
    "policy",
    [
        _policy(),
        _policy(distance_tiers=TIERS),
        _policy(min_fee=5.0, max_fee=12.0, surge_active=True, surge_multiplier=1.8),
        default_pricing_policy(),
    ],
)
def test_fee_is_always_within_bounds(distance, policy):
    fee = compute_fee(distance, policy)
    assert policy.min_fee <= fee <= policy.max_fee


def test_fee_is_monotonic_without_tiers_or_surge():
    policy = _policy(max_fee=1000.0)
    fees = [compute_fee(distance, policy) for distance in sorted(DISTANCES)]
    assert fees == sorted(fees)


def test_free_delivery_threshold_does_not_waive_fee():
    policy = _policy(free_delivery_threshold=0.01)
    assert compute_fee(4.0, policy) == pytest.approx(9.99)


def test_free_delivery_helper():
    policy = default_pricing_policy()
    assert qualifies_for_free_delivery(50.0, policy)
    assert not qualifies_for_free_delivery(49.99, policy)
    assert not qualifies_for_free_delivery(1000.0, _policy(free_delivery_threshold=0.0))


def test_zone_fee_uses_tightest_covering_zone():
    policy = _policy(
        min_fee=0.0,
        distance_tiers=TIERS,
        zones=(
            DeliveryZone("Outer", 15.0, 7.99, 1.10),
            DeliveryZone("Core", 5.0, 2.99, 1.00),
        ),
    )
    assert compute_zone_fee(3.0, policy) == pytest.approx(2.99 + 3.0)
    assert compute_zone_fee(10.0, policy) == pytest.approx(7.99 + 11.0)


def test_zone_fee_outside_all_zones_matches_standard_fee():
    policy = _policy(distance_tiers=TIERS, zones=(DeliveryZone("Core", 5.0, 2.99, 1.00),))
    assert compute_zone_fee(8.0, policy) == compute_fee(8.0, policy)


def test_zone_fee_applies_surge_and_clamp():
    policy = _policy(
        surge_active=True, surge_multiplier=1.5, max_fee=9.0, zones=(DeliveryZone("Core", 5.0, 4.0, 1.0),)
    )
    assert compute_zone_fee(1.0, policy) == pytest.approx(7.5)
    assert compute_zone_fee(4.0, policy) == 9.0


def test_default_policy_matches_platform_defaults():
    policy = default_pricing_policy()
    assert compute_fee(1.5, policy) == 3.99
    assert compute_fee(12.0, policy) == 14.99
    assert compute_fee(21.0, policy) == 25.0


@pytest.mark.parametrize("value,expected", [(8.388, 8.39), (9.985, 9.99), (3.99, 3.99), (0.004, 0.0)])
def test_round_money(value, expected):
    assert round_money(value) == expected
