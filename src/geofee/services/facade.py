"""Orchestration of geocoding, distance resolution and fee pricing."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from ..errors import InvalidInput
from ..models.domain import Coordinates, FeeQuote, NearbyStore, PricingPolicy, StoreLocation, StoredUserLocation
from .addressing import format_address
from .distance import DistanceResolver
from .geocoding import GeocodeResolver
from .location_store import LocationStore
from .pricing import compute_fee, compute_zone_fee

Location = Union[Coordinates, str, Mapping[str, Any]]

DEFAULT_NEARBY_RADIUS_MILES = 25.0

logger = logging.getLogger(__name__)


class GeoFacade:
    def __init__(
        self,
        geocoder: GeocodeResolver,
        distances: DistanceResolver,
        location_store: Optional[LocationStore] = None,
    ) -> None:
        self.geocoder = geocoder
        self.distances = distances
        self.location_store = location_store

    @staticmethod
    def _prepare(location: Location, side: str) -> Union[Coordinates, str]:
        if isinstance(location, Coordinates):
            return location
        try:
            address = format_address(location)
        except TypeError as e:
            raise InvalidInput(f"Unsupported {side} location: {e}") from e
        if not address:
            raise InvalidInput(f"{side.capitalize()} address is empty")
        return address

    def _resolve(self, prepared: Union[Coordinates, str]) -> Coordinates:
        if isinstance(prepared, Coordinates):
            return prepared
        return self.geocoder.resolve(prepared)

    def fee_and_distance_for_address(
        self,
        origin: Location,
        destination: Location,
        policy: PricingPolicy,
        zone_pricing: bool = False,
    ) -> FeeQuote:
        """Distance, duration and delivery fee between a store and a delivery address.

        Either side may already be ``Coordinates``. Geocoding failures
        propagate unchanged; distance lookups never fail.
        """
        # Validate both sides before spending any geocoding budget.
        prepared_origin = self._prepare(origin, "origin")
        prepared_destination = self._prepare(destination, "destination")
        origin_coords = self._resolve(prepared_origin)
        destination_coords = self._resolve(prepared_destination)

        [result] = self.distances.resolve(origin_coords, [destination_coords])
        calculator = compute_zone_fee if zone_pricing else compute_fee
        fee = calculator(result.distance_miles, policy)
        return FeeQuote(
            fee=fee,
            distance_miles=result.distance_miles,
            duration_minutes=result.duration_minutes,
            metadata={
                "distance_source": result.source,
                "pricing": "zone" if zone_pricing else "standard",
            },
        )

    def nearby_stores(
        self,
        user_coordinates: Coordinates,
        candidate_stores: Sequence[StoreLocation],
        max_distance_miles: float = DEFAULT_NEARBY_RADIUS_MILES,
        remember: bool = False,
        location_store: Optional[LocationStore] = None,
    ) -> list[NearbyStore]:
        """Stores within ``max_distance_miles``, nearest first, ties kept in input order.

        With ``remember`` the result becomes the nearby-stores snapshot of
        ``location_store``, or of the facade's own store when none is given.
        """
        if not candidate_stores:
            return []

        results = self.distances.resolve(user_coordinates, [store.coordinates for store in candidate_stores])
        in_range = [
            NearbyStore(
                id=store.id,
                distance_miles=result.distance_miles,
                duration_minutes=result.duration_minutes,
                name=store.name,
                address=store.address,
            )
            for store, result in zip(candidate_stores, results)
            if result.distance_miles <= max_distance_miles
        ]
        # list.sort is stable, so equal distances keep their input order.
        in_range.sort(key=lambda store: store.distance_miles)
        logger.info(f"{len(in_range)}/{len(candidate_stores)} stores within {max_distance_miles:g} mi")

        snapshot_store = location_store or self.location_store
        if remember and snapshot_store is not None:
            snapshot_store.save_nearby_stores(in_range)
        return in_range

    def resolve_user_location(
        self, address: Location, location_store: Optional[LocationStore] = None
    ) -> StoredUserLocation:
        """Geocode the user's address and remember it for the session."""
        store = location_store or self.location_store
        if store is None:
            raise RuntimeError("No location store is attached to this facade.")
        prepared = self._prepare(address, "user")
        coordinates = self._resolve(prepared)
        label = None if isinstance(prepared, Coordinates) else prepared
        # Nearby stores computed for the previous location no longer apply.
        store.clear()
        return store.save(coordinates, label)
