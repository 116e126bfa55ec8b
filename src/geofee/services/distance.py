"""Travel distance resolution with a Haversine fallback."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models.domain import Coordinates, DistanceResult, ProviderElement
from .caching import ResolutionCache
from .geospatial import DEFAULT_MINUTES_PER_MILE, calculate_distance, estimate_duration_minutes
from .providers.base import MappingProvider
from .rate_limiter import DISTANCE_BUCKET, RateLimiter
from .telemetry import UsageSink, emit_usage

__all__ = ["DistanceResolver", "calculate_distance", "distance_cache_key"]

logger = logging.getLogger(__name__)


def distance_cache_key(origin: Coordinates, destinations: Sequence[Coordinates]) -> str:
    return f"{origin.as_key()}:{'|'.join(dest.as_key() for dest in destinations)}"


class DistanceResolver:
    """Resolve driving distance/duration from one origin to many destinations.

    Provider trouble of any kind (local rate limiting, errors, timeouts, a
    malformed matrix) degrades to great-circle estimates instead of raising.
    Only provider-backed batches are cached.
    """

    def __init__(
        self,
        provider: MappingProvider,
        rate_limiter: RateLimiter,
        cache: Optional[ResolutionCache[tuple[DistanceResult, ...]]] = None,
        usage_sink: Optional[UsageSink] = None,
        minutes_per_mile: float = DEFAULT_MINUTES_PER_MILE,
    ) -> None:
        self.provider = provider
        self.rate_limiter = rate_limiter
        self.cache = cache if cache is not None else ResolutionCache("distance", ttl_seconds=15 * 60)
        self.usage_sink = usage_sink
        self.minutes_per_mile = minutes_per_mile

    def estimate(self, origin: Coordinates, destination: Coordinates) -> DistanceResult:
        miles = calculate_distance(origin.latitude, origin.longitude, destination.latitude, destination.longitude)
        return DistanceResult(
            distance_miles=miles,
            duration_minutes=estimate_duration_minutes(miles, self.minutes_per_mile),
            source="fallback",
        )

    def fallback(self, origin: Coordinates, destinations: Sequence[Coordinates]) -> list[DistanceResult]:
        return [self.estimate(origin, dest) for dest in destinations]

    def resolve(self, origin: Coordinates, destinations: Sequence[Coordinates]) -> list[DistanceResult]:
        destinations = list(destinations)
        if not destinations:
            return []

        key = distance_cache_key(origin, destinations)
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)

        if not self.rate_limiter.try_acquire(DISTANCE_BUCKET):
            logger.warning("Distance Matrix rate limit exceeded, using fallback calculation")
            return self.fallback(origin, destinations)

        try:
            elements = self.provider.distance_matrix(origin, destinations)
        except Exception as e:
            logger.warning(f"Distance Matrix failed, using fallback calculation: {e}")
            return self.fallback(origin, destinations)

        if len(elements) != len(destinations):
            logger.warning(
                f"Distance Matrix returned {len(elements)} results for {len(destinations)} destinations, "
                "using fallback calculation"
            )
            return self.fallback(origin, destinations)

        results = [self._from_element(origin, dest, element) for dest, element in zip(destinations, elements)]
        if all(element.ok for element in elements):
            self.cache.put(key, tuple(results))
        emit_usage(
            self.usage_sink,
            "distance",
            {"origin": origin.as_key(), "destinations": [dest.as_key() for dest in destinations]},
        )
        return results

    def _from_element(self, origin: Coordinates, destination: Coordinates, element: ProviderElement) -> DistanceResult:
        if not element.ok:
            logger.info(
                f"Distance Matrix element {origin.as_key()} -> {destination.as_key()} "
                f"returned {element.status}, using fallback calculation"
            )
            return self.estimate(origin, destination)
        return DistanceResult(
            distance_miles=max(0.0, element.distance_miles),
            duration_minutes=max(0.0, element.duration_minutes),
        )
