"""Per-process composition of limiter, caches, resolvers and facade."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from ..config import Settings, settings as default_settings
from ..models.domain import Coordinates, DistanceResult
from ..persistence.filesystem import JsonFileBackend
from .caching import ResolutionCache
from .distance import DistanceResolver
from .facade import GeoFacade
from .geocoding import GeocodeResolver
from .geospatial import DEFAULT_MINUTES_PER_MILE
from .location_store import InMemoryBackend, LocationStore
from .providers.base import MappingProvider, NullProvider
from .providers.google_maps import GoogleMapsClient
from .rate_limiter import RateLimiter
from .telemetry import LoggingUsageSink, SupabaseUsageSink, UsageSink

logger = logging.getLogger(__name__)


class GeoEngine:
    """Owns the shared mutable state of the engine: one instance per process or tenant."""

    def __init__(
        self,
        provider: MappingProvider,
        rate_limiter: Optional[RateLimiter] = None,
        geocode_cache: Optional[ResolutionCache[Coordinates]] = None,
        distance_cache: Optional[ResolutionCache[tuple[DistanceResult, ...]]] = None,
        location_store: Optional[LocationStore] = None,
        usage_sink: Optional[UsageSink] = None,
        minutes_per_mile: float = DEFAULT_MINUTES_PER_MILE,
    ) -> None:
        self.provider = provider
        self.rate_limiter = rate_limiter or RateLimiter()
        self.usage_sink = usage_sink
        self.geocoder = GeocodeResolver(provider, self.rate_limiter, geocode_cache, usage_sink)
        self.distances = DistanceResolver(
            provider, self.rate_limiter, distance_cache, usage_sink, minutes_per_mile=minutes_per_mile
        )
        self.location_store = location_store or LocationStore()
        self.facade = GeoFacade(self.geocoder, self.distances, self.location_store)

    @classmethod
    def from_settings(cls, config: Settings | None = None, provider: MappingProvider | None = None) -> "GeoEngine":
        config = config or default_settings
        rate_limiter = RateLimiter(config.rate_limit_per_minute, config.rate_limit_window_seconds)
        if provider is None:
            if config.google_maps_api_key:
                provider = GoogleMapsClient(
                    api_key=config.google_maps_api_key,
                    base_url=config.google_maps_base_url,
                    timeout=config.provider_timeout_seconds,
                    max_retries=config.provider_max_retries,
                    backoff_seconds=config.provider_backoff_seconds,
                    rate_limiter=rate_limiter,
                )
            else:
                logger.warning("Google Maps API key not configured; distances will use the Haversine estimate")
                provider = NullProvider()

        backend = JsonFileBackend(config.location_store_path) if config.location_store_path else InMemoryBackend()
        usage_sink: UsageSink = (
            SupabaseUsageSink() if config.supabase_url and config.supabase_key else LoggingUsageSink()
        )
        return cls(
            provider=provider,
            rate_limiter=rate_limiter,
            geocode_cache=ResolutionCache(
                "geocode",
                max_entries=config.geocode_cache_max_entries,
                ttl_seconds=config.geocode_cache_ttl_seconds,
            ),
            distance_cache=ResolutionCache(
                "distance",
                max_entries=config.distance_cache_max_entries,
                ttl_seconds=config.distance_cache_ttl_seconds,
            ),
            location_store=LocationStore(backend, ttl_seconds=config.location_ttl_seconds),
            usage_sink=usage_sink,
            minutes_per_mile=config.fallback_minutes_per_mile,
        )


@lru_cache()
def get_engine() -> GeoEngine:
    """Process-wide engine used by the HTTP layer."""
    return GeoEngine.from_settings()
