"""Address to coordinate resolution backed by the mapping provider."""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import InvalidInput, ProviderError, RateLimited
from ..models.domain import Coordinates
from .addressing import normalize_address
from .caching import ResolutionCache
from .providers.base import MappingProvider
from .rate_limiter import GEOCODE_BUCKET, RateLimiter
from .telemetry import UsageSink, emit_usage

logger = logging.getLogger(__name__)


class GeocodeResolver:
    """Cache-first, rate-limited geocoder.

    Cache hits consume neither a provider call nor rate-limit budget. There is
    no analytic fallback for addresses, so every failure propagates.
    """

    def __init__(
        self,
        provider: MappingProvider,
        rate_limiter: RateLimiter,
        cache: Optional[ResolutionCache[Coordinates]] = None,
        usage_sink: Optional[UsageSink] = None,
    ) -> None:
        self.provider = provider
        self.rate_limiter = rate_limiter
        self.cache = cache if cache is not None else ResolutionCache("geocode")
        self.usage_sink = usage_sink

    def resolve(self, address: str) -> Coordinates:
        if not isinstance(address, str):
            raise InvalidInput(f"Address must be a string, got {type(address).__name__}")
        key = normalize_address(address)
        if not key:
            raise InvalidInput("Address is empty")

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if not self.rate_limiter.try_acquire(GEOCODE_BUCKET):
            raise RateLimited(GEOCODE_BUCKET, "Geocoding rate limit exceeded")

        try:
            coordinates = self.provider.geocode(address.strip())
        except RateLimited:
            raise
        except ProviderError:
            logger.warning(f"Geocoding failed for '{key}'")
            raise
        except Exception as e:
            logger.warning(f"Geocoding failed for '{key}': {e}")
            raise ProviderError(f"Failed to geocode address: {e}") from e
        if coordinates is None:
            raise ProviderError("Geocoding returned no results")

        self.cache.put(key, coordinates)
        logger.info(f"Geocoded '{key}' via {self.provider.name}")
        emit_usage(self.usage_sink, "geocode", {"address": address.strip()})
        return coordinates
