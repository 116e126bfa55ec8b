"""Base contract for mapping provider implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...errors import ProviderError
from ...models.domain import Coordinates, ProviderElement


class MappingProvider(ABC):
    """Contract for the two provider capabilities the engine consumes.

    Distances are reported in miles and durations in minutes, whatever the
    provider's native units are.
    """

    name: str = "provider"

    @abstractmethod
    def geocode(self, address: str) -> Coordinates:
        """Return the provider's best match for ``address``.

        Raises ``ProviderError`` when the provider fails or finds no result.
        """
        raise NotImplementedError

    @abstractmethod
    def distance_matrix(
        self, origin: Coordinates, destinations: Sequence[Coordinates]
    ) -> list[ProviderElement]:
        """Return one element per destination, in order, for driving travel from ``origin``."""
        raise NotImplementedError

    def check_health(self) -> bool:
        """Whether the provider can currently serve requests. Must not spend paid quota."""
        return True


class NullProvider(MappingProvider):
    """Provider used when no mapping service is configured.

    Every call fails, so geocoding surfaces ``ProviderError`` and distance
    resolution degrades to the Haversine estimate.
    """

    name = "unconfigured"

    def geocode(self, address: str) -> Coordinates:
        raise ProviderError("No mapping provider is configured for geocoding.")

    def distance_matrix(
        self, origin: Coordinates, destinations: Sequence[Coordinates]
    ) -> list[ProviderElement]:
        raise ProviderError("No mapping provider is configured for distance lookups.")

    def check_health(self) -> bool:
        return False
