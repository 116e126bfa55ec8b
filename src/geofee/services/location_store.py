"""Short-lived persistence of the last resolved user location."""

from __future__ import annotations

import copy
import logging
import threading
import time
from typing import Any, Callable, Optional, Protocol, Sequence

from ..models.domain import Coordinates, NearbyStore, StoredUserLocation

USER_LOCATION_KEY = "user_location"
NEARBY_STORES_KEY = "nearby_stores"
DEFAULT_LOCATION_TTL_SECONDS = 60 * 60

logger = logging.getLogger(__name__)


class LocationBackend(Protocol):
    def read(self, key: str) -> Optional[Any]: ...

    def write(self, key: str, data: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryBackend:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: dict[str, Any] = {}

    def read(self, key: str) -> Optional[Any]:
        with self._lock:
            return copy.deepcopy(self._documents.get(key))

    def write(self, key: str, data: Any) -> None:
        with self._lock:
            self._documents[key] = copy.deepcopy(data)

    def delete(self, key: str) -> None:
        with self._lock:
            self._documents.pop(key, None)


class LocationStore:
    """Holds the user's location and the derived nearby-stores list for ``ttl_seconds``.

    Records older than the TTL, or that can no longer be parsed, read as
    absent and are purged on load. A ``namespace`` prefixes every document
    key so one backend can hold many sessions side by side.
    """

    def __init__(
        self,
        backend: Optional[LocationBackend] = None,
        ttl_seconds: float = DEFAULT_LOCATION_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        namespace: Optional[str] = None,
    ) -> None:
        self.backend = backend if backend is not None else InMemoryBackend()
        self.ttl_seconds = ttl_seconds
        self.namespace = namespace
        self._clock = clock

    def for_session(self, session_id: str) -> "LocationStore":
        """A store over the same backend whose documents belong to ``session_id`` only."""
        if not session_id:
            raise ValueError("A session id is required for a session-scoped location store.")
        return LocationStore(self.backend, ttl_seconds=self.ttl_seconds, clock=self._clock, namespace=session_id)

    def _key(self, name: str) -> str:
        return f"session-{self.namespace}-{name}" if self.namespace else name

    def _is_fresh(self, saved_at: float) -> bool:
        return self._clock() - saved_at <= self.ttl_seconds

    def save(self, coordinates: Coordinates, address: Optional[str] = None) -> StoredUserLocation:
        location = StoredUserLocation(coordinates=coordinates, resolved_at=self._clock(), address=address)
        self.backend.write(self._key(USER_LOCATION_KEY), location.to_dict())
        return location

    def load(self) -> Optional[StoredUserLocation]:
        data = self.backend.read(self._key(USER_LOCATION_KEY))
        if data is None:
            return None
        try:
            location = StoredUserLocation.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed stored location: {e}")
            self.backend.delete(self._key(USER_LOCATION_KEY))
            return None
        if not self._is_fresh(location.resolved_at):
            logger.debug("Stored location expired, purging")
            self.backend.delete(self._key(USER_LOCATION_KEY))
            return None
        return location

    def save_nearby_stores(self, stores: Sequence[NearbyStore]) -> None:
        self.backend.write(
            self._key(NEARBY_STORES_KEY),
            {"saved_at": self._clock(), "stores": [store.to_dict() for store in stores]},
        )

    def load_nearby_stores(self) -> Optional[list[NearbyStore]]:
        data = self.backend.read(self._key(NEARBY_STORES_KEY))
        if data is None:
            return None
        try:
            saved_at = float(data["saved_at"])
            stores = [NearbyStore.from_dict(item) for item in data["stores"]]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed nearby stores snapshot: {e}")
            self.backend.delete(self._key(NEARBY_STORES_KEY))
            return None
        if not self._is_fresh(saved_at):
            self.backend.delete(self._key(NEARBY_STORES_KEY))
            return None
        return stores

    def clear(self) -> None:
        self.backend.delete(self._key(USER_LOCATION_KEY))
        self.backend.delete(self._key(NEARBY_STORES_KEY))
