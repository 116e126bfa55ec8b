"""HTTP client for the Google Maps Geocoding and Distance Matrix web services."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx

from ...config import settings
from ...errors import ProviderError, RateLimited
from ...models.domain import Coordinates, ProviderElement
from ..rate_limiter import DISTANCE_BUCKET, GEOCODE_BUCKET, RateLimiter
from .base import MappingProvider

# Distance Matrix accepts at most 25 destinations per request for a single origin.
DEFAULT_MAX_DESTINATIONS_PER_REQUEST = 25
METERS_PER_MILE = 1609.344

logger = logging.getLogger(__name__)


class GoogleMapsClient(MappingProvider):
    """Google Maps adapter.

    Every billed HTTP request is admitted by ``rate_limiter`` when one is
    given. The resolver that calls ``geocode`` or ``distance_matrix`` has
    already taken the token for the first request; extra Distance Matrix
    chunks and every retry take their own token and raise ``RateLimited``
    when the bucket is spent.
    """

    name = "google_maps"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        max_destinations_per_request: int = DEFAULT_MAX_DESTINATIONS_PER_REQUEST,
        transport: httpx.BaseTransport | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = (base_url or settings.google_maps_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.provider_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.provider_backoff_seconds
        self.max_destinations_per_request = max_destinations_per_request
        self.rate_limiter = rate_limiter
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # A fresh client per call keeps the adapter safe to share across request threads.
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self._transport,
        )

    def _admit(self, bucket: str) -> None:
        if self.rate_limiter is not None and not self.rate_limiter.try_acquire(bucket):
            raise RateLimited(bucket, f"Rate limit exhausted before the next Google Maps {bucket} request")

    def _backoff(self, attempt: int) -> float:
        return self.backoff_seconds * (2 ** (attempt - 1))

    def _get_json(self, endpoint: str, params: dict, bucket: str, prepaid: bool = True) -> dict:
        """GET ``endpoint`` with bounded retries on timeouts, transport errors and 5xx.

        With ``prepaid`` the first request was already admitted by the caller.
        """
        url = f"{self.base_url}/{endpoint}/json"
        client = self._get_client()
        try:
            attempt = 0
            while True:
                if attempt > 0 or not prepaid:
                    self._admit(bucket)
                try:
                    response = client.get(url, params={**params, "key": self.api_key})
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    # Only server-side failures are worth another paid attempt.
                    attempt += 1
                    if e.response.status_code < 500 or attempt > self.max_retries:
                        raise ProviderError(
                            f"Google Maps {endpoint} request failed with HTTP {e.response.status_code}"
                        ) from e
                    wait_time = self._backoff(attempt)
                    logger.debug(
                        f"Google Maps HTTP {e.response.status_code}, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries})"
                    )
                    time.sleep(wait_time)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Google Maps {endpoint} request timed out after {attempt} attempts: {e}")
                        raise ProviderError(f"Google Maps {endpoint} request timed out") from e
                    wait_time = self._backoff(attempt)
                    logger.debug(f"Google Maps timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderError(f"Failed to reach Google Maps at {self.base_url}: {e}") from e
                    wait_time = self._backoff(attempt)
                    logger.debug(f"Google Maps network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise ProviderError(f"Google Maps {endpoint} returned a malformed response") from e
        finally:
            client.close()

    def geocode(self, address: str) -> Coordinates:
        data = self._get_json("geocode", {"address": address}, GEOCODE_BUCKET)
        status = data.get("status")
        results = data.get("results") or []
        if status != "OK" or not results:
            message = data.get("error_message") or "no results"
            raise ProviderError(f"Geocoding failed: {status} ({message})")

        location = results[0].get("geometry", {}).get("location", {})
        try:
            return Coordinates(float(location["lat"]), float(location["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError("Geocoding result is missing a usable location") from e

    def _matrix_chunk(
        self, origin: Coordinates, destinations: Sequence[Coordinates], prepaid: bool = True
    ) -> list[ProviderElement]:
        params = {
            "origins": origin.as_key(),
            "destinations": "|".join(dest.as_key() for dest in destinations),
            "mode": "driving",
            "units": "imperial",
        }
        data = self._get_json("distancematrix", params, DISTANCE_BUCKET, prepaid=prepaid)
        status = data.get("status")
        if status != "OK":
            message = data.get("error_message") or "request rejected"
            raise ProviderError(f"Distance Matrix failed: {status} ({message})")

        rows = data.get("rows") or []
        elements = rows[0].get("elements", []) if rows else []
        if len(elements) != len(destinations):
            raise ProviderError(
                f"Distance Matrix returned {len(elements)} elements for {len(destinations)} destinations"
            )

        parsed: list[ProviderElement] = []
        for element in elements:
            element_status = element.get("status", "UNKNOWN_ERROR")
            if element_status != "OK":
                parsed.append(ProviderElement(0.0, 0.0, element_status))
                continue
            try:
                meters = float(element["distance"]["value"])
                seconds = float(element["duration"]["value"])
            except (KeyError, TypeError, ValueError):
                parsed.append(ProviderElement(0.0, 0.0, "MALFORMED_ELEMENT"))
                continue
            parsed.append(ProviderElement(meters / METERS_PER_MILE, seconds / 60.0, "OK"))
        return parsed

    def distance_matrix(
        self, origin: Coordinates, destinations: Sequence[Coordinates]
    ) -> list[ProviderElement]:
        """Driving distances from ``origin``, chunked to the per-request destination limit."""
        if not destinations:
            return []

        chunk_size = self.max_destinations_per_request
        if len(destinations) > chunk_size:
            logger.info(
                f"Chunking Distance Matrix request: {len(destinations)} destinations "
                f"(max per request: {chunk_size})"
            )
        elements: list[ProviderElement] = []
        for index, start in enumerate(range(0, len(destinations), chunk_size)):
            chunk = destinations[start : start + chunk_size]
            elements.extend(self._matrix_chunk(origin, chunk, prepaid=index == 0))
        return elements

    def check_health(self) -> bool:
        """Check that the Geocoding endpoint is reachable.

        The probe carries no API key, so Google answers ``REQUEST_DENIED`` and
        bills nothing; any well-formed status counts as reachable.
        """
        try:
            with self._get_client() as client:
                response = client.get(f"{self.base_url}/geocode/json", params={"address": "health check"})
                response.raise_for_status()
                return bool(response.json().get("status"))
        except (httpx.HTTPError, ValueError):
            return False
