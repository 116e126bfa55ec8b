"""Error taxonomy for location resolution and fee pricing."""

from __future__ import annotations


class GeoEngineError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInput(GeoEngineError, ValueError):
    """Empty or malformed address, or coordinates outside the valid range."""


class RateLimited(GeoEngineError):
    """Local admission control denied an outbound provider call."""

    def __init__(self, bucket: str, message: str | None = None) -> None:
        self.bucket = bucket
        super().__init__(message or f"Rate limit exceeded for '{bucket}' provider calls")


class ProviderError(GeoEngineError):
    """The mapping provider failed, timed out, or returned no usable result."""


class ComputationError(GeoEngineError, ValueError):
    """A pricing computation was attempted with an unusable policy."""
