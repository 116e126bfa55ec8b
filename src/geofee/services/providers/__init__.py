"""Mapping provider adapters."""

from .base import MappingProvider, NullProvider
from .google_maps import GoogleMapsClient

__all__ = ["MappingProvider", "NullProvider", "GoogleMapsClient"]
