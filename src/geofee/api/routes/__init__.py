"""Route group exports."""

from . import delivery, health, location

__all__ = ["delivery", "health", "location"]
