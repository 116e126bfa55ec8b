"""Health endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ...services.engine import GeoEngine, get_engine
from ...services.rate_limiter import DISTANCE_BUCKET, GEOCODE_BUCKET

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/provider", status_code=status.HTTP_200_OK)
def health_provider(engine: GeoEngine = Depends(get_engine)) -> dict:
    """Check the configured mapping provider and local rate-limit headroom."""
    headroom = {
        GEOCODE_BUCKET: engine.rate_limiter.remaining(GEOCODE_BUCKET),
        DISTANCE_BUCKET: engine.rate_limiter.remaining(DISTANCE_BUCKET),
    }
    try:
        healthy = engine.provider.check_health()
        return {"service": engine.provider.name, "healthy": healthy, "rate_limit_remaining": headroom}
    except Exception as e:
        logger.warning(f"Provider health check for {engine.provider.name} failed: {e}")
        return {"service": engine.provider.name, "healthy": False, "error": str(e), "rate_limit_remaining": headroom}
