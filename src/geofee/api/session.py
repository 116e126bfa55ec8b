"""Per-session access to the location store."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from ..services.engine import GeoEngine, get_engine
from ..services.location_store import LocationStore

SESSION_HEADER = "X-Session-ID"
SESSION_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


def get_session_store(
    session_id: str = Header(..., alias=SESSION_HEADER, min_length=8, max_length=128, pattern=SESSION_ID_PATTERN),
    engine: GeoEngine = Depends(get_engine),
) -> LocationStore:
    return engine.location_store.for_session(session_id)


def get_optional_session_store(
    session_id: Optional[str] = Header(
        default=None, alias=SESSION_HEADER, min_length=8, max_length=128, pattern=SESSION_ID_PATTERN
    ),
    engine: GeoEngine = Depends(get_engine),
) -> Optional[LocationStore]:
    if session_id is None:
        return None
    return engine.location_store.for_session(session_id)
