"""Session user location endpoints.

Every request names its session with the ``X-Session-ID`` header; a session
only ever sees the location it saved itself.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...errors import GeoEngineError
from ...schemas.delivery import NearbyStoreModel
from ...schemas.location import SaveLocationRequest, StoredLocationResponse
from ...services.engine import GeoEngine, get_engine
from ...services.location_store import LocationStore
from ..errors import to_http_exception
from ..session import get_session_store

router = APIRouter(prefix="/location", tags=["location"])


@router.get("", response_model=StoredLocationResponse, status_code=status.HTTP_200_OK)
def get_location(store: LocationStore = Depends(get_session_store)) -> StoredLocationResponse:
    location = store.load()
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No location has been set.")
    nearby = store.load_nearby_stores()
    return StoredLocationResponse(
        **location.to_dict(),
        nearby_stores=[NearbyStoreModel(**item.to_dict()) for item in nearby] if nearby is not None else None,
    )


@router.put("", response_model=StoredLocationResponse, status_code=status.HTTP_200_OK)
def set_location(
    payload: SaveLocationRequest,
    store: LocationStore = Depends(get_session_store),
    engine: GeoEngine = Depends(get_engine),
) -> StoredLocationResponse:
    try:
        location = engine.facade.resolve_user_location(payload.to_domain(), location_store=store)
    except GeoEngineError as exc:
        raise to_http_exception(exc) from exc
    return StoredLocationResponse(**location.to_dict())


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_location(store: LocationStore = Depends(get_session_store)) -> Response:
    store.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
