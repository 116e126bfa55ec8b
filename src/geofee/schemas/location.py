"""Stored user location schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from .delivery import LocationInput, NearbyStoreModel


class SaveLocationRequest(LocationInput):
    pass


class StoredLocationResponse(BaseModel):
    latitude: float
    longitude: float
    address: Optional[str] = None
    resolved_at: float
    nearby_stores: Optional[List[NearbyStoreModel]] = None
