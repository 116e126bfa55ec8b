"""Delivery fee and nearby-store endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ...config import settings
from ...errors import GeoEngineError
from ...schemas.delivery import (
    ComputeFeeRequest,
    ComputeFeeResponse,
    FeeQuoteRequest,
    FeeQuoteResponse,
    NearbyStoreModel,
    NearbyStoresRequest,
    NearbyStoresResponse,
)
from ...services.engine import GeoEngine, get_engine
from ...services.location_store import LocationStore
from ...services.pricing import (
    compute_fee,
    compute_zone_fee,
    default_pricing_policy,
    qualifies_for_free_delivery,
    round_money,
)
from ..errors import to_http_exception
from ..session import SESSION_HEADER, get_optional_session_store

router = APIRouter(tags=["delivery"])

logger = logging.getLogger(__name__)


@router.post("/delivery/fee", response_model=FeeQuoteResponse, status_code=status.HTTP_200_OK)
def quote_delivery_fee(payload: FeeQuoteRequest, engine: GeoEngine = Depends(get_engine)) -> FeeQuoteResponse:
    policy = payload.policy.to_domain() if payload.policy else default_pricing_policy()
    try:
        quote = engine.facade.fee_and_distance_for_address(
            payload.origin.to_domain(),
            payload.destination.to_domain(),
            policy,
            zone_pricing=payload.zone_pricing,
        )
    except GeoEngineError as exc:
        logger.info(f"Fee quote rejected: {exc}")
        raise to_http_exception(exc) from exc

    free_delivery = None
    if payload.order_subtotal is not None:
        free_delivery = qualifies_for_free_delivery(payload.order_subtotal, policy)
    return FeeQuoteResponse(
        fee=quote.fee,
        display_fee=round_money(quote.fee),
        distance_miles=quote.distance_miles,
        duration_minutes=quote.duration_minutes,
        distance_source=quote.metadata.get("distance_source", "provider"),
        free_delivery=free_delivery,
    )


@router.post("/delivery/fee/compute", response_model=ComputeFeeResponse, status_code=status.HTTP_200_OK)
def compute_delivery_fee(payload: ComputeFeeRequest) -> ComputeFeeResponse:
    policy = payload.policy.to_domain() if payload.policy else default_pricing_policy()
    calculator = compute_zone_fee if payload.zone_pricing else compute_fee
    fee = calculator(payload.distance_miles, policy)
    return ComputeFeeResponse(fee=fee, display_fee=round_money(fee))


@router.post("/stores/nearby", response_model=NearbyStoresResponse, status_code=status.HTTP_200_OK)
def nearby_stores(
    payload: NearbyStoresRequest,
    engine: GeoEngine = Depends(get_engine),
    session_store: Optional[LocationStore] = Depends(get_optional_session_store),
) -> NearbyStoresResponse:
    if payload.remember and session_store is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The {SESSION_HEADER} header is required to remember nearby stores.",
        )
    max_distance = (
        payload.max_distance_miles if payload.max_distance_miles is not None else settings.default_nearby_radius_miles
    )
    stores = engine.facade.nearby_stores(
        payload.user.to_domain(),
        [store.to_domain() for store in payload.stores],
        max_distance_miles=max_distance,
        remember=payload.remember,
        location_store=session_store,
    )
    return NearbyStoresResponse(
        max_distance_miles=max_distance,
        stores=[NearbyStoreModel(**store.to_dict()) for store in stores],
    )
