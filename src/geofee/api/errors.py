"""Translation of engine errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..errors import GeoEngineError, InvalidInput, ProviderError, RateLimited

ADDRESS_NOT_FOUND_MESSAGE = "We couldn't find that address. Please check it and try again."


def to_http_exception(exc: GeoEngineError) -> HTTPException:
    if isinstance(exc, InvalidInput):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, RateLimited):
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Address lookups are temporarily limited. Please try again in a minute.",
            headers={"Retry-After": "60"},
        )
    if isinstance(exc, ProviderError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=ADDRESS_NOT_FOUND_MESSAGE)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
