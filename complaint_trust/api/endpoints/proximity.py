"""Proximity verification endpoints."""

import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...domain.errors import ProximityFailure, ProximityVerificationError
from ...domain.services.proximity_service import ProximityService
from ...infrastructure.dependencies import get_proximity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proximity", tags=["proximity"])

FAILURE_STATUS_CODES = {
    ProximityFailure.MISSING_INPUT: 400,
    ProximityFailure.INVALID_COORDINATES: 400,
    ProximityFailure.INVALID_THRESHOLD: 400,
    ProximityFailure.BUSINESS_NOT_FOUND: 404,
    ProximityFailure.ADDRESS_UNRESOLVABLE: 422,
    ProximityFailure.GEOCODING_FAILED: 502,
}


class ProximityVerifyRequest(BaseModel):
    """Request model for proximity verification.

    Every field is optional so that missing input is reported as a
    verification failure rather than a schema error.
    """

    business_pk: Optional[int] = Field(None, description="Business to verify against")
    reporter_lat: Optional[Any] = Field(None, description="Reporter latitude in degrees")
    reporter_lng: Optional[Any] = Field(None, description="Reporter longitude in degrees")
    threshold_meters: Optional[Any] = Field(None, description="Maximum distance in meters (default 200)")


class BusinessCoords(BaseModel):
    lat: float
    lng: float


class ProximityVerifyResponse(BaseModel):
    """Response model for a completed verification."""

    ok: bool = True
    tag: str
    distance_meters: float
    threshold_meters: Union[int, float]
    business_coords: BusinessCoords
    business_address: Optional[str] = None
    coords_source: str


@router.post("/verify", response_model=ProximityVerifyResponse)
async def verify_proximity(
    request: ProximityVerifyRequest,
    proximity_service: ProximityService = Depends(get_proximity_service),
):
    """Check whether the reporter is within the threshold of a business.

    Failures return ``{ok: false, error, reason}`` with 400 for bad input,
    404 for an unknown business, 422 for an unresolvable address and 502
    when the geocoding provider fails.
    """
    try:
        result = await proximity_service.verify(
            request.business_pk,
            request.reporter_lat,
            request.reporter_lng,
            threshold_meters=request.threshold_meters,
        )
    except ProximityVerificationError as e:
        logger.info(f"⚠️ Proximity verification failed ({e.reason.value}): {e.message}")
        return JSONResponse(
            status_code=FAILURE_STATUS_CODES[e.reason],
            content={"ok": False, "error": e.message, "reason": e.reason.value},
        )

    return ProximityVerifyResponse(
        tag=result.tag.value,
        distance_meters=result.distance_meters,
        threshold_meters=result.threshold_meters,
        business_coords=BusinessCoords(lat=result.business_coords.lat, lng=result.business_coords.lng),
        business_address=result.business_address,
        coords_source=result.coords_source.value,
    )
