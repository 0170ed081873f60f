"""Domain service for verifying that a reporter was near the reported business."""

import asyncio
import logging
import math
from typing import Any, Optional, Union

from ..errors import (
    GeocodingError,
    InvalidCoordinatesError,
    ProximityFailure,
    ProximityVerificationError,
)
from ..models.business import Business
from ..models.classification import CoordinateSource, ProximityResult
from ..models.geo import Coordinates
from ..models.tags import Tag
from ..ports.business_store import BusinessStore
from ..ports.geocoder import Geocoder
from .distance import haversine_meters, validate_coordinates

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_METERS = 200
DEFAULT_GEOCODE_TIMEOUT_SECONDS = 5.0
MIN_ADDRESS_LENGTH = 5


class ProximityService:
    """Domain service for location-based authenticity.

    Resolves business coordinates (registered, or geocoded on demand with a
    best-effort write-back) and compares them with the reporter's position.
    Geocoding may block on the network, so callers run this before
    submission and never inside a store transaction.
    """

    def __init__(
        self,
        business_store: BusinessStore,
        geocoder: Optional[Geocoder] = None,
        default_threshold_meters: float = DEFAULT_THRESHOLD_METERS,
        geocode_timeout: float = DEFAULT_GEOCODE_TIMEOUT_SECONDS,
    ):
        """Initialize service.

        Args:
            business_store: Business lookups and coordinate cache
            geocoder: Geocoding provider, or None when geocoding is unavailable
            default_threshold_meters: Threshold used when the caller passes none
            geocode_timeout: Upper bound in seconds for a single geocoding call
        """
        self._business_store = business_store
        self._geocoder = geocoder
        self._default_threshold = default_threshold_meters
        self._geocode_timeout = geocode_timeout
        logger.info(
            f"🔧 ProximityService initialized (geocoder="
            f"{geocoder.provider_name if geocoder else 'none'}, threshold={default_threshold_meters}m)"
        )

    @property
    def default_threshold_meters(self) -> float:
        """Threshold used when the caller passes none."""
        return self._default_threshold

    async def verify(
        self,
        business_pk: Optional[int],
        reporter_lat: Optional[float],
        reporter_lng: Optional[float],
        threshold_meters: Optional[Any] = None,
    ) -> ProximityResult:
        """Verify a reporter's distance from a business.

        Args:
            business_pk: Business to check against
            reporter_lat: Reporter latitude in degrees
            reporter_lng: Reporter longitude in degrees
            threshold_meters: Maximum distance for ``Location Verified``

        Returns:
            Tag, distance and the coordinates used

        Raises:
            ProximityVerificationError: If input is missing/invalid or the
                business coordinates cannot be resolved
        """
        if business_pk is None:
            raise ProximityVerificationError(ProximityFailure.MISSING_INPUT, "Missing business_pk")
        if reporter_lat is None or reporter_lng is None:
            raise ProximityVerificationError(
                ProximityFailure.MISSING_INPUT, "Missing reporter coordinates", business_pk
            )
        try:
            reporter = validate_coordinates(reporter_lat, reporter_lng)
        except InvalidCoordinatesError as e:
            raise ProximityVerificationError(ProximityFailure.INVALID_COORDINATES, str(e), business_pk)

        threshold = self._validate_threshold(threshold_meters, business_pk)

        logger.info(f"📍 Verifying proximity to business {business_pk} (threshold={threshold}m)")

        business = await asyncio.to_thread(self._business_store.get_business, business_pk)
        if business is None:
            raise ProximityVerificationError(
                ProximityFailure.BUSINESS_NOT_FOUND, f"Business {business_pk} not found", business_pk
            )

        coords, source = await self._resolve_coordinates(business)

        distance = haversine_meters(reporter, coords.as_tuple())
        tag = Tag.LOCATION_VERIFIED if distance <= threshold else Tag.FAILED_LOCATION_VERIFICATION

        logger.info(f"✅ Business {business_pk}: {distance:.1f}m from reporter -> {tag.value}")
        return ProximityResult(
            tag=tag,
            distance_meters=distance,
            threshold_meters=threshold,
            business_coords=coords,
            coords_source=source,
            business_address=business.business_address,
        )

    def _validate_threshold(self, threshold_meters: Optional[Any], business_pk: int) -> Union[int, float]:
        """Threshold as a positive finite number; whole meters come back as int."""
        if threshold_meters is None:
            threshold_meters = self._default_threshold
        if isinstance(threshold_meters, bool):
            raise ProximityVerificationError(
                ProximityFailure.INVALID_THRESHOLD, "threshold_meters must be a number", business_pk
            )
        try:
            threshold = float(threshold_meters)
        except (TypeError, ValueError, OverflowError):
            raise ProximityVerificationError(
                ProximityFailure.INVALID_THRESHOLD, "threshold_meters must be a number", business_pk
            )
        if not math.isfinite(threshold) or threshold <= 0:
            raise ProximityVerificationError(
                ProximityFailure.INVALID_THRESHOLD, "threshold_meters must be a positive finite number", business_pk
            )
        return int(threshold) if threshold.is_integer() else threshold

    async def _resolve_coordinates(self, business: Business) -> tuple[Coordinates, CoordinateSource]:
        """Registered coordinates if present, otherwise geocode the address."""
        registered = business.registered_coordinates
        if registered is not None:
            return registered, CoordinateSource.REGISTERED

        address = (business.business_address or "").strip()
        if len(address) < MIN_ADDRESS_LENGTH:
            raise ProximityVerificationError(
                ProximityFailure.ADDRESS_UNRESOLVABLE,
                "Business address is missing or too short",
                business.business_pk,
            )

        if self._geocoder is None:
            raise ProximityVerificationError(
                ProximityFailure.GEOCODING_FAILED,
                "No geocoding provider configured",
                business.business_pk,
            )

        try:
            result = await asyncio.wait_for(self._geocoder.geocode(address), timeout=self._geocode_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"⚠️ Geocoding timed out after {self._geocode_timeout}s for business {business.business_pk}")
            raise ProximityVerificationError(
                ProximityFailure.GEOCODING_FAILED, "Geocoding request timed out", business.business_pk
            )
        except GeocodingError as e:
            logger.warning(f"⚠️ Geocoding failed for business {business.business_pk}: {e}")
            raise ProximityVerificationError(
                ProximityFailure.GEOCODING_FAILED, f"Unable to geocode business address: {e}", business.business_pk
            )

        if result is None:
            raise ProximityVerificationError(
                ProximityFailure.ADDRESS_UNRESOLVABLE,
                "Unable to geocode business address",
                business.business_pk,
            )

        await self._cache_coordinates(business.business_pk, result.coords)
        return result.coords, CoordinateSource.GEOCODED

    async def _cache_coordinates(self, business_pk: int, coords: Coordinates) -> None:
        """Persist geocoded coordinates; failures do not affect verification."""
        try:
            await asyncio.to_thread(self._business_store.save_coordinates, business_pk, coords)
            logger.info(f"💾 Cached geocoded coordinates for business {business_pk}")
        except Exception as e:
            logger.warning(f"⚠️ Could not cache coordinates for business {business_pk}: {e}")
