"""Domain exceptions for the complaint authenticity engine."""

from enum import Enum
from typing import Optional


class ComplaintTrustError(Exception):
    """Base class for all engine errors."""


class InvalidCoordinatesError(ComplaintTrustError, ValueError):
    """Raised when a latitude/longitude pair is missing, non-finite or out of range."""


class InvalidReportError(ComplaintTrustError, ValueError):
    """Raised when a candidate report cannot be accepted for intake."""


class ReportPersistenceError(ComplaintTrustError):
    """Raised when a report and its classification could not be committed."""


class GeocodingError(ComplaintTrustError):
    """Raised by geocoders when the provider call fails (transport, timeout, provider status)."""


class ProximityFailure(str, Enum):
    """Distinguishable causes of a failed proximity verification."""

    MISSING_INPUT = "missing_input"
    INVALID_COORDINATES = "invalid_coordinates"
    INVALID_THRESHOLD = "invalid_threshold"
    BUSINESS_NOT_FOUND = "business_not_found"
    ADDRESS_UNRESOLVABLE = "address_unresolvable"
    GEOCODING_FAILED = "geocoding_failed"

    @property
    def is_input_error(self) -> bool:
        """Whether the failure is caused by the caller's request."""
        return self in (
            ProximityFailure.MISSING_INPUT,
            ProximityFailure.INVALID_COORDINATES,
            ProximityFailure.INVALID_THRESHOLD,
        )


class ProximityVerificationError(ComplaintTrustError):
    """Raised when proximity could not be verified."""

    def __init__(self, reason: ProximityFailure, message: str, business_pk: Optional[int] = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.business_pk = business_pk
