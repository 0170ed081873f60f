"""Port interface for address geocoding providers."""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ..models.geo import Coordinates


class GeocodeResult(BaseModel):
    """Best match returned by a geocoding provider."""

    coords: Coordinates = Field(..., description="Resolved coordinates")
    formatted_address: str = Field("", description="Provider's canonical address")
    location_type: str = Field("", description="Provider precision hint (e.g. ROOFTOP)")
    metadata: Dict[str, str] = Field(default_factory=dict, description="Additional provider metadata")


class Geocoder(ABC):
    """Abstract interface for geocoding providers.

    This port defines how the proximity verifier resolves free-text
    business addresses. Concrete implementations are provided in the
    infrastructure layer.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the provider and its resources."""
        pass

    @abstractmethod
    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        """Resolve an address to coordinates.

        Args:
            address: Free-text address

        Returns:
            The best match, or None if the provider found no result

        Raises:
            GeocodingError: If the provider call itself failed
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        pass
