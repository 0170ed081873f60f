"""Google Geocoding API implementation of the geocoder port."""

import logging
from typing import Optional

import httpx
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.errors import GeocodingError
from ...domain.models.geo import Coordinates
from ...domain.ports.geocoder import Geocoder, GeocodeResult

logger = logging.getLogger(__name__)


class GoogleGeocodingConfig(BaseModel):
    """Configuration for the Google geocoding adapter."""

    api_key: str = Field(..., description="Google Maps API key (server-side only)")
    base_url: str = Field(default="https://maps.googleapis.com/maps/api", description="API base URL")
    timeout: float = Field(default=5.0, description="Request timeout in seconds")
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")


class GoogleGeocodingAdapter(Geocoder):
    """Google implementation of the geocoder port.

    Resolved addresses are cached with a TTL; empty results are cached too so
    that a bad address does not hit the API on every verification.
    """

    def __init__(
        self,
        config: Optional[GoogleGeocodingConfig] = None,
        provider_name: str = "Google",
    ):
        """Initialize the adapter."""
        self._config = config or GoogleGeocodingConfig(api_key="")
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False
        self._cache: TTLCache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl,
        )

    async def initialize(self) -> None:
        """Create the HTTP client.

        Raises:
            ConnectionError: If no API key is configured
        """
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Google geocoder: GOOGLE_MAPS_API_KEY is not set")
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={"Accept": "application/json"},
            )
        self._initialized = True
        logger.info("✅ Google geocoder initialized")

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        """Resolve an address with the Geocoding API."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        cache_key = " ".join(address.split()).lower()
        if cache_key in self._cache:
            return self._cache[cache_key]

        try:
            response = await self._client.get(
                "/geocode/json",
                params={"address": address, "key": self._config.api_key},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise GeocodingError(f"Geocoding request timed out: {e}")
        except httpx.HTTPError as e:
            raise GeocodingError(f"Geocoding request failed: {e}")
        except ValueError as e:
            raise GeocodingError(f"Invalid geocoding response: {e}")

        status = payload.get("status")
        if status == "ZERO_RESULTS":
            logger.info(f"🔍 No geocoding results for '{address}'")
            self._cache[cache_key] = None
            return None
        if status != "OK":
            message = payload.get("error_message") or "no error message"
            raise GeocodingError(f"Geocoding provider returned {status}: {message}")

        result = self._parse_first_result(payload.get("results") or [])
        self._cache[cache_key] = result
        return result

    def _parse_first_result(self, results: list) -> Optional[GeocodeResult]:
        """Take the first result's location, or None if it is malformed."""
        if not results:
            return None

        first = results[0] or {}
        geometry = first.get("geometry") or {}
        location = geometry.get("location") or {}
        lat, lng = location.get("lat"), location.get("lng")
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            return None

        return GeocodeResult(
            coords=Coordinates(lat=lat, lng=lng),
            formatted_address=first.get("formatted_address", ""),
            location_type=geometry.get("location_type", ""),
            metadata={"place_id": first.get("place_id", "")},
        )

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available."""
        return self._initialized and self._client is not None
