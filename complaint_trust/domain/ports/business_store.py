"""Port interface for registered business lookups."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.business import Business
from ..models.geo import Coordinates


class BusinessStore(ABC):
    """Read access to businesses plus the coordinate cache write-back."""

    @abstractmethod
    def get_business(self, business_pk: int) -> Optional[Business]:
        """Get a business by primary key."""
        pass

    @abstractmethod
    def save_coordinates(self, business_pk: int, coords: Coordinates) -> None:
        """Store resolved coordinates on a business (last write wins)."""
        pass

    @abstractmethod
    def add_business(
        self,
        business_name: str,
        business_address: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> Business:
        """Register a business and return it with its assigned primary key."""
        pass
