"""Domain model for registered businesses."""

from typing import Optional

from pydantic import BaseModel, Field

from .geo import Coordinates


class Business(BaseModel):
    """A registered establishment that complaints can be filed against."""

    business_pk: int = Field(..., description="Primary key of the business")
    business_name: str = Field(..., description="Registered business name")
    business_address: Optional[str] = Field(None, description="Free-text street address")
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Registered or cached latitude")
    lng: Optional[float] = Field(None, ge=-180, le=180, description="Registered or cached longitude")

    @property
    def registered_coordinates(self) -> Optional[Coordinates]:
        """Coordinates stored on the business, if both halves are present."""
        if self.lat is None or self.lng is None:
            return None
        return Coordinates(lat=self.lat, lng=self.lng)
