"""Domain models for geographic coordinates."""

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Coordinates(BaseModel):
    """A latitude/longitude pair in degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")

    @field_validator("lat", "lng")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("coordinate must be a finite number")
        return value

    def as_tuple(self) -> tuple[float, float]:
        """Return the pair as ``(lat, lng)``."""
        return self.lat, self.lng


class DeviceLocation(Coordinates):
    """Location captured from the reporter's device at submission time."""

    accuracy: Optional[float] = Field(None, ge=0, description="Reported accuracy radius in meters")
    captured_at: Optional[datetime] = Field(None, description="When the device captured the fix")
