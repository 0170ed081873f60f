"""Application configuration loaded from the environment."""

import logging
import os
from datetime import timedelta

from pydantic import BaseModel

from ..domain.services.proximity_service import DEFAULT_GEOCODE_TIMEOUT_SECONDS, DEFAULT_THRESHOLD_METERS
from ..domain.services.spam_evaluator import SpamRuleConfig

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


class AppConfig(BaseModel):
    """Configuration for the complaint trust service."""

    database_url: str = "sqlite:///./complaint_trust.db"
    database_echo: bool = False
    store_backend: str = "sqlalchemy"
    geocoding_provider: str = "google"
    google_maps_api_key: str = ""
    geocoding_timeout: float = DEFAULT_GEOCODE_TIMEOUT_SECONDS
    geocoding_cache_ttl: int = 3600
    geocoding_cache_maxsize: int = 1000
    proximity_threshold_meters: float = DEFAULT_THRESHOLD_METERS
    spam_rules: SpamRuleConfig = SpamRuleConfig()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        spam_rules = SpamRuleConfig(
            reporter_volume_window=timedelta(hours=_env_int("SPAM_REPORTER_VOLUME_WINDOW_HOURS", 24)),
            reporter_volume_threshold=_env_int("SPAM_REPORTER_VOLUME_THRESHOLD", 5),
            reporter_breadth_window=timedelta(days=_env_int("SPAM_REPORTER_BREADTH_WINDOW_DAYS", 7)),
            reporter_breadth_threshold=_env_int("SPAM_REPORTER_BREADTH_THRESHOLD", 10),
            establishment_volume_window=timedelta(days=_env_int("SPAM_ESTABLISHMENT_VOLUME_WINDOW_DAYS", 7)),
            establishment_volume_threshold=_env_int("SPAM_ESTABLISHMENT_VOLUME_THRESHOLD", 9),
        )

        google_maps_api_key = os.getenv("GOOGLE_MAPS_API_KEY", "")
        if not google_maps_api_key:
            logger.warning("⚠️ GOOGLE_MAPS_API_KEY not found in environment variables")
        else:
            logger.info(f"✅ Google Maps API key loaded: {len(google_maps_api_key)} chars")

        return cls(
            database_url=os.getenv("DATABASE_URL", cls.model_fields["database_url"].default),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            store_backend=os.getenv("STORE_BACKEND", "sqlalchemy").lower(),
            geocoding_provider=os.getenv("GEOCODING_PROVIDER", "google"),
            google_maps_api_key=google_maps_api_key,
            geocoding_timeout=_env_float("GEOCODING_TIMEOUT_SECONDS", DEFAULT_GEOCODE_TIMEOUT_SECONDS),
            geocoding_cache_ttl=_env_int("GEOCODING_CACHE_TTL", 3600),
            geocoding_cache_maxsize=_env_int("GEOCODING_CACHE_MAXSIZE", 1000),
            proximity_threshold_meters=_env_float("PROXIMITY_THRESHOLD_METERS", DEFAULT_THRESHOLD_METERS),
            spam_rules=spam_rules,
        )
