"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.ports.geocoder import Geocoder
from ..domain.services.intake_service import IntakeService
from ..domain.services.proximity_service import ProximityService
from ..domain.services.spam_evaluator import SpamPatternEvaluator
from .config import AppConfig
from .geocoding.factory import GeocoderFactory
from .geocoding.google_adapter import GoogleGeocodingConfig
from .persistence.database import create_db_engine, create_session_factory, init_db
from .persistence.memory_store import InMemoryBusinessStore, InMemoryReportStore
from .persistence.sqlalchemy_store import SQLAlchemyBusinessStore, SQLAlchemyReportStore

load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Stores (SQLAlchemy, or in-memory when STORE_BACKEND=memory) and the
    spam evaluator are built eagerly. The geocoder needs an
    event loop to initialize, so the proximity and intake services are
    created on first use.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """Initialize service container."""
        self._config = config or AppConfig.from_env()
        self._services: Dict[str, Any] = {}
        self._geocoder_factory = GeocoderFactory()
        self._setup_services()

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def geocoder_factory(self) -> GeocoderFactory:
        return self._geocoder_factory

    def _setup_services(self):
        """Setup all services and their dependencies."""
        logger.info("🔧 Setting up service container...")

        self._services = {
            'engine': None,
            'spam_evaluator': SpamPatternEvaluator(self._config.spam_rules),
            'proximity_service': None,  # Created on demand
            'intake_service': None,  # Created on demand
        }
        self._setup_stores()

        logger.info("✅ Service container setup completed")

    def _setup_stores(self):
        """Create the report and business stores for the configured backend.

        Raises:
            ValueError: If the backend is unknown
        """
        backend = self._config.store_backend
        if backend == "memory":
            business_store = InMemoryBusinessStore()
            self._services['business_store'] = business_store
            self._services['report_store'] = InMemoryReportStore(business_store)
            logger.warning("⚠️ Using in-memory stores, reports are lost on shutdown")
            return
        if backend != "sqlalchemy":
            raise ValueError(f"Unknown store backend: {backend}")

        engine = create_db_engine(self._config.database_url, echo=self._config.database_echo)
        init_db(engine)
        session_factory = create_session_factory(engine)
        logger.info(f"💾 Database ready ({engine.dialect.name})")

        self._services['engine'] = engine
        self._services['report_store'] = SQLAlchemyReportStore(session_factory)
        self._services['business_store'] = SQLAlchemyBusinessStore(session_factory)

    def _geocoder_config(self, name: str) -> Dict[str, Any]:
        """Provider-specific keyword arguments for ``GeocoderFactory.create_provider``.

        Raises:
            ValueError: If no configuration is known for the provider
        """
        if name == "google":
            return {
                'config': GoogleGeocodingConfig(
                    api_key=self._config.google_maps_api_key,
                    timeout=self._config.geocoding_timeout,
                    cache_ttl=self._config.geocoding_cache_ttl,
                    cache_maxsize=self._config.geocoding_cache_maxsize,
                ),
            }
        raise ValueError(f"No configuration available for geocoding provider '{name}'")

    async def _setup_geocoder(self) -> Optional[Geocoder]:
        """Create the configured geocoder, or None if it cannot be initialized."""
        name = self._config.geocoding_provider
        geocoder = self._geocoder_factory.get_provider(name)
        if geocoder is not None:
            return geocoder

        try:
            logger.info(f"📍 Creating geocoding provider '{name}'...")
            geocoder = await self._geocoder_factory.create_provider(name, **self._geocoder_config(name))
            logger.info("✅ Geocoding provider ready")
            return geocoder
        except (ValueError, RuntimeError) as e:
            logger.warning(f"⚠️ Failed to setup geocoding provider: {e}")
            logger.info("📍 Proximity checks will rely on registered coordinates only")
            return None

    async def _ensure_proximity_service(self) -> ProximityService:
        if self._services['proximity_service'] is None:
            geocoder = await self._setup_geocoder()
            self._services['proximity_service'] = ProximityService(
                self.get('business_store'),
                geocoder=geocoder,
                default_threshold_meters=self._config.proximity_threshold_meters,
                geocode_timeout=self._config.geocoding_timeout,
            )
        return self._services['proximity_service']

    async def _ensure_intake_service(self) -> IntakeService:
        if self._services['intake_service'] is None:
            proximity_service = await self._ensure_proximity_service()
            self._services['intake_service'] = IntakeService(
                self.get('report_store'),
                spam_evaluator=self.get('spam_evaluator'),
                proximity_service=proximity_service,
            )
        return self._services['intake_service']

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    async def get_proximity_service(self) -> ProximityService:
        """Get proximity service with its geocoder."""
        return await self._ensure_proximity_service()

    async def get_intake_service(self) -> IntakeService:
        """Get intake service wired to proximity verification."""
        return await self._ensure_intake_service()

    async def shutdown(self) -> None:
        """Release geocoder clients and database connections."""
        await self._geocoder_factory.shutdown_all()
        if self._services['engine'] is not None:
            self._services['engine'].dispose()
        logger.info("👋 Service container shut down")


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
async def get_proximity_service() -> ProximityService:
    """FastAPI dependency for proximity service."""
    return await get_service_container().get_proximity_service()


async def get_intake_service() -> IntakeService:
    """FastAPI dependency for intake service."""
    return await get_service_container().get_intake_service()
