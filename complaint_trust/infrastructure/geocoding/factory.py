"""Factory for creating and managing geocoding providers."""

from typing import Any, Dict, Optional, Type

from ...domain.ports.geocoder import Geocoder
from .google_adapter import GoogleGeocodingAdapter


class GeocoderFactory:
    """Factory for creating and managing geocoding providers.

    This factory maintains a registry of available geocoders
    and handles their lifecycle (initialization, shutdown).
    """

    def __init__(self):
        """Initialize the factory."""
        self._provider_registry: Dict[str, Type[Geocoder]] = {}
        self._active_providers: Dict[str, Geocoder] = {}

        self.register_provider("google", GoogleGeocodingAdapter)

    def register_provider(self, name: str, provider_class: Type[Geocoder]) -> None:
        """Register a new geocoder class.

        Args:
            name: Unique identifier for the provider
            provider_class: The provider class to register

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._provider_registry:
            raise ValueError(f"Provider {name} already registered")
        self._provider_registry[name] = provider_class

    async def create_provider(self, name: str, **config: Any) -> Geocoder:
        """Create and initialize a new geocoder instance.

        Args:
            name: Name of the provider to create
            **config: Provider-specific configuration

        Returns:
            Initialized provider instance

        Raises:
            ValueError: If provider not found
            RuntimeError: If initialization fails
        """
        if name not in self._provider_registry:
            raise ValueError(f"Provider {name} not registered")

        provider = self._provider_registry[name](**config)
        try:
            await provider.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize provider {name}: {e}")

        self._active_providers[name] = provider
        return provider

    def get_provider(self, name: str) -> Optional[Geocoder]:
        """Get an active provider instance by name."""
        return self._active_providers.get(name)

    async def shutdown_provider(self, name: str) -> None:
        """Shutdown a specific provider."""
        provider = self._active_providers.pop(name, None)
        if provider:
            await provider.shutdown()

    async def shutdown_all(self) -> None:
        """Shutdown all active providers."""
        for name in list(self._active_providers.keys()):
            await self.shutdown_provider(name)

    def list_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: bool(self.get_provider(name))
            for name in self._provider_registry
        }
