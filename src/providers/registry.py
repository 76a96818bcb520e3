"""
Service provider registry.

Maps provider names (as configured in SERVICE_PROVIDER) to descriptor
classes, so the client can be constructed from configuration alone.
"""

import logging
from typing import Dict, Optional, Type

from core.exceptions import ProviderNotFoundError

from .base import ServiceProvider
from .microsoft import MicrosoftProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry of service provider descriptor classes.

    Names are matched case-insensitively. A new descriptor instance is
    returned on every lookup.
    """

    def __init__(self) -> None:
        """Initialize the registry with no providers."""
        self._providers: Dict[str, Type[ServiceProvider]] = {}

    def register(self, provider_cls: Type[ServiceProvider]) -> None:
        """Register a provider class under its ``name``.

        Args:
            provider_cls: The ServiceProvider subclass to register.

        Raises:
            ValueError: If the class does not declare a name.
        """
        if not provider_cls.name:
            raise ValueError(f"{provider_cls.__name__} does not declare a name")
        self._providers[provider_cls.name.lower()] = provider_cls
        logger.debug(f"Registered service provider: {provider_cls.name}")

    def get(self, name: str) -> ServiceProvider:
        """Get a provider instance by name.

        Args:
            name: The provider name to look up.

        Returns:
            A new instance of the registered provider.

        Raises:
            ProviderNotFoundError: If no provider is registered under the name.
        """
        provider_cls = self._providers.get(name.lower())
        if provider_cls is None:
            raise ProviderNotFoundError(
                f"Unknown service provider '{name}'. Available: {', '.join(self.names())}"
            )
        return provider_cls()

    def names(self) -> list[str]:
        """Return the registered provider names."""
        return [cls.name for cls in self._providers.values()]


def create_default_registry() -> ProviderRegistry:
    """Create a registry with the built-in providers."""
    registry = ProviderRegistry()
    registry.register(MicrosoftProvider)
    return registry


_registry: Optional[ProviderRegistry] = None


def get_registry() -> ProviderRegistry:
    """Get the lazily created default registry."""
    global _registry
    if _registry is None:
        _registry = create_default_registry()
    return _registry


def get_provider(name: str) -> ServiceProvider:
    """Look up a provider by name in the default registry."""
    return get_registry().get(name)
