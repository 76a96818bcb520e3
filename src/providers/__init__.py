"""
OAuth2 service provider descriptors.
"""

from .base import AUTHORIZATION, REQUEST_TOKENS, ActionContext, ServiceProvider
from .microsoft import MicrosoftActionContext, MicrosoftProvider
from .registry import ProviderRegistry, get_provider, get_registry

__all__ = [
    "AUTHORIZATION",
    "REQUEST_TOKENS",
    "ActionContext",
    "ServiceProvider",
    "MicrosoftActionContext",
    "MicrosoftProvider",
    "ProviderRegistry",
    "get_provider",
    "get_registry",
]
