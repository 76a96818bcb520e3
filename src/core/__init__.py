"""
Core module for shared OAuth2 client components.
"""

from .exceptions import (
    AuthorizationDeniedError,
    ConfigurationError,
    MissingEndpointError,
    MissingParameterError,
    OAuth2ClientError,
    ProviderNotFoundError,
    StateMismatchError,
    TokenRequestError,
)

__all__ = [
    "OAuth2ClientError",
    "ConfigurationError",
    "MissingEndpointError",
    "MissingParameterError",
    "ProviderNotFoundError",
    "StateMismatchError",
    "TokenRequestError",
    "AuthorizationDeniedError",
]
