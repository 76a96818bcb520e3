"""
Configuration module for the OAuth2 client.
"""

from .settings import (
    OAuth2Settings,
    get_oauth2_config,
    reset_config,
)

__all__ = [
    "OAuth2Settings",
    "get_oauth2_config",
    "reset_config",
]
