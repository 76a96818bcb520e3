"""
Configuration settings for the OAuth2 client.

This module provides the construction-time configuration for the OAuth2
client: the selected service provider, the application credentials, and
the settings of the example web server.
"""

from typing import Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class OAuth2Settings(BaseSettings):
    """OAuth2 client configuration.

    This configuration includes:
    - Service provider selection (e.g. "Microsoft")
    - Application credentials (client ID, client secret, redirect URI)
    - Provider-specific values (tenant, prompt)
    - Web server settings (host, port, debug)

    Values are read from the environment or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables
        populate_by_name=True,
    )

    # Provider selection
    service_provider: str = Field(
        default="Microsoft", description="Registered service provider name"
    )

    # Application credentials
    client_id: Optional[str] = Field(
        default=None, description="Application (client) ID"
    )
    client_secret: Optional[SecretStr] = Field(
        default=None, description="OAuth 2.0 client secret"
    )
    redirect_uri: Optional[str] = Field(
        default=None,
        description="Redirect URI registered with the identity provider",
    )

    # Provider-specific values
    tenant: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("tenant", "TENANT", "TENANT_ID"),
        description="Azure AD tenant (directory) ID",
    )
    scope: Optional[str] = Field(
        default=None,
        description="Space-separated scopes (provider default applies when unset)",
    )
    prompt: Optional[str] = Field(
        default=None, description="Login prompt behaviour, e.g. 'login'"
    )
    state: Optional[str] = Field(
        default=None, description="Opaque value echoed back on the redirect"
    )
    request_timeout: float = Field(
        default=10.0, description="Token request timeout in seconds"
    )

    # Server settings
    host: str = Field(default="127.0.0.1", description="Host to bind to")
    port: int = Field(default=8000, description="Port to bind to")
    debug: bool = Field(default=False, description="Enable debug mode")


# Global configuration instance - lazy initialized
_oauth2_config: OAuth2Settings | None = None


def get_oauth2_config(config: OAuth2Settings | None = None) -> OAuth2Settings:
    """Get the global OAuth2 configuration with optional injection.

    Args:
        config: Optional config instance to inject (useful for testing).
                If provided, sets this as the global config.

    Returns:
        The global OAuth2Settings instance.
    """
    global _oauth2_config
    if config is not None:
        _oauth2_config = config
    if _oauth2_config is None:
        _oauth2_config = OAuth2Settings()
    return _oauth2_config


def reset_config() -> None:
    """Reset the config singleton for testing.

    This clears the cached config instance, allowing a fresh config
    to be created on the next call to get_oauth2_config().
    """
    global _oauth2_config
    _oauth2_config = None
