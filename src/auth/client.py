"""
OAuth2 authorization-code client driven by a service provider descriptor.

The client owns the parts of the flow that are the same for every
provider: validating construction-time configuration, merging parameter
sets, building the authorization URL, and exchanging the authorization
code at the token endpoint. Everything provider-specific (endpoints,
parameter lists, defaults) comes from the ServiceProvider.

Token storage, refresh and token payload decoding are out of scope; the
decoded token response is returned to the caller as-is.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlencode

import aiohttp
from pydantic import SecretStr

from config.settings import OAuth2Settings, get_oauth2_config
from core.exceptions import (
    ConfigurationError,
    MissingEndpointError,
    MissingParameterError,
    TokenRequestError,
)
from providers.base import AUTHORIZATION, REQUEST_TOKENS, ServiceProvider
from providers.registry import get_provider

logger = logging.getLogger(__name__)


def build_params(
    required: Iterable[str],
    optional: Iterable[str],
    defaults: Mapping[str, Any],
    *sources: Mapping[str, Any],
) -> dict[str, str]:
    """Merge parameter sources into the parameters of one request.

    Defaults are applied first, then each source in order, so later sources
    win. Only required and optional names are kept, in that order, and
    ``None`` values are dropped.

    Args:
        required: Parameter names that must end up with a value.
        optional: Parameter names that may be sent.
        defaults: Provider default values.
        *sources: Further values, e.g. configuration then call options.

    Returns:
        Ordered mapping of parameter name to value.

    Raises:
        MissingParameterError: If a required parameter has no value.
    """
    required = list(required)
    merged: dict[str, Any] = dict(defaults)
    for source in sources:
        for key, value in source.items():
            if value is not None:
                merged[key] = value

    missing = [name for name in required if merged.get(name) is None]
    if missing:
        raise MissingParameterError(
            f"Missing required parameters: {', '.join(missing)}"
        )

    params: dict[str, str] = {}
    for name in [*required, *optional]:
        if name not in params and merged.get(name) is not None:
            params[name] = str(merged[name])
    return params


class OAuth2Client:
    """OAuth2 client for the authorization-code flow.

    Args:
        config: Optional settings instance. If None, uses global config.
        provider: Optional provider descriptor. If None, it is looked up
                  by ``config.service_provider``.

    Raises:
        ConfigurationError: If a field the provider requires at
                            construction is missing.
        ProviderNotFoundError: If the configured provider is unknown.
    """

    def __init__(
        self,
        config: Optional[OAuth2Settings] = None,
        provider: Optional[ServiceProvider] = None,
    ) -> None:
        self.config = config or get_oauth2_config()
        self.provider = provider or get_provider(self.config.service_provider)
        self._validate_init()
        logger.info(f"OAuth2 client initialized for provider {self.provider.name}")

    def _validate_init(self) -> None:
        missing = [
            name
            for name in self.provider.required_init_fields()
            if getattr(self.config, name, None) is None
        ]
        if missing:
            logger.error(
                "OAuth2 client configuration incomplete",
                extra={"missing_config": missing},
            )
            raise ConfigurationError(
                f"{self.provider.name} provider requires configuration: "
                f"{', '.join(name.upper() for name in missing)}"
            )

    def init_values(self) -> dict[str, Any]:
        """Return the configured values the provider accepts at construction."""
        values: dict[str, Any] = {}
        fields = [
            *self.provider.required_init_fields(),
            *self.provider.optional_init_fields(),
        ]
        for name in fields:
            value = getattr(self.config, name, None)
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            if value is not None:
                values[name] = value
        return values

    def authorization_url(self, **options: Any) -> str:
        """Build the URL to send the user agent to for login.

        Args:
            **options: Per-call values. Authorization parameters (e.g.
                       ``scope``, ``prompt``, ``state``) override the
                       configured ones; provider options such as
                       ``tenant`` apply to this call only.

        Returns:
            The authorization URL including its query string.

        Raises:
            MissingEndpointError: If the provider has no endpoint for
                                  this call (e.g. tenant unset).
            MissingParameterError: If a required parameter has no value.
        """
        init = self.init_values()
        context = self.provider.begin_action(AUTHORIZATION, init, options)
        endpoint = self.provider.authorization_endpoint(context)
        if not endpoint:
            raise MissingEndpointError(
                f"{self.provider.name} authorization endpoint is not configured"
            )

        params = build_params(
            self.provider.authorization_required_params(),
            self.provider.authorization_optional_params(),
            self.provider.authorization_default_params(),
            init,
            options,
        )
        url = f"{endpoint}?{urlencode(params)}"
        logger.debug(f"Built authorization URL for endpoint {endpoint}")
        return url

    async def request_tokens(self, code: str, **options: Any) -> dict[str, Any]:
        """Exchange an authorization code for tokens.

        Args:
            code: The authorization code from the redirect.
            **options: Per-call values, as for ``authorization_url``.

        Returns:
            The decoded token response (access_token, token_type, ...).

        Raises:
            MissingEndpointError: If the provider has no token endpoint
                                  for this call.
            TokenRequestError: If the token endpoint returns an error or
                               cannot be reached.
        """
        init = self.init_values()
        context = self.provider.begin_action(REQUEST_TOKENS, init, options)
        token_endpoint = self.provider.token_endpoint(context)
        if not token_endpoint:
            raise MissingEndpointError(
                f"{self.provider.name} token endpoint is not configured"
            )

        data = build_params(
            self.provider.request_required_params(),
            self.provider.request_optional_params(),
            self.provider.request_default_params(),
            init,
            options,
            {"code": code},
        )

        logger.info(f"Requesting tokens from {token_endpoint}")

        try:
            async with aiohttp.ClientSession() as session:
                start_time = datetime.now(timezone.utc)

                async with session.post(
                    token_endpoint,
                    data=data,
                    timeout=aiohttp.ClientTimeout(total=self.config.request_timeout),
                ) as resp:
                    latency_ms = (
                        datetime.now(timezone.utc) - start_time
                    ).total_seconds() * 1000

                    try:
                        body = await resp.json(content_type=None)
                    except ValueError as e:
                        logger.error(
                            f"Token response ({resp.status}) is not valid JSON: {e}"
                        )
                        raise TokenRequestError(
                            "Token response is not valid JSON", status=resp.status
                        ) from e

                    if not isinstance(body, dict):
                        logger.error(
                            f"Token response ({resp.status}) is not a JSON object"
                        )
                        raise TokenRequestError(
                            "Token response is not a JSON object", status=resp.status
                        )

                    if resp.status == 200:
                        if not body.get("access_token"):
                            raise TokenRequestError(
                                "Token response missing access_token",
                                status=resp.status,
                            )
                        logger.info(
                            f"Token request successful (latency: {latency_ms:.0f}ms)"
                        )
                        return body

                    error = body.get("error", "unknown")
                    error_desc = body.get("error_description", "No description")

                    # Missing consent (AADSTS65001)
                    if "AADSTS65001" in error_desc or "has not consented" in error_desc:
                        logger.error(
                            f"Token request failed ({resp.status}): user has not consented "
                            f"to the requested scopes. Error: {error} - {error_desc}"
                        )
                        raise TokenRequestError(
                            "Token request failed: user consent required. Ensure the app "
                            "registration includes the requested scopes in API Permissions, "
                            "then re-authenticate.",
                            error=error,
                            error_description=error_desc,
                            status=resp.status,
                        )

                    if resp.status == 429:
                        logger.error(
                            f"Token request rate limited (429, latency: {latency_ms:.0f}ms): {error_desc}"
                        )
                    else:
                        logger.error(
                            f"Token request failed ({resp.status}, latency: {latency_ms:.0f}ms): "
                            f"{error} - {error_desc}"
                        )

                    raise TokenRequestError(
                        f"Token request failed: {error}",
                        error=error,
                        error_description=error_desc,
                        status=resp.status,
                    )

        except aiohttp.ClientError as e:
            logger.error(f"Network error during token request: {e}")
            raise TokenRequestError(f"Token request network error: {e}") from e
