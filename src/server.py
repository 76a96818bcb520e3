"""
Example web app - Azure AD login with the OAuth2 authorization-code flow.

This module implements a minimal Starlette app demonstrating:
- Redirecting the browser to the Azure AD authorization endpoint
- Exchanging the returned authorization code for tokens
- Per-request tenant selection (``/auth?tenant=<tenant>``), carried from the
  redirect to the callback under the OAuth2 ``state`` value
- Health check endpoint for container orchestration

The redirect URI registered with Azure AD must point at ``/auth``,
e.g. ``http://localhost:8000/auth``.

Usage:
    # Run with configuration from the environment / .env
    python server.py

    # Run with debug logging
    python server.py --debug
"""

import argparse
import logging
import secrets
import time
from typing import Any, Optional

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.routing import Route

from auth.client import OAuth2Client
from config.settings import OAuth2Settings, get_oauth2_config
from core.exceptions import (
    AuthorizationDeniedError,
    ConfigurationError,
    MissingParameterError,
    ProviderNotFoundError,
    TokenRequestError,
)
from utils.auth_utils import (
    get_code_from_params,
    get_tenant_override,
    summarize_token_response,
)

# Setup logging - will be reconfigured based on config
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# Pending Logins
# =============================================================================

# Seconds a login may take between the redirect and the callback
LOGIN_STATE_TTL = 600


class PendingLogins:
    """Logins started by this app that are waiting for their callback.

    Each login gets a random ``state`` value that is sent to the
    authorization endpoint and echoed back on the redirect. The options
    chosen for the login (e.g. the tenant) are kept under that value, so
    the callback redeems the code with the same options. An entry can be
    used once and expires after ``ttl`` seconds.
    """

    def __init__(self, ttl: float = LOGIN_STATE_TTL) -> None:
        self.ttl = ttl
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}

    def start(self, options: dict[str, Any]) -> str:
        """Record a new login and return its state value."""
        self._expire()
        state = secrets.token_urlsafe(32)
        self._entries[state] = (time.monotonic() + self.ttl, dict(options))
        return state

    def finish(self, state: Optional[str]) -> Optional[dict[str, Any]]:
        """Remove and return the options of a login, or None if unknown."""
        self._expire()
        if not state:
            return None
        entry = self._entries.pop(state, None)
        return entry[1] if entry else None

    def __len__(self) -> int:
        return len(self._entries)

    def _expire(self) -> None:
        now = time.monotonic()
        for state in [s for s, (expires, _) in self._entries.items() if expires <= now]:
            del self._entries[state]


# =============================================================================
# Request Handlers
# =============================================================================


def build_call_options(request: Request) -> dict[str, Any]:
    """Collect per-request options for the OAuth2 client.

    Args:
        request: The incoming request.

    Returns:
        Options passed to authorization_url / request_tokens.
    """
    options: dict[str, Any] = {}
    tenant = get_tenant_override(request)
    if tenant:
        options["tenant"] = tenant
    prompt = request.query_params.get("prompt")
    if prompt:
        options["prompt"] = prompt
    return options


def create_auth_endpoint(client: OAuth2Client, pending: PendingLogins):
    """Create the handler that starts and completes the login.

    Without a ``code`` query parameter the browser is redirected to the
    authorization endpoint and the login is recorded under a new state
    value. When Azure AD redirects back with a code and a known state, the
    code is exchanged for tokens using the tenant the login started with.

    Args:
        client: The OAuth2 client to use.
        pending: Store of logins waiting for their callback.

    Returns:
        The Starlette endpoint function.
    """

    async def auth(request: Request) -> Response:
        try:
            code = get_code_from_params(request.query_params)
        except AuthorizationDeniedError as e:
            pending.finish(request.query_params.get("state"))
            return JSONResponse(
                content={"error": e.error, "error_description": e.error_description},
                status_code=400,
            )

        try:
            if not code:
                options = build_call_options(request)
                url = client.authorization_url(
                    state=pending.start(options), **options
                )
                return RedirectResponse(url, status_code=302)

            options = pending.finish(request.query_params.get("state"))
            if options is None:
                logger.warning("Callback with unknown or expired state rejected")
                return JSONResponse(
                    content={
                        "error": "invalid_state",
                        "error_description": "Unknown or expired login state",
                    },
                    status_code=400,
                )

            tokens = await client.request_tokens(code, **options)
        except (ConfigurationError, MissingParameterError) as e:
            logger.error(f"OAuth2 flow misconfigured: {e}")
            return JSONResponse(
                content={"error": "configuration_error", "error_description": str(e)},
                status_code=500,
            )
        except TokenRequestError as e:
            return JSONResponse(
                content={
                    "error": e.error or "token_request_failed",
                    "error_description": e.error_description or str(e),
                },
                status_code=502,
            )

        logger.info("Login completed")
        return JSONResponse(content=summarize_token_response(tokens))

    return auth


async def health_check(request: Request) -> JSONResponse:
    """Simple health check endpoint for container orchestration."""
    return JSONResponse(
        content={"status": "healthy", "service": "entra-oauth2-provider"},
    )


# =============================================================================
# App Initialization
# =============================================================================


def create_app(
    config: Optional[OAuth2Settings] = None,
    client: Optional[OAuth2Client] = None,
    pending: Optional[PendingLogins] = None,
) -> Starlette:
    """Create and configure the Starlette app.

    Args:
        config: Optional config instance. If None, uses global config.
        client: Optional OAuth2 client. If None, one is built from config.
        pending: Optional store of started logins. If None, a new one is used.

    Returns:
        Configured Starlette app.

    Raises:
        ConfigurationError: If configuration validation fails.
        ProviderNotFoundError: If the configured provider is unknown.
    """
    config = config or get_oauth2_config()

    # Configure logging based on debug setting
    log_level = logging.DEBUG if config.debug else logging.INFO
    logging.getLogger().setLevel(log_level)

    client = client or OAuth2Client(config=config)
    pending = pending if pending is not None else PendingLogins()

    routes = [
        Route("/auth", create_auth_endpoint(client, pending), methods=["GET"], name="auth"),
        Route("/health", health_check, methods=["GET"], name="health_check"),
    ]
    app = Starlette(debug=config.debug, routes=routes)

    logger.info(f"App created for provider {client.provider.name}")
    return app


# =============================================================================
# CLI Entry Point
# =============================================================================


def main() -> None:
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(description="Azure AD OAuth2 login example")
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to (default: HOST setting, 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port to bind to (default: PORT setting, 8000)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    args = parser.parse_args()

    # Build config overrides from CLI
    overrides: dict[str, Any] = {}
    if args.debug:
        overrides["debug"] = True
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port

    base_config = get_oauth2_config()
    config = base_config.model_copy(update=overrides) if overrides else base_config

    try:
        app = create_app(config=config)
    except (ConfigurationError, ProviderNotFoundError) as e:
        print(f"Failed to create app: {e}")
        return

    print("Starting Azure AD OAuth2 login example")
    print(f"Provider: {config.service_provider}")
    print(f"Debug: {config.debug}")
    print(f"Host: {config.host}")
    print(f"Port: {config.port}")
    print("-" * 50)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
