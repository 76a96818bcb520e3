"""
Authentication utilities for the OAuth2 redirect.

Provides helpers for reading the authorization response (code or error)
from a redirect URL or an incoming request.
"""

import logging
import secrets
from typing import Any, Mapping, Optional
from urllib.parse import parse_qs, urlsplit

from starlette.requests import Request

from core.exceptions import AuthorizationDeniedError, StateMismatchError

logger = logging.getLogger(__name__)


def get_code_from_params(params: Mapping[str, str]) -> Optional[str]:
    """Return the authorization code from redirect query parameters.

    Args:
        params: Query parameters of the redirect.

    Returns:
        The authorization code, or None if the redirect has none.

    Raises:
        AuthorizationDeniedError: If the provider redirected with an error.
    """
    error = params.get("error")
    if error:
        error_description = params.get("error_description")
        logger.warning(f"Authorization denied: {error} - {error_description}")
        raise AuthorizationDeniedError(error, error_description)

    return params.get("code") or None


def extract_code_from_url(url: str, expected_state: Optional[str] = None) -> str:
    """Extract the authorization code from a pasted redirect URL.

    Args:
        url: The full URL the browser was redirected to.
        expected_state: The state sent with the authorization request. If
                        given, the redirect must echo it back.

    Returns:
        The authorization code.

    Raises:
        AuthorizationDeniedError: If the redirect carries an error.
        StateMismatchError: If the redirect's state is not the expected one.
        ValueError: If no code is found in the URL.
    """
    query = parse_qs(urlsplit(url.strip()).query)
    params = {key: values[0] for key, values in query.items() if values}

    code = get_code_from_params(params)
    if not code:
        raise ValueError("Couldn't find the code in the response URL")

    if expected_state is not None and not secrets.compare_digest(
        params.get("state", "").encode(), expected_state.encode()
    ):
        logger.warning("Redirect state does not match the authorization request")
        raise StateMismatchError("The response URL is not from this login (state mismatch)")
    return code


def get_tenant_override(request: Request) -> Optional[str]:
    """Return the per-request tenant from the ``tenant`` query parameter.

    Args:
        request: The incoming Starlette request.

    Returns:
        The tenant, or None if the request does not override it.
    """
    tenant = request.query_params.get("tenant")
    if tenant:
        logger.debug(f"Tenant override from request: {tenant}")
    return tenant or None


def summarize_token_response(tokens: Mapping[str, Any]) -> dict[str, Any]:
    """Summarize a token response without exposing the tokens themselves.

    Args:
        tokens: The decoded token endpoint response.

    Returns:
        Token type, lifetime, granted scope and which tokens were issued.
    """
    return {
        "token_type": tokens.get("token_type"),
        "expires_in": tokens.get("expires_in"),
        "scope": tokens.get("scope"),
        "has_id_token": bool(tokens.get("id_token")),
        "has_refresh_token": bool(tokens.get("refresh_token")),
    }
