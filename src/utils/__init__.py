"""
Utilities module for the OAuth2 client.
"""

from .auth_utils import (
    extract_code_from_url,
    get_code_from_params,
    get_tenant_override,
    summarize_token_response,
)

__all__ = [
    "extract_code_from_url",
    "get_code_from_params",
    "get_tenant_override",
    "summarize_token_response",
]
