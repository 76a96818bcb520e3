"""
Authentication module for the OAuth2 authorization-code flow.
"""

from .client import OAuth2Client, build_params

__all__ = ["OAuth2Client", "build_params"]
