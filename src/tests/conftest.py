"""
Test configuration for the OAuth2 client tests.

Provides shared fixtures for:
- Environment isolation (no .env, no leaked settings)
- Settings and client construction
- Mock aiohttp sessions and token endpoint responses
"""

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add the source root to path
source_path = Path(__file__).parent.parent
sys.path.insert(0, str(source_path))


# =============================================================================
# Test Constants
# =============================================================================

TEST_TENANT = "contoso"
TEST_CLIENT_ID = "test-client-67890"
TEST_CLIENT_SECRET = "test-secret-abcdef"
TEST_REDIRECT_URI = "http://localhost:8000/auth"

AUTH_ENV_VARS = [
    "SERVICE_PROVIDER",
    "TENANT",
    "TENANT_ID",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "REDIRECT_URI",
    "SCOPE",
    "PROMPT",
    "STATE",
    "REQUEST_TIMEOUT",
    "DEBUG",
]


# =============================================================================
# Auto-use fixtures for environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def prevent_dotenv_loading(monkeypatch, tmp_path):
    """Prevent Pydantic settings from reading .env file during tests.

    This fixture runs automatically before each test to ensure
    environment isolation from the development .env file.
    """
    original_cwd = os.getcwd()

    empty_env = tmp_path / ".env"
    empty_env.write_text("")

    os.chdir(tmp_path)

    yield

    os.chdir(original_cwd)


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """Clear auth environment variables and the cached config singleton."""
    from config.settings import reset_config

    for var in AUTH_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


# =============================================================================
# Environment Variable Fixtures
# =============================================================================


@pytest.fixture
def mock_env_full_auth(monkeypatch):
    """Set all environment variables required by the Microsoft provider."""
    monkeypatch.setenv("SERVICE_PROVIDER", "Microsoft")
    monkeypatch.setenv("TENANT", TEST_TENANT)
    monkeypatch.setenv("CLIENT_ID", TEST_CLIENT_ID)
    monkeypatch.setenv("CLIENT_SECRET", TEST_CLIENT_SECRET)
    monkeypatch.setenv("REDIRECT_URI", TEST_REDIRECT_URI)


@pytest.fixture
def mock_env_missing_tenant(monkeypatch):
    """Set credentials but no tenant."""
    monkeypatch.setenv("CLIENT_ID", TEST_CLIENT_ID)
    monkeypatch.setenv("CLIENT_SECRET", TEST_CLIENT_SECRET)
    monkeypatch.setenv("REDIRECT_URI", TEST_REDIRECT_URI)


# =============================================================================
# Settings, Provider and Client Fixtures
# =============================================================================


@pytest.fixture
def make_settings():
    """Factory fixture to create settings with test defaults.

    Usage:
        settings = make_settings(tenant="fabrikam", scope=None)
    """
    from config.settings import OAuth2Settings

    def _make_settings(**overrides):
        values = {
            "service_provider": "Microsoft",
            "tenant": TEST_TENANT,
            "client_id": TEST_CLIENT_ID,
            "client_secret": TEST_CLIENT_SECRET,
            "redirect_uri": TEST_REDIRECT_URI,
        }
        values.update(overrides)
        return OAuth2Settings(**values)

    return _make_settings


@pytest.fixture
def microsoft_provider():
    """Create a MicrosoftProvider instance for testing."""
    from providers.microsoft import MicrosoftProvider

    return MicrosoftProvider()


@pytest.fixture
def oauth2_client(make_settings):
    """Create an OAuth2Client configured for the test tenant."""
    from auth.client import OAuth2Client

    return OAuth2Client(config=make_settings())


# =============================================================================
# Mock HTTP Response Fixtures
# =============================================================================


@pytest.fixture
def mock_token_success_response():
    """Create a mock successful token response."""
    mock_response = AsyncMock()
    mock_response.status = 200
    mock_response.json = AsyncMock(
        return_value={
            "token_type": "Bearer",
            "access_token": "mock-access-token-xyz",
            "refresh_token": "mock-refresh-token-xyz",
            "id_token": "mock.id.token",
            "expires_in": 3599,
            "scope": "User.Read",
        }
    )
    return mock_response


@pytest.fixture
def mock_token_error_response():
    """Create a mock token error response."""
    mock_response = AsyncMock()
    mock_response.status = 400
    mock_response.json = AsyncMock(
        return_value={
            "error": "invalid_grant",
            "error_description": "AADSTS70008: The provided authorization code or refresh token has expired.",
        }
    )
    return mock_response


@pytest.fixture
def mock_token_consent_response():
    """Create a mock token response for missing consent."""
    mock_response = AsyncMock()
    mock_response.status = 400
    mock_response.json = AsyncMock(
        return_value={
            "error": "invalid_grant",
            "error_description": "AADSTS65001: The user or administrator has not consented to use the application.",
        }
    )
    return mock_response


def create_mock_session_with_capture(mock_response, captured):
    """Create a mock aiohttp.ClientSession that captures POST url and data."""

    @asynccontextmanager
    async def mock_post(url, *args, **kwargs):
        captured["url"] = url
        captured["data"] = dict(kwargs.get("data", {}))
        yield mock_response

    mock_session = MagicMock()
    mock_session.post = mock_post

    mock_client = MagicMock()
    mock_client.return_value.__aenter__ = AsyncMock(return_value=mock_session)
    mock_client.return_value.__aexit__ = AsyncMock(return_value=None)

    return mock_client


@pytest.fixture
def mock_session_factory():
    """Factory for creating capturing mock sessions."""
    return create_mock_session_with_capture
