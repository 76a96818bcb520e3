"""
Tests for OAuth2 settings loading.
"""

import sys
from pathlib import Path

# Add source root to path
source_path = Path(__file__).parent.parent
sys.path.insert(0, str(source_path))

TEST_TENANT = "contoso"
TEST_CLIENT_ID = "test-client-67890"
TEST_CLIENT_SECRET = "test-secret-abcdef"


class TestSettingsFromEnvironment:
    """Environment loading tests."""

    def test_loads_full_auth_env(self, mock_env_full_auth):
        """Verify all values are read from the environment."""
        from config.settings import get_oauth2_config

        config = get_oauth2_config()

        assert config.service_provider == "Microsoft"
        assert config.tenant == TEST_TENANT
        assert config.client_id == TEST_CLIENT_ID
        assert config.client_secret.get_secret_value() == TEST_CLIENT_SECRET

    def test_tenant_id_alias(self, monkeypatch):
        """Verify TENANT_ID is accepted as the tenant variable."""
        from config.settings import OAuth2Settings

        monkeypatch.setenv("TENANT_ID", "fabrikam")

        assert OAuth2Settings().tenant == "fabrikam"

    def test_defaults(self):
        """Verify defaults when nothing is configured."""
        from config.settings import OAuth2Settings

        config = OAuth2Settings()

        assert config.service_provider == "Microsoft"
        assert config.tenant is None
        assert config.scope is None
        assert config.request_timeout == 10.0

    def test_secret_not_in_repr(self, mock_env_full_auth):
        """Verify the client secret is masked."""
        from config.settings import get_oauth2_config

        assert TEST_CLIENT_SECRET not in repr(get_oauth2_config())

    def test_reads_dotenv_file(self, tmp_path):
        """Verify values are read from a .env file in the working directory."""
        from config.settings import OAuth2Settings

        (tmp_path / ".env").write_text("TENANT=from-dotenv\nPROMPT=login\n")

        config = OAuth2Settings()

        assert config.tenant == "from-dotenv"
        assert config.prompt == "login"


class TestConfigSingleton:
    """Global config injection tests."""

    def test_injected_config_is_returned(self, make_settings):
        """Verify an injected config becomes the global config."""
        from config.settings import get_oauth2_config

        injected = make_settings(tenant="fabrikam")

        assert get_oauth2_config(injected) is injected
        assert get_oauth2_config() is injected

    def test_reset_config(self, make_settings):
        """Verify reset clears the cached config."""
        from config.settings import get_oauth2_config, reset_config

        injected = make_settings()
        get_oauth2_config(injected)
        reset_config()

        assert get_oauth2_config() is not injected
