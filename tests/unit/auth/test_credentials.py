"""Tests for credential resolution.

Covers the CredentialResolver priority chain and how vendor configs turn
resolved values into ApiKey, BasicAuth or OAuth2 credentials.
"""

import pytest

from saas_client_core.auth import ApiKey, BasicAuth, CredentialResolver, OAuth2, resolve_credentials
from saas_client_core.auth.exceptions import AuthError, CredentialNotFoundError
from saas_client_core.vendors import DISCOURSE, FRONT, GUSTO, TWILIO, ZENDESK


@pytest.fixture
def resolver():
    return CredentialResolver(load_dotenv=False)


class TestCredentialResolverInit:
    """Test CredentialResolver initialization."""

    def test_init_default(self):
        """Test default initialization loads dotenv."""
        resolver = CredentialResolver()
        assert resolver._dotenv_loaded

    def test_init_skip_dotenv(self):
        """Test initialization with dotenv loading disabled."""
        resolver = CredentialResolver(load_dotenv=False)
        assert not resolver._dotenv_loaded

    def test_init_with_custom_dotenv_path(self, tmp_path, monkeypatch):
        """Values from a .env file become resolvable."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_DOTENV_KEY=dotenv-value-789\n")
        monkeypatch.delenv("TEST_DOTENV_KEY", raising=False)

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))

        assert resolver._dotenv_loaded
        assert resolver.resolve(env_var_name="TEST_DOTENV_KEY") == "dotenv-value-789"

    def test_dotenv_does_not_override_environment(self, tmp_path, monkeypatch):
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_SHARED_KEY=from-file\n")
        monkeypatch.setenv("TEST_SHARED_KEY", "from-env")

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))

        assert resolver.resolve(env_var_name="TEST_SHARED_KEY") == "from-env"

    def test_missing_dotenv_file_is_not_an_error(self, tmp_path):
        resolver = CredentialResolver(dotenv_path=str(tmp_path / "missing.env"))

        assert resolver._dotenv_loaded


class TestCredentialResolverResolve:
    """Test basic credential resolution."""

    def test_resolve_from_explicit_value(self, resolver, monkeypatch):
        """Explicit value wins over everything else."""
        monkeypatch.setenv("TEST_API_KEY", "env-value")

        result = resolver.resolve(value="explicit-value-123", env_var_name="TEST_API_KEY", default="default")

        assert result == "explicit-value-123"

    def test_resolve_from_environment_variable(self, resolver, monkeypatch):
        monkeypatch.setenv("TEST_API_KEY", "env-value-456")

        assert resolver.resolve(env_var_name="TEST_API_KEY", default="default") == "env-value-456"

    def test_resolve_with_default_value(self, resolver):
        assert resolver.resolve(env_var_name="TEST_NONEXISTENT_VAR", default="default-value") == "default-value"

    def test_resolve_returns_none_when_not_found(self, resolver):
        assert resolver.resolve(env_var_name="TEST_NONEXISTENT_VAR") is None

    def test_empty_environment_variable_counts_as_missing(self, resolver, monkeypatch):
        monkeypatch.setenv("TEST_EMPTY_VAR", "")

        assert resolver.resolve(env_var_name="TEST_EMPTY_VAR", default="fallback") == "fallback"

    def test_resolve_required_raises_when_not_found(self, resolver):
        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolver.resolve(env_var_name="TEST_REQUIRED_VAR", required=True)

        assert exc_info.value.env_var_name == "TEST_REQUIRED_VAR"
        assert "TEST_REQUIRED_VAR" in str(exc_info.value)

    def test_required_failure_is_an_auth_error(self, resolver):
        with pytest.raises(AuthError):
            resolver.resolve(required=True)

    def test_values_are_masked_in_logs(self, resolver, monkeypatch, caplog):
        monkeypatch.setenv("TEST_SECRET", "super-secret-value")

        with caplog.at_level("DEBUG", logger="saas_client_core.auth.credentials"):
            resolver.resolve(env_var_name="TEST_SECRET")

        assert "super-secret-value" not in caplog.text
        assert "TEST_SECRET" in caplog.text
        assert "***" in caplog.text

    def test_unmasked_values_are_logged(self, resolver, caplog):
        with caplog.at_level("DEBUG", logger="saas_client_core.auth.credentials"):
            resolver.resolve(value="https://example.com/callback", mask_in_logs=False)

        assert "https://example.com/callback" in caplog.text


class TestResolveCredentials:
    """Test building credentials for a vendor config."""

    def test_api_key_from_environment(self, resolver, monkeypatch):
        monkeypatch.setenv("FRONT_API_TOKEN", "front-token")

        credentials = resolve_credentials(FRONT, resolver=resolver)

        assert credentials == ApiKey(key="front-token")

    def test_api_key_explicit_value(self, resolver):
        credentials = resolve_credentials(DISCOURSE, resolver=resolver, api_key="discourse-key")

        assert credentials == ApiKey(key="discourse-key")

    def test_vendor_specific_env_var_name(self, resolver, monkeypatch):
        monkeypatch.setenv("ZENDESK_TOKEN", "zendesk-token")

        assert resolve_credentials(ZENDESK, resolver=resolver) == ApiKey(key="zendesk-token")

    def test_missing_api_key_fails(self, resolver):
        """A client must not be constructible without its credential."""
        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolve_credentials(FRONT, resolver=resolver)

        assert exc_info.value.env_var_name == "FRONT_API_TOKEN"

    def test_basic_auth(self, resolver, monkeypatch):
        monkeypatch.setenv("TWILIO_USERNAME", "AC123")
        monkeypatch.setenv("TWILIO_PASSWORD", "auth-token")

        credentials = resolve_credentials(TWILIO, resolver=resolver)

        assert credentials == BasicAuth(username="AC123", password="auth-token")

    def test_basic_auth_missing_password(self, resolver, monkeypatch):
        monkeypatch.setenv("TWILIO_USERNAME", "AC123")

        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolve_credentials(TWILIO, resolver=resolver)

        assert exc_info.value.env_var_name == "TWILIO_PASSWORD"

    def test_oauth2_from_environment(self, resolver, monkeypatch):
        monkeypatch.setenv("GUSTO_CLIENT_ID", "client-id")
        monkeypatch.setenv("GUSTO_CLIENT_SECRET", "client-secret")
        monkeypatch.setenv("GUSTO_REDIRECT_URI", "https://example.com/callback")

        credentials = resolve_credentials(GUSTO, resolver=resolver, access_token="token", refresh_token="refresh")

        assert isinstance(credentials, OAuth2)
        assert credentials.client_id == "client-id"
        assert credentials.client_secret == "client-secret"
        assert credentials.redirect_uri == "https://example.com/callback"
        assert credentials.tokens.access_token == "token"
        assert credentials.tokens.refresh_token == "refresh"
        assert credentials.tokens.expires_at is None

    def test_oauth2_tokens_are_optional(self, resolver):
        """The authorization-code flow starts without any token."""
        credentials = resolve_credentials(
            GUSTO,
            resolver=resolver,
            client_id="id",
            client_secret="secret",
            redirect_uri="https://example.com/callback",
        )

        assert credentials.tokens.access_token == ""
        assert credentials.tokens.refresh_token == ""

    @pytest.mark.parametrize("missing", ["GUSTO_CLIENT_ID", "GUSTO_CLIENT_SECRET", "GUSTO_REDIRECT_URI"])
    def test_oauth2_requires_client_registration(self, resolver, monkeypatch, missing):
        for name in ("GUSTO_CLIENT_ID", "GUSTO_CLIENT_SECRET", "GUSTO_REDIRECT_URI"):
            if name != missing:
                monkeypatch.setenv(name, "value")

        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolve_credentials(GUSTO, resolver=resolver)

        assert exc_info.value.env_var_name == missing

    def test_secrets_hidden_from_repr(self):
        credentials = OAuth2(client_id="id", client_secret="very-secret", redirect_uri="https://example.com")

        assert "very-secret" not in repr(credentials)
        assert "hidden-key" not in repr(ApiKey(key="hidden-key"))
