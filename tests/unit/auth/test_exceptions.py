"""Tests for authentication exceptions."""

import pytest

from saas_client_core.auth.exceptions import AuthError, CredentialNotFoundError, TokenRefreshError


class TestAuthError:
    """Test AuthError base exception."""

    def test_exception_message(self):
        """Test that exception message is preserved."""
        with pytest.raises(AuthError) as exc_info:
            raise AuthError("Custom error message")

        assert str(exc_info.value) == "Custom error message"

    def test_status_and_body_default_to_none(self):
        error = AuthError("Test error")

        assert error.status_code is None
        assert error.body is None


class TestCredentialNotFoundError:
    """Test CredentialNotFoundError exception."""

    def test_is_auth_error(self):
        """Test that CredentialNotFoundError is an AuthError."""
        with pytest.raises(AuthError):
            raise CredentialNotFoundError("Test error")

    def test_env_var_name_attribute(self):
        """Test that env_var_name attribute is set."""
        error = CredentialNotFoundError("Test error", env_var_name="GUSTO_CLIENT_ID")

        assert error.env_var_name == "GUSTO_CLIENT_ID"

    def test_env_var_name_optional(self):
        """Test that env_var_name is optional."""
        assert CredentialNotFoundError("Test error").env_var_name is None


class TestTokenRefreshError:
    """Test TokenRefreshError exception."""

    def test_keeps_token_endpoint_response(self):
        error = TokenRefreshError("rejected", status_code=400, body='{"error": "invalid_grant"}')

        assert isinstance(error, AuthError)
        assert error.status_code == 400
        assert "invalid_grant" in error.body
