"""Pre-built pytest fixtures for vendor client tests."""

from unittest.mock import patch

import pytest

from saas_client_core.auth.credentials import ApiKey, OAuth2, TokenPair


@pytest.fixture
def mock_api_credentials() -> ApiKey:
    """A static API key."""
    return ApiKey(key="test-api-key")


@pytest.fixture
def mock_oauth_credentials() -> OAuth2:
    """OAuth2 credentials whose access token has already expired."""
    return OAuth2(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="https://example.com/callback",
        tokens=TokenPair(access_token="expired-token", refresh_token="test-refresh-token", expires_at=0.0),
    )


@pytest.fixture
def recorded_sleeps():
    """Patch asyncio.sleep to return immediately, recording each requested delay."""
    delays: list[float] = []

    async def fake_sleep(delay):
        delays.append(delay)

    with patch("asyncio.sleep", side_effect=fake_sleep):
        yield delays
