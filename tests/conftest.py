"""Pytest configuration and shared fixtures for saas-client-core tests."""

import pytest

from saas_client_core.testing.fixtures import (  # noqa: F401
    mock_api_credentials,
    mock_oauth_credentials,
    recorded_sleeps,
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related and vendor environment variables before each test.

    This prevents test pollution when testing credential resolution.
    """
    import os

    test_prefixes = ("TEST_", "API_", "CLIENT_", "GUSTO_", "FRONT_", "RAMP_", "TWILIO_", "DISCOURSE_", "ZENDESK_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield
