"""Testing utilities for vendor clients.

This module provides pytest fixtures, mock factories, and test helpers
to make testing generated clients easier.

Modules:
    fixtures: Pre-built pytest fixtures
    factories: Mock response and handler factories

Example:
    ```python
    import httpx

    from saas_client_core.testing import RecordingHandler, create_error_response


    async def test_client_handles_404(mock_api_credentials):
        handler = RecordingHandler(create_error_response(404))
        client = MyClient(config, mock_api_credentials, transport=httpx.MockTransport(handler))
        ...
    ```
"""

from saas_client_core.testing.factories import RecordingHandler, create_error_response, create_mock_response

__all__ = ["RecordingHandler", "create_error_response", "create_mock_response"]
