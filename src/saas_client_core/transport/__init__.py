"""Transport layer for vendor clients.

Transport layers wrap httpx's async transports to add behaviour below the
request/response level. `RetryTransport` replays transient failures under a
`RetryPolicy`.

Example:
    ```python
    import httpx

    from saas_client_core.transport import RetryPolicy, RetryTransport

    transport = RetryTransport(
        wrapped_transport=httpx.AsyncHTTPTransport(),
        policy=RetryPolicy(max_attempts=3),
    )
    ```
"""

from saas_client_core.transport.retry import RetryPolicy, RetryTransport

__all__ = ["RetryPolicy", "RetryTransport"]
