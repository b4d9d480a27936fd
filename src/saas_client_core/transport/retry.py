"""Retry transport for resilient vendor clients.

`RetryTransport` wraps any httpx async transport and replays a request when
the attempt failed transiently:

| Outcome of attempt n | Next state |
|----------------------|------------|
| 2xx / 3xx, or 4xx other than 429 | done, response returned as-is |
| 429 or 5xx, n < max_attempts | sleep, attempt n + 1 |
| timeout, network error or remote protocol error, n < max_attempts | sleep, attempt n + 1 |
| any other `httpx.TransportError` (e.g. unsupported protocol) | raised immediately |
| anything retryable at n == max_attempts | last response returned / last exception raised |

The delay after attempt n is ``base_delay * 2 ** (n - 1)`` plus up to
``jitter * base_delay`` of random jitter, capped at ``max_delay``. A
``Retry-After`` header can lengthen a delay but never shorten it, and a delay
is never shorter than the one before it.

Only requests whose body is held in memory are replayed; streamed uploads get
exactly one attempt.

## Example

```python
import httpx

from saas_client_core.transport.retry import RetryPolicy, RetryTransport

transport = RetryTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    policy=RetryPolicy(max_attempts=5, base_delay=0.5, max_delay=30),
)

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://api.example.com/contacts")
```
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

from saas_client_core.errors.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Transient transport failures; configuration errors such as UnsupportedProtocol are not retried
RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)

# Request extension holding the number of attempts made so far
ATTEMPTS_EXTENSION = "retry_attempts"


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry configuration owned by a client.

    Args:
        max_attempts: Total attempts including the first one (default: 4)
        base_delay: Delay in seconds after the first failed attempt (default: 1.0)
        max_delay: Upper bound for any single delay (default: 60.0)
        jitter: Fraction of ``base_delay`` added at random, between 0 and 1 (default: 0.5)
    """

    max_attempts: int = 4
    base_delay: float = 1.0
    max_delay: float = 60.0
    jitter: float = 0.5

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValidationError("max_attempts must be at least 1", parameter="max_attempts")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValidationError("retry delays cannot be negative", parameter="base_delay")
        if not 0 <= self.jitter <= 1:
            raise ValidationError("jitter must be between 0 and 1", parameter="jitter")

    @staticmethod
    def is_retryable_status(status_code: int) -> bool:
        return status_code == 429 or 500 <= status_code < 600

    def backoff_delay(self, attempt: int) -> float:
        """Delay to wait after failed attempt number ``attempt`` (1-indexed).

        Default sequence without jitter: 1, 2, 4, 8, ... seconds.
        """
        delay = self.base_delay * (2 ** (attempt - 1))
        if self.jitter:
            delay += random.uniform(0, self.jitter * self.base_delay)
        return min(delay, self.max_delay)


class RetryTransport(httpx.AsyncBaseTransport):
    """Transport that retries transport errors, 429 and 5xx responses with backoff.

    Args:
        wrapped_transport: The underlying transport to wrap
        policy: Retry configuration (default: ``RetryPolicy()``)
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.policy = policy or RetryPolicy()

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying transient failures.

        Returns:
            The first non-retryable response, or the last response once the
            attempt budget is spent.

        Raises:
            httpx.TransportError: If the final attempt failed at the transport level.
        """
        max_attempts = self.policy.max_attempts if self._is_replayable(request) else 1
        attempt = 1
        previous_delay = 0.0

        while True:
            request.extensions[ATTEMPTS_EXTENSION] = attempt
            try:
                response = await self._wrapped_transport.handle_async_request(request)
            except httpx.TransportError as e:
                if attempt >= max_attempts or not isinstance(e, RETRYABLE_ERRORS):
                    raise
                delay = self._next_delay(attempt, previous_delay)
                logger.warning(
                    f"Request {request.method} {request.url} failed with {e!r}, "
                    f"retrying in {delay:.2f}s (attempt {attempt}/{max_attempts})"
                )
            else:
                if attempt >= max_attempts or not self.policy.is_retryable_status(response.status_code):
                    return response
                delay = self._next_delay(attempt, previous_delay, self._parse_retry_after(response))
                await response.aclose()
                logger.warning(
                    f"Request {request.method} {request.url} failed with {response.status_code}, "
                    f"retrying in {delay:.2f}s (attempt {attempt}/{max_attempts})"
                )

            previous_delay = delay
            await asyncio.sleep(delay)
            attempt += 1

    def _next_delay(self, attempt: int, previous_delay: float, retry_after: float | None = None) -> float:
        delay = self.policy.backoff_delay(attempt)
        if retry_after is not None:
            delay = max(delay, retry_after)
        return max(delay, previous_delay)

    @staticmethod
    def _is_replayable(request: httpx.Request) -> bool:
        return isinstance(request.stream, httpx.ByteStream)

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse Retry-After header from response.

        Supports both formats:
        - Delay-seconds: "120" (integer seconds)
        - HTTP-date: "Wed, 21 Oct 2015 07:28:00 GMT"

        Returns:
            Delay in seconds capped at ``max_delay``, or None if the header is
            missing, invalid or in the past
        """
        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None

        try:
            delay = float(int(retry_after))
        except ValueError:
            try:
                retry_date = parsedate_to_datetime(retry_after)
                delay = (retry_date - datetime.now(UTC)).total_seconds()
            except (ValueError, TypeError):
                return None

        # Negative values and past dates (clock skew) are ignored
        if delay < 0:
            return None

        return min(delay, self.policy.max_delay)
