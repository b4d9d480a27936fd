"""SaaS Client Core - Shared runtime library for generated vendor API clients.

Every generated client links against the same pieces:
- Credential store for API keys, basic auth and OAuth2 token pairs
- OAuth2 token refresher safe to share between concurrent tasks
- Request builder mapping typed operations onto httpx requests
- Retry transport with bounded exponential backoff
- Lazy cursor paginator

Example:
    ```python
    from saas_client_core import ApiClient
    from saas_client_core.vendors import GUSTO

    async with ApiClient.from_env(GUSTO, refresh_token="...") as client:
        me = await client.request("GET", "/v1/me")
    ```
"""

__version__ = "0.1.0"

from saas_client_core.auth import (  # noqa: E402
    ApiKey,
    AuthError,
    BasicAuth,
    CredentialNotFoundError,
    CredentialResolver,
    OAuth2,
    TokenManager,
)
from saas_client_core.client import ApiClient  # noqa: E402
from saas_client_core.config import AuthScheme, ClientConfig, EnvVars  # noqa: E402
from saas_client_core.errors import (  # noqa: E402
    ClientCoreError,
    HttpError,
    SerializationError,
    TransportError,
    ValidationError,
)
from saas_client_core.pagination import Paginator  # noqa: E402
from saas_client_core.transport import RetryPolicy  # noqa: E402

__all__ = [
    "ApiClient",
    "ApiKey",
    "AuthError",
    "AuthScheme",
    "BasicAuth",
    "ClientConfig",
    "ClientCoreError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "EnvVars",
    "HttpError",
    "OAuth2",
    "Paginator",
    "RetryPolicy",
    "SerializationError",
    "TokenManager",
    "TransportError",
    "ValidationError",
    "__version__",
]
