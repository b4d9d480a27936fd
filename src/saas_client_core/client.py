"""Base client for generated vendor API clients.

`ApiClient` owns one vendor's credentials, request builder, retrying HTTP
transport and (for OAuth2 vendors) token manager. Generated clients subclass
it and implement each endpoint as a thin call to `request` or `paginate`:

```python
class ContactsClient(ApiClient):
    async def create_contact(self, body: CreateContact) -> Contact:
        return await self.request("POST", "/contacts", body=body, response_model=Contact)


async with ContactsClient.from_env(vendors.FRONT) as client:
    contact = await client.create_contact(CreateContact(email="a@example.com"))
```

One instance may be shared by any number of concurrent tasks.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from saas_client_core.auth.credentials import (
    ApiKey,
    BasicAuth,
    CredentialResolver,
    Credentials,
    OAuth2,
    resolve_credentials,
)
from saas_client_core.auth.oauth import TokenManager
from saas_client_core.config import AuthScheme, ClientConfig
from saas_client_core.errors.exceptions import TransportError, ValidationError
from saas_client_core.errors.handler import raise_for_status
from saas_client_core.pagination import CursorExtractor, Paginator, cursor_at
from saas_client_core.request import AuthValue, RequestBuilder, is_absolute_url
from saas_client_core.serialization import decode_response
from saas_client_core.transport.retry import ATTEMPTS_EXTENSION, RetryTransport

logger = logging.getLogger(__name__)


class ApiClient:
    """Entrypoint for interacting with one vendor API.

    Args:
        config: Vendor configuration.
        credentials: Credentials matching the vendor's auth scheme.
        base_url: Override for ``config.base_url``.
        transport: Innermost httpx transport (default: a real network transport).
            The retry transport is always layered on top of it.
        auto_refresh: Refresh OAuth2 access tokens automatically.
    """

    def __init__(
        self,
        config: ClientConfig,
        credentials: Credentials,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        auto_refresh: bool = True,
    ) -> None:
        self._check_credentials(config, credentials)
        self.config = config
        self.credentials = credentials
        self._builder = RequestBuilder(config, base_url=base_url)
        self._http = httpx.AsyncClient(
            transport=RetryTransport(
                wrapped_transport=transport or httpx.AsyncHTTPTransport(),
                policy=config.retry,
            ),
            timeout=config.timeout,
            headers={"User-Agent": self._builder.user_agent},
        )

        self.token_manager: TokenManager | None = None
        if isinstance(credentials, OAuth2):
            self.token_manager = TokenManager(
                credentials,
                http=self._http,
                token_endpoint=config.token_endpoint,
                user_consent_endpoint=config.user_consent_endpoint,
                auto_refresh=auto_refresh,
            )

    @classmethod
    def from_env(
        cls,
        config: ClientConfig,
        *,
        resolver: CredentialResolver | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        auto_refresh: bool = True,
        **credentials: str | None,
    ):
        """Create a client, filling credentials and base URL from the environment.

        Keyword credentials (``api_key``, ``client_id``, ``refresh_token``, ...)
        win over environment variables. The environment is read here once.

        Raises:
            CredentialNotFoundError: A required credential is not set anywhere.
        """
        resolver = resolver or CredentialResolver()
        resolved = resolve_credentials(config, resolver=resolver, **credentials)
        base_url = resolver.resolve(env_var_name=config.env.host, default=config.base_url, mask_in_logs=False)
        return cls(config, resolved, base_url=base_url, transport=transport, auto_refresh=auto_refresh)

    @staticmethod
    def _check_credentials(config: ClientConfig, credentials: Credentials) -> None:
        if isinstance(credentials, OAuth2) and not config.uses_oauth2:
            raise ValidationError(
                f"{config.name} has no token endpoint for OAuth2 credentials", parameter="credentials"
            )
        if isinstance(credentials, BasicAuth) != (config.auth_scheme is AuthScheme.BASIC):
            raise ValidationError(
                f"{type(credentials).__name__} credentials do not match the {config.auth_scheme.value} auth scheme",
                parameter="credentials",
            )

    @property
    def base_url(self) -> str:
        return self._builder.base_url

    def set_base_url(self, base_url: str) -> None:
        """Point the client at a different host, e.g. a sandbox."""
        self._builder.base_url = base_url

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _auth_value(self) -> AuthValue:
        if isinstance(self.credentials, ApiKey):
            return self.credentials.key
        if isinstance(self.credentials, BasicAuth):
            return (self.credentials.username, self.credentials.password)
        return await self.token_manager.get_valid_access_token()

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._http.send(request)
        except httpx.TransportError as e:
            raise TransportError(
                f"{request.method} {request.url} failed: {e!r}", attempts=request.extensions.get(ATTEMPTS_EXTENSION)
            ) from e

    async def request_raw(
        self,
        method: str,
        path: str,
        *,
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and return the raw response, whatever its status.

        A 401 on an OAuth2 request triggers one token refresh and one replay.

        Raises:
            AuthError: No usable credential.
            TransportError: Connection failure or timeout after all retries.
            ValidationError: Invalid path parameters.
            SerializationError: The body cannot be encoded.
        """
        auth = await self._auth_value()
        build = dict(path_params=path_params, query=query, body=body, headers=headers)
        response = await self._send(self._builder.build(method, path, auth=auth, **build))

        if response.status_code == 401 and self.token_manager is not None:
            fresh = await self.token_manager.refresh_if_current(auth)
            if fresh is not None and fresh != auth:
                logger.info(f"{method.upper()} {path} was unauthorized, retrying with a refreshed token")
                await response.aclose()
                response = await self._send(self._builder.build(method, path, auth=fresh, **build))

        return response

    async def request(
        self,
        method: str,
        path: str,
        *,
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        response_model: Any = None,
    ) -> Any:
        """Send a request and decode the response.

        Returns:
            ``response_model`` instance, or the parsed JSON when no model is given.

        Raises:
            HttpError: Non-2xx response (subclass by status code).
            SerializationError: The response does not decode into ``response_model``.
            Everything `request_raw` raises.
        """
        response = await self.request_raw(
            method, path, path_params=path_params, query=query, body=body, headers=headers
        )
        raise_for_status(response)
        return decode_response(response, response_model)

    def paginate(
        self,
        method: str,
        path: str,
        *,
        next_cursor: CursorExtractor | str,
        cursor_param: str = "page_token",
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        response_model: Any = None,
    ) -> Paginator:
        """Return a lazy paginator over a cursor-paginated list endpoint.

        Args:
            next_cursor: Extractor, or dotted path to the next cursor in a page.
                A cursor that is an absolute URL is requested as is.
            cursor_param: Query parameter that carries the cursor.
        """
        extract = cursor_at(next_cursor) if isinstance(next_cursor, str) else next_cursor

        async def fetch_page(cursor: str | None) -> Any:
            if cursor is not None and is_absolute_url(cursor):
                return await self.request(method, cursor, body=body, headers=headers, response_model=response_model)
            page_query = dict(query or {})
            if cursor is not None:
                page_query[cursor_param] = cursor
            return await self.request(
                method,
                path,
                path_params=path_params,
                query=page_query,
                body=body,
                headers=headers,
                response_model=response_model,
            )

        return Paginator(fetch_page, extract)
