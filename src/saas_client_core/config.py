"""Per-vendor client configuration.

A `ClientConfig` is everything that differs between two generated vendor
clients: base URL, auth scheme, OAuth2 endpoints, date-time format, extra
headers, retry policy and the names of the environment variables that may
supply credentials. Environment variables are only read when a client is
constructed (see `ApiClient.from_env`), never afterwards.

Example:
    ```python
    from saas_client_core.config import AuthScheme, ClientConfig, EnvVars

    config = ClientConfig(
        name="front",
        base_url="https://api2.frontapp.com",
        auth_scheme=AuthScheme.BEARER,
        env=EnvVars.for_prefix("FRONT"),
    )
    ```
"""

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from saas_client_core.errors.exceptions import ValidationError
from saas_client_core.transport.retry import RetryPolicy


class AuthScheme(enum.Enum):
    """How a credential is attached to a request."""

    BEARER = "bearer"  # Authorization: Bearer <token>
    HEADER = "header"  # <auth_header>: <token>
    BASIC = "basic"  # Authorization: Basic base64(username:password)


@dataclass(frozen=True)
class EnvVars:
    """Names of the environment variables a vendor client recognizes.

    A name left as None is never looked up.
    """

    api_key: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    redirect_uri: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    username: str | None = None
    password: str | None = None
    host: str | None = None

    @classmethod
    def for_prefix(cls, prefix: str) -> "EnvVars":
        """Derive the conventional names, e.g. ``GUSTO_CLIENT_ID`` for prefix ``GUSTO``."""
        prefix = prefix.upper().rstrip("_")
        return cls(
            api_key=f"{prefix}_API_TOKEN",
            client_id=f"{prefix}_CLIENT_ID",
            client_secret=f"{prefix}_CLIENT_SECRET",
            redirect_uri=f"{prefix}_REDIRECT_URI",
            access_token=f"{prefix}_ACCESS_TOKEN",
            refresh_token=f"{prefix}_REFRESH_TOKEN",
            username=f"{prefix}_USERNAME",
            password=f"{prefix}_PASSWORD",
            host=f"{prefix}_HOST",
        )


@dataclass(frozen=True)
class ClientConfig:
    """Immutable description of one vendor API.

    Attributes:
        name: Short vendor name, used in the default user agent.
        base_url: Root URL every relative request path is joined to.
        auth_scheme: How credentials are attached to requests.
        auth_header: Header name used with `AuthScheme.HEADER`.
        token_endpoint: OAuth2 token URL. Setting it makes the vendor an OAuth2 vendor.
        user_consent_endpoint: OAuth2 authorization URL shown to end users.
        datetime_format: strftime format for date-time query parameters, ISO 8601 when None.
        default_headers: Headers sent with every request (e.g. an API version header).
        user_agent: User-Agent header; derived from ``name`` when None.
        timeout: Per-request timeout in seconds.
        retry: Retry policy for transient failures.
        env: Recognized environment variable names.
    """

    name: str
    base_url: str
    auth_scheme: AuthScheme = AuthScheme.BEARER
    auth_header: str = "Authorization"
    token_endpoint: str | None = None
    user_consent_endpoint: str | None = None
    datetime_format: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)
    user_agent: str | None = None
    timeout: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    env: EnvVars = field(default_factory=EnvVars)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValidationError("Client name cannot be empty", parameter="name")
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))
        if self.timeout <= 0:
            raise ValidationError("timeout must be positive", parameter="timeout")

    @property
    def uses_oauth2(self) -> bool:
        return self.token_endpoint is not None

    def with_base_url(self, base_url: str) -> "ClientConfig":
        return replace(self, base_url=base_url)

    def format_datetime(self, value: datetime | date) -> str:
        """Render a date or date-time the way this vendor expects it in URLs."""
        if isinstance(value, datetime) and self.datetime_format:
            return value.strftime(self.datetime_format)
        return value.isoformat()


def normalize_base_url(base_url: str) -> str:
    """Validate a base URL and strip its trailing slash."""
    if not base_url or not base_url.startswith(("http://", "https://")):
        raise ValidationError(f"Base URL must be an http(s) URL, got {base_url!r}", parameter="base_url")
    return base_url.rstrip("/")
