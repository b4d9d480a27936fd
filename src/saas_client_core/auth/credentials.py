"""Credential store for vendor clients.

This module holds the credential types a client can own and the resolver that
produces them from explicit values, environment variables and ``.env`` files.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv)
4. Default value

Example:
    ```python
    from saas_client_core.auth import CredentialResolver, resolve_credentials
    from saas_client_core.vendors import GUSTO

    resolver = CredentialResolver()
    credentials = resolve_credentials(GUSTO, resolver=resolver, refresh_token="...")
    ```

Security Considerations:
    - Credentials are never logged in full (masked with ***)
    - Only source information is logged (env var name, etc.)
    - Secrets are excluded from the dataclass reprs
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from dataclasses import dataclass, field
from threading import Lock

from dotenv import load_dotenv

from saas_client_core.auth.exceptions import CredentialNotFoundError
from saas_client_core.config import AuthScheme, ClientConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiKey:
    """A static API key or personal access token."""

    key: str = field(repr=False)


@dataclass(frozen=True)
class BasicAuth:
    """Username/password pair sent with HTTP basic auth."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class TokenPair:
    """An OAuth2 access/refresh token pair.

    Instances are never modified: a refresh swaps the whole pair, so readers
    always see both tokens from the same grant.

    Attributes:
        access_token: Bearer token, may be empty before the first grant.
        refresh_token: Token used to obtain a new access token, may be empty.
        expires_at: Monotonic-clock time after which the access token is
            considered expired, None when unknown.
        issued: True when the pair came from the vendor's token endpoint.
    """

    access_token: str = field(default="", repr=False)
    refresh_token: str = field(default="", repr=False)
    expires_at: float | None = None
    issued: bool = False


@dataclass
class OAuth2:
    """OAuth2 client registration plus the current token pair."""

    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    tokens: TokenPair = field(default_factory=TokenPair)


Credentials = ApiKey | BasicAuth | OAuth2


class CredentialResolver:
    """Resolve credentials from multiple sources with priority ordering.

    Explicitly provided values take precedence over environment variables,
    which take precedence over .env file values, which finally take precedence
    over defaults. The .env file never overrides a variable already present in
    the process environment.

    Example:
        ```python
        resolver = CredentialResolver()

        # Simple resolution from environment
        api_key = resolver.resolve(env_var_name="FRONT_API_TOKEN")

        # Required credential (raises if not found)
        secret = resolver.resolve(env_var_name="GUSTO_CLIENT_SECRET", required=True)
        ```
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize credential resolver.

        Args:
            dotenv_path: Path to .env file. If None, searches parent directories
                for .env file (default behavior of python-dotenv).
            load_dotenv: Whether to load .env file. Set to False to skip
                .env file loading (useful for testing or when not using .env).
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a credential from multiple sources.

        Empty strings count as missing, so an exported-but-blank variable
        falls through to the next source.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable name to check.
            default: Default value if not found elsewhere.
            required: If True, raises CredentialNotFoundError when
                credential cannot be resolved.
            mask_in_logs: If True (default), masks credential values
                in log messages. Disable for non-sensitive values.

        Returns:
            Resolved credential value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required=True and credential not found
                in any source.
        """
        result = None
        source = None

        if value:
            result = value
            source = "explicit parameter"
        elif env_var_name and os.environ.get(env_var_name):
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default:
            result = default
            source = "default value"

        if result is not None:
            shown = "***" if mask_in_logs else result
            logger.debug(f"Resolved credential from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result


def resolve_credentials(
    config: ClientConfig,
    *,
    resolver: CredentialResolver | None = None,
    api_key: str | None = None,
    username: str | None = None,
    password: str | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
    redirect_uri: str | None = None,
    access_token: str | None = None,
    refresh_token: str | None = None,
) -> Credentials:
    """Build the credentials a vendor client needs, failing early if any are missing.

    The variant follows the vendor config: OAuth2 when a token endpoint is
    configured, `BasicAuth` for the basic scheme, `ApiKey` otherwise.

    Raises:
        CredentialNotFoundError: If a required value is absent from every source.
    """
    resolver = resolver or CredentialResolver()
    env = config.env

    if config.uses_oauth2:
        tokens = TokenPair(
            access_token=resolver.resolve(value=access_token, env_var_name=env.access_token) or "",
            refresh_token=resolver.resolve(value=refresh_token, env_var_name=env.refresh_token) or "",
        )
        return OAuth2(
            client_id=resolver.resolve(value=client_id, env_var_name=env.client_id, required=True),
            client_secret=resolver.resolve(value=client_secret, env_var_name=env.client_secret, required=True),
            redirect_uri=resolver.resolve(
                value=redirect_uri, env_var_name=env.redirect_uri, required=True, mask_in_logs=False
            ),
            tokens=tokens,
        )

    if config.auth_scheme is AuthScheme.BASIC:
        return BasicAuth(
            username=resolver.resolve(value=username, env_var_name=env.username, required=True, mask_in_logs=False),
            password=resolver.resolve(value=password, env_var_name=env.password, required=True),
        )

    return ApiKey(key=resolver.resolve(value=api_key, env_var_name=env.api_key, required=True))
