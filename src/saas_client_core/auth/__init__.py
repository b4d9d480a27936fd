"""Authentication components for vendor clients.

This package provides:
- Credential types (`ApiKey`, `BasicAuth`, `OAuth2`) and their resolution
  from explicit values, environment variables and .env files
- `TokenManager`, the OAuth2 refresher shared by concurrent callers

Example:
    ```python
    from saas_client_core.auth import CredentialResolver

    resolver = CredentialResolver()
    api_key = resolver.resolve(
        env_var_name="FRONT_API_TOKEN",
        required=True,
    )
    ```
"""

from saas_client_core.auth.credentials import (
    ApiKey,
    BasicAuth,
    CredentialResolver,
    Credentials,
    OAuth2,
    TokenPair,
    resolve_credentials,
)
from saas_client_core.auth.exceptions import AuthError, CredentialNotFoundError, TokenRefreshError
from saas_client_core.auth.oauth import AccessToken, TokenManager

__all__ = [
    "AccessToken",
    "ApiKey",
    "AuthError",
    "BasicAuth",
    "CredentialNotFoundError",
    "CredentialResolver",
    "Credentials",
    "OAuth2",
    "TokenManager",
    "TokenPair",
    "TokenRefreshError",
    "resolve_credentials",
]
