"""Exceptions for credential resolution and token handling.

Example:
    ```python
    from saas_client_core.auth.exceptions import CredentialNotFoundError

    if not api_key:
        raise CredentialNotFoundError("API key not found", env_var_name="FRONT_API_TOKEN")
    ```
"""

from saas_client_core.errors.exceptions import ClientCoreError


class AuthError(ClientCoreError):
    """Base exception for credential and authentication errors.

    Raised for missing, invalid or expired credentials and for failures
    talking to a vendor's token endpoint.

    Attributes:
        status_code: Status returned by the token endpoint, if any.
        body: Raw token endpoint response body, if any.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CredentialNotFoundError(AuthError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).

    Example:
        ```python
        try:
            config = resolver.resolve(env_var_name="GUSTO_CLIENT_ID", required=True)
        except CredentialNotFoundError as e:
            print(f"Missing credential: {e.env_var_name}")
        ```
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class TokenRefreshError(AuthError):
    """Raised when the token endpoint rejects or fails a refresh or code exchange."""

    pass
