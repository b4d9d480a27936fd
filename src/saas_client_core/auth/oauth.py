"""OAuth2 token refresher.

`TokenManager` owns an `OAuth2` credential and hands out usable access tokens.
It refreshes proactively: a token is renewed before use when it is known to be
expired (expiry is recorded 60 seconds early) or when its expiry is unknown
and it did not come from the token endpoint. `ApiClient` adds one reactive
refresh when a request is rejected with 401.

Concurrent callers that find the same stale pair await a single in-flight
refresh and all receive its token or its error, so the refresh token is spent
at most once. Token endpoint calls are serialized with an `asyncio.Lock`.
"""

import asyncio
import logging
import time
import uuid
from collections.abc import Callable, Sequence
from urllib.parse import urlencode

import httpx
import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from saas_client_core.auth.credentials import OAuth2, TokenPair
from saas_client_core.auth.exceptions import AuthError, TokenRefreshError
from saas_client_core.errors.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Seconds subtracted from the vendor's expires_in before storing the expiry
REFRESH_THRESHOLD = 60.0


class AccessToken(BaseModel):
    """Token endpoint response."""

    model_config = ConfigDict(extra="ignore")

    token_type: str | None = None
    access_token: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None
    refresh_token_expires_in: int | None = Field(
        default=None,
        validation_alias=AliasChoices("refresh_token_expires_in", "x_refresh_token_expires_in"),
    )
    scope: str | None = None


def compute_expires_at(expires_in: int | None, now: float) -> float | None:
    if expires_in is None:
        return None
    return now + max(expires_in - REFRESH_THRESHOLD, 0.0)


def _same_grant(a: TokenPair, b: TokenPair) -> bool:
    return a.access_token == b.access_token and a.refresh_token == b.refresh_token


class TokenManager:
    """Credential store and refresher for one OAuth2 client.

    Args:
        credentials: The OAuth2 credential; its ``tokens`` are replaced on refresh.
        http: Client used to call the token endpoint (normally the API client's,
            so token calls share its retry policy).
        token_endpoint: Vendor token URL.
        user_consent_endpoint: Vendor authorization URL, needed for `user_consent_url`.
        auto_refresh: When False, stored tokens are returned without expiry checks.
        clock: Monotonic time source, overridable in tests.
    """

    def __init__(
        self,
        credentials: OAuth2,
        *,
        http: httpx.AsyncClient,
        token_endpoint: str,
        user_consent_endpoint: str | None = None,
        auto_refresh: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not credentials.client_id or not credentials.client_secret:
            raise AuthError("OAuth2 credentials require a client id and a client secret")
        self.credentials = credentials
        self.auto_refresh = auto_refresh
        self._http = http
        self._token_endpoint = token_endpoint
        self._user_consent_endpoint = user_consent_endpoint
        self._clock = clock
        self._lock = asyncio.Lock()
        self._refresh_task: asyncio.Future | None = None

    @property
    def tokens(self) -> TokenPair:
        return self.credentials.tokens

    @property
    def expires_at(self) -> float | None:
        return self.tokens.expires_at

    def set_expires_at(self, expires_at: float | None) -> None:
        """Set the monotonic time at which the access token counts as expired.

        None means unknown; such a token is refreshed before its first use.
        """
        pair = self.tokens
        self.credentials.tokens = TokenPair(pair.access_token, pair.refresh_token, expires_at, pair.issued)

    def set_expires_in(self, expires_in: int) -> None:
        """Record that the access token expires ``expires_in`` seconds from now."""
        self.set_expires_at(compute_expires_at(expires_in, self._clock()))

    def expires_in(self) -> float | None:
        """Seconds until the access token counts as expired, None if unknown."""
        if self.expires_at is None:
            return None
        return max(self.expires_at - self._clock(), 0.0)

    def is_expired(self) -> bool | None:
        """Whether the access token is expired, None if that cannot be determined."""
        if self.expires_at is None:
            return None
        return self.expires_at <= self._clock()

    def user_consent_url(self, scopes: Sequence[str] = (), state: str | None = None) -> str:
        """Return the vendor URL an end user visits to grant access.

        Scopes are space-joined and omitted entirely when empty.
        """
        if not self._user_consent_endpoint:
            raise ValidationError("No user consent endpoint configured", parameter="user_consent_endpoint")
        params = {
            "client_id": self.credentials.client_id,
            "response_type": "code",
            "redirect_uri": self.credentials.redirect_uri,
            "state": state or uuid.uuid4().hex,
        }
        if scopes:
            params["scope"] = " ".join(scopes)
        return f"{self._user_consent_endpoint}?{urlencode(params)}"

    async def get_valid_access_token(self) -> str:
        """Return a bearer token that can be used right now, refreshing first if needed.

        Raises:
            AuthError: No usable token can be produced.
            TokenRefreshError: The token endpoint failed or rejected the refresh token.
        """
        pair = self.tokens
        if self.auto_refresh and self._needs_refresh(pair):
            pair = await self._refresh_from(pair)
        if not pair.access_token:
            raise AuthError("No access token available; complete the authorization flow first")
        return pair.access_token

    async def refresh_if_current(self, access_token: str) -> str | None:
        """Refresh after ``access_token`` was rejected, unless it was already replaced.

        Returns:
            The access token to retry with, or None when there is nothing
            better to offer (no refresh token stored).
        """
        pair = self.tokens
        if pair.access_token != access_token:
            return pair.access_token or None
        if not pair.refresh_token:
            return None
        pair = await self._refresh_from(pair)
        return pair.access_token

    async def refresh_access_token(self) -> AccessToken:
        """Exchange the stored refresh token for a new access token unconditionally."""
        async with self._lock:
            return await self._refresh_locked(self.tokens)

    async def exchange_code(self, code: str, state: str) -> AccessToken:
        """Exchange an authorization code from the redirect URL for a token pair."""
        if not code:
            raise ValidationError("Authorization code cannot be empty", parameter="code")
        async with self._lock:
            previous = self.tokens
            token = await self._request_token({"grant_type": "authorization_code", "code": code, "state": state})
            self._store(token, previous)
            return token

    def _needs_refresh(self, pair: TokenPair) -> bool:
        expired = None if pair.expires_at is None else pair.expires_at <= self._clock()
        if not pair.refresh_token:
            if expired:
                raise AuthError("Access token expired and no refresh token is available")
            return False
        if not pair.access_token or expired:
            return True
        return expired is None and not pair.issued

    async def _refresh_from(self, observed: TokenPair) -> TokenPair:
        current = self.tokens
        if not _same_grant(current, observed):
            logger.debug("Token pair already refreshed by a concurrent caller")
            return current

        # Concurrent callers share one refresh and see the same token or the same error
        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._refresh_shared(current))
        await asyncio.shield(self._refresh_task)
        return self.tokens

    async def _refresh_shared(self, current: TokenPair) -> None:
        try:
            async with self._lock:
                if _same_grant(self.tokens, current):
                    await self._refresh_locked(current)
        finally:
            self._refresh_task = None

    async def _refresh_locked(self, current: TokenPair) -> AccessToken:
        if not current.refresh_token:
            raise AuthError("Refresh token cannot be empty")
        logger.debug(f"Refreshing access token via {self._token_endpoint}")
        token = await self._request_token({"grant_type": "refresh_token", "refresh_token": current.refresh_token})
        self._store(token, current)
        return token

    def _store(self, token: AccessToken, previous: TokenPair) -> None:
        # One assignment so access and refresh token always change together
        self.credentials.tokens = TokenPair(
            access_token=token.access_token,
            refresh_token=token.refresh_token or previous.refresh_token,
            expires_at=compute_expires_at(token.expires_in, self._clock()),
            issued=True,
        )

    async def _request_token(self, params: dict[str, str]) -> AccessToken:
        data = {
            **params,
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
            "redirect_uri": self.credentials.redirect_uri,
        }
        try:
            response = await self._http.post(
                self._token_endpoint,
                data=data,
                auth=(self.credentials.client_id, self.credentials.client_secret),
                headers={"Accept": "application/json"},
            )
        except httpx.TransportError as e:
            raise TokenRefreshError(f"Token endpoint request failed: {e}") from e

        if not response.is_success:
            raise TokenRefreshError(
                f"Token endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            token = AccessToken.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise TokenRefreshError(
                "Token endpoint returned an unreadable body",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not token.access_token:
            raise TokenRefreshError(
                "Token endpoint response has no access_token",
                status_code=response.status_code,
                body=response.text,
            )
        return token
