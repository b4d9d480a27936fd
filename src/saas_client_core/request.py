"""Request builder: turns an operation call into a ready-to-send `httpx.Request`.

Generated endpoint methods describe an operation as an HTTP method, a path
template such as ``/contacts/{contact_id}/notes``, path/query parameters and
an optional body. `RequestBuilder.build` fills the template, percent-encodes
each path parameter, renders query values, serializes the body and attaches
authorization, user-agent and content-type headers.
"""

import base64
import enum
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any
from urllib.parse import quote

import httpx

from saas_client_core import __version__
from saas_client_core.config import AuthScheme, ClientConfig, normalize_base_url
from saas_client_core.errors.exceptions import ValidationError
from saas_client_core.serialization import encode_body

PATH_PARAM_PATTERN = re.compile(r"\{([^{}]+)\}")

# What the client sends for each auth scheme: a token, or a (username, password) pair
AuthValue = str | tuple[str, str] | None


def is_absolute_url(path: str) -> bool:
    return path.startswith(("http://", "https://"))


class RequestBuilder:
    """Builds requests against one vendor's base URL."""

    def __init__(self, config: ClientConfig, base_url: str | None = None) -> None:
        self.config = config
        self._base_url = normalize_base_url(base_url) if base_url else config.base_url
        self.user_agent = config.user_agent or f"{config.name}-python/{__version__}"

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        self._base_url = normalize_base_url(value)

    def build(
        self,
        method: str,
        path: str,
        *,
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        auth: AuthValue = None,
    ) -> httpx.Request:
        """Build a request.

        Args:
            method: HTTP method.
            path: Path template relative to the base URL, or an absolute URL
                (used as is, e.g. a next-page link).
            path_params: Values for every ``{name}`` in the template.
            query: Query parameters; None values are dropped, sequences repeat the key.
            body: JSON body, typically a pydantic model.
            headers: Extra headers, applied last.
            auth: Token or (username, password) pair for the configured scheme.

        Raises:
            ValidationError: A path parameter is missing, empty or unexpected.
            SerializationError: The body cannot be encoded.
        """
        url = self._url(self.render_path(path, path_params or {}))

        request_headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
            **self.config.default_headers,
            **self._auth_headers(auth),
        }

        content = None
        if body is not None:
            content = encode_body(body)
            request_headers["Content-Type"] = "application/json"

        if headers:
            request_headers.update(headers)

        return httpx.Request(
            method.upper(),
            url,
            params=self.render_query(query) if query else None,
            headers=request_headers,
            content=content,
            extensions={"timeout": httpx.Timeout(self.config.timeout).as_dict()},
        )

    def render_path(self, template: str, path_params: Mapping[str, Any]) -> str:
        """Substitute and percent-encode path parameters."""
        names = PATH_PARAM_PATTERN.findall(template)

        unexpected = set(path_params) - set(names)
        if unexpected:
            raise ValidationError(
                f"Unexpected path parameter(s) for {template}: {', '.join(sorted(unexpected))}",
                parameter=sorted(unexpected)[0],
            )

        def substitute(match: re.Match) -> str:
            name = match.group(1)
            value = path_params.get(name)
            if value is None or value == "":
                raise ValidationError(f"Missing required path parameter '{name}' for {template}", parameter=name)
            return quote(self.format_value(value), safe="")

        return PATH_PARAM_PATTERN.sub(substitute, template)

    def render_query(self, query: Mapping[str, Any]) -> list[tuple[str, str]]:
        params = []
        for key, value in query.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple, set, frozenset)):
                params.extend((key, self.format_value(item)) for item in value if item is not None)
            else:
                params.append((key, self.format_value(value)))
        return params

    def format_value(self, value: Any) -> str:
        """Render a scalar parameter value as it appears in a URL."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, enum.Enum):
            return str(value.value)
        if isinstance(value, (datetime, date)):
            return self.config.format_datetime(value)
        return str(value)

    def _url(self, path: str) -> str:
        if is_absolute_url(path):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def _auth_headers(self, auth: AuthValue) -> dict[str, str]:
        if auth is None:
            return {}

        scheme = self.config.auth_scheme
        if scheme is AuthScheme.BASIC:
            if not isinstance(auth, tuple):
                raise ValidationError("Basic auth requires a username and password", parameter="auth")
            encoded = base64.b64encode(f"{auth[0]}:{auth[1]}".encode()).decode("ascii")
            return {"Authorization": f"Basic {encoded}"}

        if not isinstance(auth, str):
            raise ValidationError(f"{scheme.value} auth requires a token", parameter="auth")
        if scheme is AuthScheme.HEADER:
            return {self.config.auth_header: auth}
        return {"Authorization": f"Bearer {auth}"}
