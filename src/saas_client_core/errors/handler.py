"""Error handling utilities for HTTP responses."""

from typing import Any

import httpx

from saas_client_core.errors.exceptions import (
    BadRequestError,
    ClientHttpError,
    ConflictError,
    ForbiddenError,
    HttpError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from saas_client_core.errors.models import ProblemDetail

STATUS_EXCEPTIONS: dict[int, type[HttpError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    429: RateLimitError,
}


def _parse_retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def raise_for_status(response: httpx.Response) -> None:
    """Raise the typed HttpError matching a non-2xx response.

    The vendor body is kept verbatim on the exception. RFC 7807 problem
    details are parsed when present and used for the message; otherwise the
    first 200 characters of the body are.

    Args:
        response: HTTP response object (body already read)

    Raises:
        HttpError subclass based on status code
    """
    if response.is_success:
        return

    status_code = response.status_code
    body = response.text
    problem_detail = ProblemDetail.from_response(response)

    if status_code in STATUS_EXCEPTIONS:
        exc_class = STATUS_EXCEPTIONS[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientHttpError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = HttpError

    if problem_detail:
        message = f"HTTP {status_code}: {problem_detail.to_exception_message()}"
    else:
        snippet = body[:200]
        message = f"HTTP {status_code}: {snippet}" if snippet else f"HTTP {status_code}"

    common = {
        "status_code": status_code,
        "body": body,
        "response": response,
        "problem_detail": problem_detail,
    }

    if exc_class is RateLimitError:
        raise RateLimitError(message, retry_after=_parse_retry_after(response), **common)

    if exc_class is UnprocessableEntityError:
        validation_errors = None
        if problem_detail and problem_detail.extensions:
            if "errors" in problem_detail.extensions:
                validation_errors = problem_detail.extensions.get("errors")
            else:
                validation_errors = problem_detail.extensions.get("validation_errors")
        raise UnprocessableEntityError(message, validation_errors=validation_errors, **common)

    raise exc_class(message, **common)


def detect_null_fields(data: dict[str, Any] | list, path: str = "") -> list[str]:
    """Detect null fields in API response data.

    Recursively scans response data for null values and returns their paths,
    e.g. ``["contact.email", "items[2]"]``.
    """
    null_paths = []

    if isinstance(data, dict):
        for key, value in data.items():
            current_path = f"{path}.{key}" if path else key

            if value is None:
                null_paths.append(current_path)
            elif isinstance(value, (dict, list)):
                null_paths.extend(detect_null_fields(value, current_path))

    elif isinstance(data, list):
        for index, item in enumerate(data):
            current_path = f"{path}[{index}]"

            if item is None:
                null_paths.append(current_path)
            elif isinstance(item, (dict, list)):
                null_paths.extend(detect_null_fields(item, current_path))

    return null_paths
