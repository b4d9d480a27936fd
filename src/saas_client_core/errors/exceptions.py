"""Structured exceptions for the client runtime.

Every public call either returns a typed value or raises one of these.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from saas_client_core.errors.models import ProblemDetail


class ClientCoreError(Exception):
    """Base exception for every error raised by the runtime."""

    pass


class TransportError(ClientCoreError):
    """Connection-level failure or timeout that outlived the retry budget."""

    def __init__(self, message: str, attempts: int | None = None):
        super().__init__(message)
        self.attempts = attempts


class SerializationError(ClientCoreError):
    """A request body could not be encoded or a response body could not be decoded."""

    def __init__(self, message: str, null_fields: list[str] | None = None, status_code: int | None = None):
        super().__init__(message)
        self.null_fields = null_fields if null_fields is not None else []
        self.status_code = status_code


class NullFieldError(SerializationError):
    """Raised when a vendor returns null for a field the response model requires."""

    def __init__(self, message: str, field_path: str, **kwargs):
        super().__init__(message, **kwargs)
        self.field_path = field_path


class ValidationError(ClientCoreError):
    """The caller supplied invalid parameters."""

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter


class HttpError(ClientCoreError):
    """Non-2xx response from the vendor."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        response: "httpx.Response | None" = None,
        problem_detail: "ProblemDetail | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.response = response
        self.problem_detail = problem_detail

    @property
    def is_retryable(self) -> bool:
        return self.status_code == 429 or (self.status_code is not None and 500 <= self.status_code < 600)


class ClientHttpError(HttpError):
    """4xx client errors."""

    pass


class BadRequestError(ClientHttpError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientHttpError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientHttpError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientHttpError):
    """404 Not Found."""

    pass


class ConflictError(ClientHttpError):
    """409 Conflict."""

    pass


class UnprocessableEntityError(ClientHttpError):
    """422 Unprocessable Entity (vendor-side validation errors)."""

    def __init__(self, message: str, validation_errors: list[dict] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors if validation_errors is not None else []


class RateLimitError(ClientHttpError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(HttpError):
    """5xx server errors."""

    pass
