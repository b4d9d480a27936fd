"""Error taxonomy and HTTP error mapping for vendor clients."""

from saas_client_core.errors.exceptions import (
    BadRequestError,
    ClientCoreError,
    ClientHttpError,
    ConflictError,
    ForbiddenError,
    HttpError,
    NotFoundError,
    NullFieldError,
    RateLimitError,
    SerializationError,
    ServerError,
    TransportError,
    UnauthorizedError,
    UnprocessableEntityError,
    ValidationError,
)
from saas_client_core.errors.handler import detect_null_fields, raise_for_status
from saas_client_core.errors.models import ProblemDetail

__all__ = [
    "BadRequestError",
    "ClientCoreError",
    "ClientHttpError",
    "ConflictError",
    "ForbiddenError",
    "HttpError",
    "NotFoundError",
    "NullFieldError",
    "ProblemDetail",
    "RateLimitError",
    "SerializationError",
    "ServerError",
    "TransportError",
    "UnauthorizedError",
    "UnprocessableEntityError",
    "ValidationError",
    "detect_null_fields",
    "raise_for_status",
]
