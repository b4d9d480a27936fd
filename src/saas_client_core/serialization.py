"""JSON encoding of typed request bodies and decoding of typed responses.

Request and response types are pydantic models (or any type pydantic can
validate, such as ``list[Contact]``). Field aliases are honoured in both
directions and ``None`` fields are left out of request bodies.
"""

from functools import lru_cache
from typing import Any

import httpx
import pydantic
from pydantic import TypeAdapter

from saas_client_core.errors.exceptions import NullFieldError, SerializationError
from saas_client_core.errors.handler import detect_null_fields

_ANY = TypeAdapter(Any)


@lru_cache(maxsize=256)
def _adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def encode_body(body: Any) -> bytes:
    """Serialize a request body (model, dataclass, dict, list, ...) to JSON bytes."""
    try:
        return _ANY.dump_json(body, by_alias=True, exclude_none=True)
    except (ValueError, TypeError) as e:
        raise SerializationError(f"Could not encode request body of type {type(body).__name__}: {e}") from e


def _location(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def decode_response(response: httpx.Response, model: Any = None) -> Any:
    """Decode a successful response body.

    Args:
        response: Response whose body has been read.
        model: Type to validate into. When None the parsed JSON is returned as is.

    Returns:
        An instance of ``model``, the raw JSON value, or None for an empty
        body when no model was requested.

    Raises:
        NullFieldError: The vendor sent null for a field the model requires.
        SerializationError: The body is not JSON or does not match ``model``.
    """
    if not response.content:
        if model is None:
            return None
        raise SerializationError(
            f"Expected a {getattr(model, '__name__', model)} body, got an empty response",
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError as e:
        raise SerializationError(
            f"Response body is not valid JSON: {response.text[:200]}", status_code=response.status_code
        ) from e

    if model is None:
        return data

    try:
        return _adapter(model).validate_python(data)
    except pydantic.ValidationError as e:
        null_fields = detect_null_fields(data) if isinstance(data, (dict, list)) else []
        for error in e.errors():
            if error.get("input", ...) is None:
                field_path = _location(error["loc"])
                raise NullFieldError(
                    f"Response field '{field_path}' is null but required by {getattr(model, '__name__', model)}",
                    field_path=field_path,
                    null_fields=null_fields,
                    status_code=response.status_code,
                ) from e
        raise SerializationError(
            f"Response does not match {getattr(model, '__name__', model)}: {e}",
            null_fields=null_fields,
            status_code=response.status_code,
        ) from e
