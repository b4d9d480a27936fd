"""RFC 7807 Problem Details parsed out of vendor error bodies."""

from dataclasses import dataclass
from typing import Any

import httpx

STANDARD_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})


@dataclass
class ProblemDetail:
    """RFC 7807 Problem Details object.

    Vendors rarely send ``application/problem+json``, but many error bodies
    share its shape (``{"title": ..., "detail": ...}``), so any JSON object
    carrying at least one standard member is accepted.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    instance: str | None = None

    # Non-standard members sent by the vendor
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ProblemDetail | None":
        """Parse problem details from an HTTP response.

        Returns:
            ProblemDetail object or None if the body is not problem-shaped
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            return None

        if not isinstance(data, dict):
            return None

        content_type = response.headers.get("content-type", "")
        if "application/problem+json" not in content_type and not STANDARD_FIELDS & data.keys():
            return None

        extensions = {k: v for k, v in data.items() if k not in STANDARD_FIELDS}
        status = data.get("status")

        return cls(
            type=data.get("type"),
            title=data.get("title"),
            status=status if isinstance(status, int) else None,
            detail=data.get("detail"),
            instance=data.get("instance"),
            extensions=extensions or None,
        )

    def to_exception_message(self) -> str:
        """Convert problem details to exception message."""
        lines = []

        if self.title:
            lines.append(self.title)
        elif self.detail:
            lines.append(self.detail)

        if self.title and self.detail and self.title != self.detail:
            lines.append(self.detail)

        if self.type:
            lines.append(f"Problem Type: {self.type}")

        if self.instance:
            lines.append(f"Instance: {self.instance}")

        if self.extensions:
            lines.append("Extension fields:")
            for key, value in self.extensions.items():
                lines.append(f"  - {key}: {value}")

        return "\n".join(lines) if lines else "Unknown API error"
