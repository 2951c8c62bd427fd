"""Domain errors surfaced by the content resolution layer."""

import re
from typing import Any, Optional

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class ContentError(Exception):
    """Base error with a stable machine-readable code."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "CONTENT_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class NotFoundError(ContentError):
    """The base record for the requested id does not exist."""

    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} not found: {resource_id}",
            code="NOT_FOUND",
            details={"resource": resource, "id": resource_id},
        )


class ValidationError(ContentError):
    """Malformed input rejected before reaching the resolver chain."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field} if field else {},
        )


class ResolutionTimeoutError(ContentError):
    """The underlying resolver did not complete in time."""

    status_code = 504

    def __init__(self, key: str, timeout_seconds: float, attempts: int):
        super().__init__(
            message=f"Resolution of {key} timed out after {attempts} attempt(s) of {timeout_seconds}s",
            code="RESOLUTION_TIMEOUT",
            details={"key": key, "timeout_seconds": timeout_seconds, "attempts": attempts},
        )


def validate_uuid(value: str, field: str = "id") -> str:
    """Reject ids that are not UUID-shaped. Returns the lower-cased id."""
    if not value or not UUID_PATTERN.match(value):
        raise ValidationError(f"{field} must be a UUID, got {value!r}", field=field)
    return value.lower()
