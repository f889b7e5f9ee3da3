"""Error hierarchy shared by the server and the API client."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class BugTrackerError(Exception):
    """Base error for all bugtracker errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationError(BugTrackerError):
    """A request field is missing or holds an invalid value."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[FieldError] | tuple[FieldError, ...] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors = tuple(errors)

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(message, errors=[FieldError(field, message)])

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = [e.to_dict() for e in self.errors]
        return body


class AuthError(BugTrackerError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class PermissionDeniedError(BugTrackerError):
    """Authenticated, but not allowed to perform the action."""

    status_code = 403


class NotFoundError(BugTrackerError):
    """No record matches the given id."""

    status_code = 404


class ServerError(BugTrackerError):
    """Unexpected failure."""

    status_code = 500


# ---------------------------------------------------------------------------
# Client-side transport errors
# ---------------------------------------------------------------------------


class NetworkError(BugTrackerError):
    """The server could not be reached."""


class RequestTimeoutError(BugTrackerError):
    """The request timed out."""


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------


def error_from_status_code(
    status_code: int,
    message: str,
    *,
    errors: list[FieldError] | None = None,
) -> BugTrackerError:
    """Map an HTTP status code to the matching error type."""
    if status_code in (400, 422):
        return ValidationError(message, errors=errors or [], status_code=status_code)
    if status_code == 401:
        return AuthError(message)
    if status_code == 403:
        return PermissionDeniedError(message)
    if status_code == 404:
        return NotFoundError(message)
    if 500 <= status_code <= 599:
        return ServerError(message, status_code=status_code)
    return BugTrackerError(message, status_code=status_code)
