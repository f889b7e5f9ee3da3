from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import current_app, g, request

from bugtracker.errors import AuthError, PermissionDeniedError
from bugtracker.model.user import User, UserRole


def bearer_token() -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user() -> User:
    """The user attached by :func:`require_auth` for this request."""
    return g.current_user


def require_auth(view: Callable) -> Callable:
    """Reject the request with 401 unless it carries a valid bearer token."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        if token is None:
            raise AuthError("Not authorized, no token")
        g.current_user = current_app.extensions["auth_service"].verify_token(token)
        return view(*args, **kwargs)

    return wrapper


def require_role(role: UserRole) -> Callable[[Callable], Callable]:
    """Like :func:`require_auth`, and additionally demand ``role`` (403 otherwise)."""

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def inner(*args, **kwargs):
            if current_user().role != role:
                raise PermissionDeniedError(
                    f"User role {current_user().role} is not authorized to access this route"
                )
            return view(*args, **kwargs)

        return require_auth(inner)

    return decorator
