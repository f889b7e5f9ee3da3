from __future__ import annotations

import logging
import sqlite3
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from bugtracker.errors import AuthError, ValidationError
from bugtracker.model.user import User
from bugtracker.service import generate_id, utc_timestamp
from bugtracker.store.repositories import UserRepository
from bugtracker.validation import validate_credentials, validate_registration

logger = logging.getLogger(__name__)

TOKEN_SALT = "bugtracker-auth"


class AuthService:
    """Registration, login and bearer-token verification."""

    def __init__(
        self, repo: UserRepository, secret_key: str, token_max_age: int
    ) -> None:
        self._repo = repo
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._max_age = token_max_age

    def register(self, payload: Any) -> tuple[User, str]:
        name, email, password = validate_registration(payload)
        if self._repo.get_by_email(email) is not None:
            logger.warning("Registration failed - email already exists: %s", email)
            raise ValidationError.for_field(
                "email", "User already exists with this email"
            )
        user = User(
            id=generate_id(),
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            created_at=utc_timestamp(),
        )
        try:
            self._repo.create(user)
        except sqlite3.IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email.
            raise ValidationError.for_field(
                "email", "User already exists with this email"
            ) from exc
        logger.info("User registered: %s", user.id)
        return user, self.issue_token(user)

    def login(self, payload: Any) -> tuple[User, str]:
        email, password = validate_credentials(payload)
        user = self._repo.get_by_email(email)
        if user is None or not check_password_hash(user.password_hash, password):
            logger.warning("Login failed: %s", email)
            raise AuthError("Invalid credentials")
        logger.info("User logged in: %s", user.id)
        return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        return self._serializer.dumps({"sub": user.id})

    def verify_token(self, token: str) -> User:
        """Return the user a token was issued to, or raise AuthError."""
        try:
            claims = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired as exc:
            raise AuthError("Token expired", cause=exc) from exc
        except BadSignature as exc:
            raise AuthError("Not authorized, invalid token", cause=exc) from exc
        user = self._repo.get(claims.get("sub", ""))
        if user is None:
            raise AuthError("Not authorized, user no longer exists")
        return user
