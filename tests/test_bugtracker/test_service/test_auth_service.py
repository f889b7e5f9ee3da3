from __future__ import annotations

import time

import pytest

from bugtracker.auth import AuthService
from bugtracker.errors import AuthError, ValidationError


@pytest.fixture
def auth(user_repo) -> AuthService:
    return AuthService(user_repo, secret_key="test-secret", token_max_age=3600)


REGISTRATION = {"name": "Ann", "email": "ann@example.com", "password": "secret1"}


class TestRegister:
    def test_register_returns_user_and_token(self, auth, user_repo) -> None:
        user, token = auth.register(REGISTRATION)
        assert user.email == "ann@example.com"
        assert user.password_hash != "secret1"
        assert token
        assert user_repo.get(user.id) == user

    def test_duplicate_email(self, auth) -> None:
        auth.register(REGISTRATION)
        with pytest.raises(ValidationError, match="already exists"):
            auth.register({**REGISTRATION, "email": "ANN@example.com"})


class TestLogin:
    def test_login_success(self, auth) -> None:
        registered, _ = auth.register(REGISTRATION)
        user, token = auth.login({"email": "ann@example.com", "password": "secret1"})
        assert user.id == registered.id
        assert auth.verify_token(token) == user

    def test_wrong_password(self, auth) -> None:
        auth.register(REGISTRATION)
        with pytest.raises(AuthError, match="Invalid credentials"):
            auth.login({"email": "ann@example.com", "password": "wrong-pass"})

    def test_unknown_email(self, auth) -> None:
        with pytest.raises(AuthError, match="Invalid credentials"):
            auth.login({"email": "nobody@example.com", "password": "secret1"})


class TestVerifyToken:
    def test_tampered_token(self, auth) -> None:
        _, token = auth.register(REGISTRATION)
        with pytest.raises(AuthError, match="invalid token"):
            auth.verify_token(token + "x")

    def test_token_from_other_secret(self, auth, user_repo) -> None:
        user, _ = auth.register(REGISTRATION)
        other = AuthService(user_repo, secret_key="other-secret", token_max_age=3600)
        with pytest.raises(AuthError):
            auth.verify_token(other.issue_token(user))

    def test_expired_token(self, auth, user_repo, monkeypatch) -> None:
        user, _ = auth.register(REGISTRATION)
        short = AuthService(user_repo, secret_key="test-secret", token_max_age=10)
        token = short.issue_token(user)
        real_time = time.time
        monkeypatch.setattr(time, "time", lambda: real_time() + 60)
        with pytest.raises(AuthError, match="expired"):
            short.verify_token(token)
