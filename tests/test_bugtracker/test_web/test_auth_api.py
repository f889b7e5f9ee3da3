from __future__ import annotations

from flask import Blueprint, jsonify

from bugtracker.model.user import UserRole
from bugtracker.web.security import require_role

REGISTRATION = {"name": "Ann", "email": "ann@example.com", "password": "secret1"}


def _register(client) -> dict:
    response = client.post("/api/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    return response.get_json()


class TestRegister:
    def test_register(self, client) -> None:
        body = _register(client)
        assert body["success"] is True
        assert body["token"]
        assert body["user"]["email"] == "ann@example.com"
        assert body["user"]["role"] == "user"
        assert "password_hash" not in body["user"]

    def test_duplicate_email_is_400(self, client) -> None:
        _register(client)
        response = client.post("/api/auth/register", json=REGISTRATION)
        assert response.status_code == 400

    def test_invalid_payload(self, client) -> None:
        response = client.post("/api/auth/register", json={"email": "nope"})
        assert response.status_code == 400
        assert {e["field"] for e in response.get_json()["errors"]} == {
            "name",
            "email",
            "password",
        }


class TestLogin:
    def test_login(self, client) -> None:
        _register(client)
        response = client.post(
            "/api/auth/login", json={"email": "ann@example.com", "password": "secret1"}
        )
        assert response.status_code == 200
        assert response.get_json()["token"]

    def test_bad_password_is_401(self, client) -> None:
        _register(client)
        response = client.post(
            "/api/auth/login", json={"email": "ann@example.com", "password": "wrong-pass"}
        )
        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid credentials"


class TestMe:
    def test_me_with_token(self, client) -> None:
        token = _register(client)["token"]
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.get_json()["data"]["name"] == "Ann"

    def test_me_without_token(self, client) -> None:
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.get_json()["message"] == "Not authorized, no token"

    def test_me_with_garbage_token(self, client) -> None:
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_wrong_scheme(self, client) -> None:
        token = _register(client)["token"]
        response = client.get("/api/auth/me", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 401


class TestRequireRole:
    def test_non_admin_gets_403(self, app) -> None:
        admin_bp = Blueprint("admin_only", __name__)

        @admin_bp.route("/admin-only")
        @require_role(UserRole.ADMIN)
        def admin_only():
            return jsonify({"success": True})

        app.register_blueprint(admin_bp, url_prefix="/api")
        client = app.test_client()
        token = _register(client)["token"]

        response = client.get("/api/admin-only", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert client.get("/api/admin-only").status_code == 401
