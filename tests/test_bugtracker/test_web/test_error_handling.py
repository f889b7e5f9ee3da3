from __future__ import annotations

import pytest

from bugtracker.config import BugTrackerConfig
from bugtracker.web.app import create_app


def _exploding_app(db, env: str):
    app = create_app(db=db, config=BugTrackerConfig(env=env))

    @app.route("/api/explode")
    def explode():
        raise RuntimeError("database password is hunter2")

    return app


class TestErrorTranslation:
    def test_unknown_route_is_json_404(self, client) -> None:
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.get_json() == {
            "success": False,
            "message": "Route /api/nowhere not found",
        }

    def test_method_not_allowed(self, client) -> None:
        response = client.post("/api/bugs/stats/summary")
        assert response.status_code == 405
        assert response.get_json()["success"] is False

    def test_unexpected_error_hidden_in_production(self, db) -> None:
        client = _exploding_app(db, "production").test_client()
        response = client.get("/api/explode")
        assert response.status_code == 500
        body = response.get_json()
        assert body == {"success": False, "message": "Something went wrong!"}
        assert "hunter2" not in response.get_data(as_text=True)

    def test_development_mode_includes_stack(self, db) -> None:
        client = _exploding_app(db, "development").test_client()
        response = client.get("/api/explode")
        assert response.status_code == 500
        body = response.get_json()
        assert body["error"] == "RuntimeError"
        assert "Traceback" in body["stack"]

    @pytest.mark.parametrize("env", ["production", "development"])
    def test_known_errors_keep_status(self, db, env) -> None:
        client = create_app(db=db, config=BugTrackerConfig(env=env)).test_client()
        response = client.get("/api/bugs/ghost")
        assert response.status_code == 404
        assert ("stack" in response.get_json()) == (env == "development")


class TestCors:
    def test_api_responses_carry_cors_headers(self, client, config) -> None:
        response = client.get("/api/health")
        assert response.headers["Access-Control-Allow-Origin"] == config.client_url
        assert "PATCH" in response.headers["Access-Control-Allow-Methods"]

    def test_preflight(self, client) -> None:
        response = client.options("/api/bugs")
        assert response.status_code == 200
        assert "Authorization" in response.headers["Access-Control-Allow-Headers"]


class TestHealth:
    def test_health(self, client) -> None:
        body = client.get("/api/health").get_json()
        assert body["success"] is True
        assert body["message"] == "Server is running"
        assert body["timestamp"].endswith("Z")
