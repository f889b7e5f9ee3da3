from __future__ import annotations

import logging

from flask import Flask, Response, request

from bugtracker.auth import AuthService
from bugtracker.config import BugTrackerConfig
from bugtracker.query.aggregator import Aggregator
from bugtracker.query.executor import QueryExecutor
from bugtracker.service import BugService
from bugtracker.store.db import Database
from bugtracker.store.migrations import run_migrations
from bugtracker.store.repositories import BugRepository, UserRepository
from bugtracker.web.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(
    db: Database | None = None,
    config: BugTrackerConfig | None = None,
) -> Flask:
    """Create and configure the Flask app."""
    config = config or BugTrackerConfig()
    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.secret_key,
        DEBUG=config.is_development,
    )

    if db is None:
        db = Database(":memory:")
        db.connect()
        run_migrations(db)

    # Store db, repos and services on app for access in routes
    bug_repo = BugRepository(db)
    user_repo = UserRepository(db)
    app.extensions["bugtracker_config"] = config
    app.extensions["db"] = db
    app.extensions["bug_repo"] = bug_repo
    app.extensions["user_repo"] = user_repo
    app.extensions["query_executor"] = QueryExecutor(bug_repo)
    app.extensions["aggregator"] = Aggregator(bug_repo)
    app.extensions["bug_service"] = BugService(bug_repo)
    app.extensions["auth_service"] = AuthService(
        user_repo, config.secret_key, config.token_max_age
    )

    @app.before_request
    def log_request() -> None:
        logger.debug("%s %s", request.method, request.full_path.rstrip("?"))

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        """Allow the browser client to call the API."""
        if request.path.startswith("/api/"):
            response.headers["Access-Control-Allow-Origin"] = config.client_url
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
            response.headers["Access-Control-Allow-Methods"] = (
                "GET, POST, PUT, PATCH, DELETE, OPTIONS"
            )
        return response

    register_error_handlers(app)

    # Register blueprints
    from bugtracker.web.routes.auth import auth_bp
    from bugtracker.web.routes.bugs import bugs_bp
    from bugtracker.web.routes.health import health_bp

    app.register_blueprint(bugs_bp, url_prefix="/api/bugs")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(health_bp, url_prefix="/api")

    return app
