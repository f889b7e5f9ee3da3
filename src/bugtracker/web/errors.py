"""The one place where exceptions become HTTP responses.

Known errors keep their status and message. Anything else is logged and
reported as a generic 500; stack traces go into the body only in
development mode.
"""
from __future__ import annotations

import logging
import traceback
from typing import Any

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from bugtracker.errors import BugTrackerError

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong!"


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(BugTrackerError, handle_app_error)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_unexpected_error)


def handle_app_error(exc: BugTrackerError):
    logger.warning(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.path,
        exc.message,
    )
    return _respond(exc.to_dict(), exc.status_code, exc)


def handle_http_exception(exc: HTTPException):
    status = exc.code or 500
    if status == 404:
        message = f"Route {request.path} not found"
    else:
        message = exc.description or exc.name
    return _respond({"success": False, "message": message}, status, exc)


def handle_unexpected_error(exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return _respond({"success": False, "message": GENERIC_MESSAGE}, 500, exc)


def _respond(body: dict[str, Any], status: int, exc: BaseException):
    config = current_app.extensions["bugtracker_config"]
    if config.is_development:
        body = {
            **body,
            "error": type(exc).__name__,
            "stack": "".join(traceback.format_exception(exc)),
        }
    return jsonify(body), status
