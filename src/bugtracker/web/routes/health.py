from __future__ import annotations

from flask import Blueprint, jsonify

from bugtracker.service import utc_timestamp

health_bp = Blueprint("health", __name__)


@health_bp.route("/health")
def health():
    return jsonify(
        {"success": True, "message": "Server is running", "timestamp": utc_timestamp()}
    )
