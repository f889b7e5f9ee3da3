from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from bugtracker.web.security import current_user, require_auth

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    user, token = current_app.extensions["auth_service"].register(
        request.get_json(silent=True)
    )
    return jsonify(
        {"success": True, "token": token, "user": user.to_public_dict()}
    ), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    user, token = current_app.extensions["auth_service"].login(
        request.get_json(silent=True)
    )
    return jsonify({"success": True, "token": token, "user": user.to_public_dict()})


@auth_bp.route("/me")
@require_auth
def me():
    """Return the user the bearer token belongs to."""
    return jsonify({"success": True, "data": current_user().to_public_dict()})
