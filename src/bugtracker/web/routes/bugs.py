from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from bugtracker.query.builder import build_query

bugs_bp = Blueprint("bugs", __name__)


def _json_body():
    """The request JSON, or None when the body is missing or not JSON."""
    return request.get_json(silent=True)


@bugs_bp.route("", methods=["GET"])
def list_bugs():
    """List bugs with filtering, sorting and pagination."""
    config = current_app.extensions["bugtracker_config"]
    query = build_query(
        request.args,
        default_limit=config.default_page_size,
        max_limit=config.max_page_size,
    )
    page = current_app.extensions["query_executor"].execute(query)
    return jsonify(page.to_dict())


@bugs_bp.route("", methods=["POST"])
def create_bug():
    """Create a bug; the server assigns id, timestamps and defaults."""
    bug = current_app.extensions["bug_service"].create(_json_body())
    return jsonify({"success": True, "data": bug.to_dict()}), 201


@bugs_bp.route("/stats/summary")
def stats_summary():
    """Collection-wide counts for the dashboard."""
    stats = current_app.extensions["aggregator"].summary()
    return jsonify({"success": True, "data": stats.to_dict()})


@bugs_bp.route("/<bug_id>", methods=["GET"])
def get_bug(bug_id: str):
    bug = current_app.extensions["query_executor"].get(bug_id)
    return jsonify({"success": True, "data": bug.to_dict()})


@bugs_bp.route("/<bug_id>", methods=["PUT"])
def update_bug(bug_id: str):
    bug = current_app.extensions["bug_service"].update(bug_id, _json_body())
    return jsonify({"success": True, "data": bug.to_dict()})


@bugs_bp.route("/<bug_id>/status", methods=["PATCH"])
def update_bug_status(bug_id: str):
    bug = current_app.extensions["bug_service"].update_status(bug_id, _json_body())
    return jsonify({"success": True, "data": bug.to_dict()})


@bugs_bp.route("/<bug_id>/priority", methods=["PATCH"])
def update_bug_priority(bug_id: str):
    bug = current_app.extensions["bug_service"].update_priority(bug_id, _json_body())
    return jsonify({"success": True, "data": bug.to_dict()})


@bugs_bp.route("/<bug_id>", methods=["DELETE"])
def delete_bug(bug_id: str):
    current_app.extensions["bug_service"].delete(bug_id)
    return jsonify({"success": True, "data": {}})
