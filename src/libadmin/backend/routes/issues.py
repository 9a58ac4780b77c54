"""Lending routes — /api/issues/*."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from libadmin.backend.routes._helpers import json_body, require
from libadmin.backend.services.issue_service import IssueService

issues_bp = Blueprint("issues", __name__)


def _get_svc() -> IssueService:
    return IssueService(current_app.config["DB"], current_app.config["CACHE"])


@issues_bp.route("/", methods=["GET"])
def list_issues():
    return jsonify(_get_svc().list_issues())


@issues_bp.route("/", methods=["POST"])
def issue_book():
    """Lend a book to a user."""
    data = json_body()
    require(data, "bookId", "userId", "issueDate", "dueDate")
    try:
        issue = _get_svc().issue_book(
            str(data["bookId"]), str(data["userId"]),
            data["issueDate"], data["dueDate"],
        )
    except LookupError as exc:
        return jsonify({"error": str(exc)}), 404
    return jsonify(issue), 201


@issues_bp.route("/<issue_id>", methods=["PUT"])
def update_issue(issue_id: str):
    """Mark an issue returned (or re-open it)."""
    data = json_body()
    require(data, "status")
    try:
        issue = _get_svc().update_issue(
            issue_id, data["status"], data.get("returnDate"),
        )
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    if issue is None:
        return jsonify({"error": "Issue not found"}), 404
    return jsonify(issue)
