"""Book request routes — /api/book-requests/*."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from libadmin.backend.routes._helpers import json_body, require
from libadmin.backend.services.book_request_service import BookRequestService

book_requests_bp = Blueprint("book_requests", __name__)


def _get_svc() -> BookRequestService:
    return BookRequestService(
        current_app.config["DB"], current_app.config["CACHE"],
    )


@book_requests_bp.route("/", methods=["GET"])
def list_requests():
    return jsonify(_get_svc().list_requests())


@book_requests_bp.route("/", methods=["POST"])
def create_request():
    data = json_body()
    require(data, "bookName", "requestDate")
    request = _get_svc().create_request(
        data["bookName"], data["requestDate"],
        data.get("categoryId") or None, data.get("authorName") or None,
    )
    return jsonify(request), 201


@book_requests_bp.route("/<request_id>", methods=["PUT"])
def update_request(request_id: str):
    data = json_body()
    require(data, "bookName", "requestDate", "status")
    try:
        request = _get_svc().update_request(
            request_id, data["bookName"], data["requestDate"], data["status"],
            data.get("categoryId") or None, data.get("authorName") or None,
        )
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    if request is None:
        return jsonify({"error": "Book request not found"}), 404
    return jsonify(request)


@book_requests_bp.route("/<request_id>", methods=["DELETE"])
def delete_request(request_id: str):
    if not _get_svc().delete_request(request_id):
        return jsonify({"error": "Book request not found"}), 404
    return jsonify({"success": True})
