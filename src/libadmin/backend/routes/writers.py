"""Writer routes — /api/writers/*."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from libadmin.backend.routes._helpers import json_body, require
from libadmin.backend.services.writer_service import WriterService

writers_bp = Blueprint("writers", __name__)


def _get_svc() -> WriterService:
    return WriterService(current_app.config["DB"], current_app.config["CACHE"])


@writers_bp.route("/", methods=["GET"])
def list_writers():
    return jsonify(_get_svc().list_writers())


@writers_bp.route("/<writer_id>", methods=["GET"])
def get_writer(writer_id: str):
    writer = _get_svc().get_writer(writer_id)
    if writer is None:
        return jsonify({"error": "Writer not found"}), 404
    return jsonify(writer)


@writers_bp.route("/", methods=["POST"])
def create_writer():
    data = json_body()
    require(data, "name")
    writer = _get_svc().create_writer(
        data["name"], data.get("nationality"),
        data.get("bio"), data.get("imageUrl"),
    )
    return jsonify(writer), 201


@writers_bp.route("/<writer_id>", methods=["PUT"])
def update_writer(writer_id: str):
    data = json_body()
    require(data, "name")
    writer = _get_svc().update_writer(
        writer_id, data["name"], data.get("nationality"),
        data.get("bio"), data.get("imageUrl"),
    )
    if writer is None:
        return jsonify({"error": "Writer not found"}), 404
    return jsonify(writer)


@writers_bp.route("/<writer_id>", methods=["DELETE"])
def delete_writer(writer_id: str):
    if not _get_svc().delete_writer(writer_id):
        return jsonify({"error": "Writer not found"}), 404
    return jsonify({"success": True})
