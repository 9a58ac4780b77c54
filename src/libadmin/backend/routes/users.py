"""User routes — /api/users/*."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from libadmin.backend.routes._helpers import json_body, require
from libadmin.backend.services.user_service import UserService

users_bp = Blueprint("users", __name__)


def _get_svc() -> UserService:
    return UserService(current_app.config["DB"], current_app.config["CACHE"])


@users_bp.route("/", methods=["GET"])
def list_users():
    return jsonify(_get_svc().list_users())


@users_bp.route("/<user_id>", methods=["GET"])
def get_user(user_id: str):
    user = _get_svc().get_user(user_id)
    if user is None:
        return jsonify({"error": "User not found"}), 404
    return jsonify(user)


@users_bp.route("/", methods=["POST"])
def create_user():
    data = json_body()
    require(data, "name", "phone", "email")
    user = _get_svc().create_user(data["name"], data["phone"], data["email"])
    return jsonify(user), 201


@users_bp.route("/<user_id>", methods=["PUT"])
def update_user(user_id: str):
    data = json_body()
    require(data, "name", "phone", "email")
    user = _get_svc().update_user(
        user_id, data["name"], data["phone"], data["email"],
    )
    if user is None:
        return jsonify({"error": "User not found"}), 404
    return jsonify(user)


@users_bp.route("/<user_id>", methods=["DELETE"])
def delete_user(user_id: str):
    if not _get_svc().delete_user(user_id):
        return jsonify({"error": "User not found"}), 404
    return jsonify({"success": True})
