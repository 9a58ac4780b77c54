"""Category routes — /api/categories/*."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from libadmin.backend.routes._helpers import json_body, require
from libadmin.backend.services.category_service import CategoryService

categories_bp = Blueprint("categories", __name__)


def _get_svc() -> CategoryService:
    return CategoryService(current_app.config["DB"], current_app.config["CACHE"])


@categories_bp.route("/", methods=["GET"])
def list_categories():
    return jsonify(_get_svc().list_categories())


@categories_bp.route("/<category_id>", methods=["GET"])
def get_category(category_id: str):
    category = _get_svc().get_category(category_id)
    if category is None:
        return jsonify({"error": "Category not found"}), 404
    return jsonify(category)


@categories_bp.route("/", methods=["POST"])
def create_category():
    data = json_body()
    require(data, "name")
    category = _get_svc().create_category(
        data["name"], data.get("description"), data.get("abbreviation"),
    )
    return jsonify(category), 201


@categories_bp.route("/<category_id>", methods=["PUT"])
def update_category(category_id: str):
    data = json_body()
    require(data, "name")
    category = _get_svc().update_category(
        category_id, data["name"],
        data.get("description"), data.get("abbreviation"),
    )
    if category is None:
        return jsonify({"error": "Category not found"}), 404
    return jsonify(category)


@categories_bp.route("/<category_id>", methods=["DELETE"])
def delete_category(category_id: str):
    if not _get_svc().delete_category(category_id):
        return jsonify({"error": "Category not found"}), 404
    return jsonify({"success": True})
