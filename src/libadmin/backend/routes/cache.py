"""Cache monitoring routes — /api/cache/*."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from libadmin.backend.services.cache_service import CacheService

cache_bp = Blueprint("cache", __name__)


def _get_svc() -> CacheService:
    return CacheService(current_app.config["CACHE"])


@cache_bp.route("/stats", methods=["GET"])
def cache_stats():
    """Return the cache counters verbatim."""
    return jsonify(_get_svc().stats())


@cache_bp.route("/clear", methods=["POST"])
def clear_cache():
    """Drop every cached entry and reset the counters."""
    _get_svc().clear()
    return jsonify({"success": True, "message": "Cache cleared"})
