"""Flask application factory for the libadmin backend API."""

from __future__ import annotations

import logging
import sqlite3

from flask import Flask, jsonify
from flask_cors import CORS

from libadmin.backend.config import Config
from libadmin.backend.database import Database
from libadmin.cache import build_cache

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Register consistent JSON error handlers."""

    @app.errorhandler(400)
    def bad_request(exc):
        return jsonify({"error": str(exc.description)}), 400

    @app.errorhandler(404)
    def not_found(exc):
        return jsonify({"error": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(exc):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(sqlite3.IntegrityError)
    def integrity_error(exc):
        return jsonify({"error": f"Constraint violation: {exc}"}), 400

    @app.errorhandler(Exception)
    def unhandled(exc):
        app.logger.exception("Unhandled exception")
        return jsonify({"error": "Internal server error"}), 500


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application.

    The cache is built here, before any blueprint can use it, so an
    unknown ``CACHE_TYPE`` fails application startup.

    Parameters
    ----------
    config_class:
        Configuration class (default :class:`Config`).

    Returns
    -------
    Flask
        Configured Flask application.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # ── CORS ──────────────────────────────────────────────────────────
    CORS(app, resources={
        r"/api/*": {
            "origins": config_class.CORS_ORIGINS,
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        },
    })

    # ── Cache ─────────────────────────────────────────────────────────
    app.config["CACHE"] = build_cache(config_class)

    # ── Database ──────────────────────────────────────────────────────
    db = Database(config_class.DATABASE_PATH)
    app.config["DB"] = db

    @app.teardown_appcontext
    def _close_db(exc):
        db.close()

    # ── Blueprints ────────────────────────────────────────────────────
    from libadmin.backend.routes.book_requests import book_requests_bp
    from libadmin.backend.routes.books import books_bp
    from libadmin.backend.routes.cache import cache_bp
    from libadmin.backend.routes.categories import categories_bp
    from libadmin.backend.routes.issues import issues_bp
    from libadmin.backend.routes.users import users_bp
    from libadmin.backend.routes.writers import writers_bp

    app.register_blueprint(cache_bp, url_prefix="/api/cache")
    app.register_blueprint(books_bp, url_prefix="/api/books")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(categories_bp, url_prefix="/api/categories")
    app.register_blueprint(writers_bp, url_prefix="/api/writers")
    app.register_blueprint(issues_bp, url_prefix="/api/issues")
    app.register_blueprint(book_requests_bp, url_prefix="/api/book-requests")

    # ── Error handlers ────────────────────────────────────────────────
    register_error_handlers(app)

    # ── Health check ──────────────────────────────────────────────────
    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    logger.info(
        "libadmin backend ready (db=%s, cache=%s)",
        config_class.DATABASE_PATH, config_class.CACHE_TYPE,
    )
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
