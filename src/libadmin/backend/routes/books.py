"""Book routes — /api/books/*."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from libadmin.backend.routes._helpers import json_body, require
from libadmin.backend.services.book_service import BookService, DuplicateBookError

books_bp = Blueprint("books", __name__)

_BOOK_FIELDS = (
    "title", "isbn", "labelNumber", "barcode", "publicationYear",
    "totalCopies", "availableCopies", "imageUrl", "description",
    "ownerId", "bookType", "categoryIds", "writerIds",
)


def _get_svc() -> BookService:
    return BookService(current_app.config["DB"], current_app.config["CACHE"])


def _book_fields(data: dict) -> dict:
    return {k: data[k] for k in _BOOK_FIELDS if k in data}


@books_bp.route("/", methods=["GET"])
def list_books():
    """Return every book with owner, category and writer links."""
    return jsonify(_get_svc().list_books())


@books_bp.route("/search", methods=["GET"])
def search_books():
    """Search books by title, ISBN, label number or barcode."""
    term = request.args.get("q", "").strip()
    if not term:
        return jsonify({"error": "Missing 'q' parameter"}), 400
    return jsonify(_get_svc().search_books(term))


@books_bp.route("/<book_id>", methods=["GET"])
def get_book(book_id: str):
    book = _get_svc().get_book(book_id)
    if book is None:
        return jsonify({"error": "Book not found"}), 404
    return jsonify(book)


@books_bp.route("/", methods=["POST"])
def create_book():
    data = json_body()
    require(data, "title")
    try:
        book = _get_svc().create_book(_book_fields(data))
    except DuplicateBookError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify(book), 201


@books_bp.route("/<book_id>", methods=["PUT"])
def update_book(book_id: str):
    data = json_body()
    try:
        book = _get_svc().update_book(book_id, _book_fields(data))
    except DuplicateBookError as exc:
        return jsonify({"error": str(exc)}), 400
    if book is None:
        return jsonify({"error": "Book not found"}), 404
    return jsonify(book)


@books_bp.route("/<book_id>", methods=["DELETE"])
def delete_book(book_id: str):
    if not _get_svc().delete_book(book_id):
        return jsonify({"error": "Book not found"}), 404
    return jsonify({"success": True})
