"""Request parsing helpers shared by the resource blueprints."""

from __future__ import annotations

from typing import Any

from flask import abort, request


def json_body() -> dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    return data


def require(data: dict[str, Any], *fields: str) -> None:
    """Abort with 400 if any of *fields* is missing or blank."""
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        abort(400, description=f"Missing {', '.join(repr(f) for f in missing)}")
