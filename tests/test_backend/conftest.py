"""Fixtures for backend tests."""

from __future__ import annotations

import pytest

from libadmin.backend.app import create_app
from libadmin.backend.config import TestConfig


@pytest.fixture()
def app():
    """Create a test Flask application."""
    application = create_app(TestConfig)
    yield application
    application.config["CACHE"].close()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def db(app):
    """Direct access to the Database instance."""
    return app.config["DB"]


@pytest.fixture()
def cache(app):
    """Direct access to the application cache."""
    return app.config["CACHE"]
