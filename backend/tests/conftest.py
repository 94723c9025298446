"""Pytest fixtures for the registration API.

Each test gets a fresh schema on an in-memory SQLite database so data changes
never leak between cases.
"""

from __future__ import annotations

import os

import pytest
from userapi.core.config import TestingConfig
from userapi.core.extensions import db as _db
from userapi.factory import create_app


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Keeps log output to warnings and above.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture()
def db(app):
    """Create the tables for one test and drop them afterwards.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application, inside an
        active application context.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db):
    """Return the Flask-scoped session used by repositories and services."""
    return db.session


@pytest.fixture()
def client(app, db):
    """Return a Flask test client backed by a fresh schema."""
    return app.test_client()


@pytest.fixture()
def cli_runner(app, db):
    """Return a Click runner bound to the Flask app."""
    return app.test_cli_runner()


@pytest.fixture()
def valid_payload():
    """A JSON body that passes every check."""
    return {
        "username": "amine.bou",
        "birthdate": "2000-01-01",
        "countryOfResidence": "France",
        "phoneNumber": "0612345678",
        "gender": "MALE",
    }


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "db" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
