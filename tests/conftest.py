"""
Pytest configuration and fixtures.

Provides a Flask application backed by an in-memory SQLite database and the
mock provider, plus a mocked ``requests`` session so that no test ever
performs real HTTP.
"""

import pytest

from majorkey import create_app
from majorkey.infra.modulos import db
from tests.utils.test_helpers import make_http_response


@pytest.fixture
def app():
    """Create Flask app instance for testing.

    No configuration file is read; every key comes from the overrides below.

    Returns:
        Flask: Configured Flask application instance for testing.
    """
    test_app = create_app(config_filename=None, config_overrides={
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SEND_EMAIL': False,
        'EMAIL_SENDER': 'notes@majorkey.io',
        'EMAIL_SENDER_NAME': 'Major Key',
        'NOTES_RECIPIENT': 'me@majorkey.io',
        'NOTES_RECIPIENT_NAME': 'Me',
    })
    yield test_app
    with test_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_context(app):
    """Provide Flask application context.

    Yields:
        Flask: The application, with its context pushed.
    """
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mock_provider(app):
    """The MockProvider installed by the default configuration, emptied."""
    provider = app.extensions['email_service'].provider
    provider.clear_sent_emails()
    return provider


@pytest.fixture
def http():
    """Mocked ``requests.Session`` answering 202 with an empty body by default."""
    from unittest.mock import Mock
    import requests

    session = Mock(spec=requests.Session)
    session.request.return_value = make_http_response(202)
    return session
